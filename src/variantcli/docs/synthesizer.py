"""Derive the help document of a merged command.

:func:`synthesize` turns a :class:`~variantcli.models.VariantGroup` into a
:class:`HelpDocument`: synopsis and description, one
:class:`ParameterHelp` per parameter group, one :class:`SyntaxLine` per
variant, and a :class:`ComplexNote` per structured parameter.  The document
is plain data; :mod:`variantcli.docs.markdown` and the proxy surface render
it.

Rules:

* Syntax tokens of a variant are ordered positional mandatory parameters
  (by position), then named mandatory parameters, then optional parameters;
  input order is kept inside each bucket.
* Switch parameters carry no ``<Type>`` annotation.
* Parameter help entries are sorted by parameter name.
* Help text of a parameter shared by several variants comes from the first
  variant in input order; texts are never merged.
* The same group always produces an identical document.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from variantcli.docs.complex_info import parameter_group_info, render_note
from variantcli.docs.text import syntax_type_name, to_single_line
from variantcli.models import (
    ComplexInterfaceInfo,
    Parameter,
    ParameterGroup,
    TypeRegistry,
    Variant,
    VariantGroup,
)

ALL_SETS_LABEL = "(All)"


class ParameterHelp(BaseModel):
    """Help entry of one parameter group."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    description: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()
    parameter_sets: tuple[str, ...] = (ALL_SETS_LABEL,)
    required: bool = False
    position: str = "named"
    pipeline_input: bool = False
    default_value: Optional[str] = None
    globbing: bool = False
    dynamic: bool = False
    dont_show: bool = False


class SyntaxLine(BaseModel):
    """Usage line of one variant."""

    model_config = ConfigDict(frozen=True)

    variant_name: str
    text: str
    is_default: bool = False


class ComplexNote(BaseModel):
    """Shape documentation of one structured parameter."""

    model_config = ConfigDict(frozen=True)

    parameter_name: str
    info: ComplexInterfaceInfo
    lines: tuple[str, ...]


class HelpDocument(BaseModel):
    """Render-ready documentation tree of one command."""

    model_config = ConfigDict(frozen=True)

    command_name: str
    synopsis: str = ""
    description: str = ""
    example: str = ""
    link: str = ""
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()
    parameters: tuple[ParameterHelp, ...] = ()
    syntax: tuple[SyntaxLine, ...] = ()
    notes: tuple[ComplexNote, ...] = ()


def synthesize(
    group: VariantGroup,
    registry: Optional[TypeRegistry] = None,
    half_indent: str = "  ",
    backticks: bool = False,
) -> HelpDocument:
    """Build the :class:`HelpDocument` of *group*.

    Args:
        group: The merged command.
        registry: Type arena for structured parameters.  Without it, no
            complex notes are produced.
        half_indent: Indentation added per nesting level in notes.
        backticks: Wrap nested note entries in backticks.

    Raises:
        ConstructionError: If a structured parameter references a type that
            is not in *registry*.
    """
    description = group.description
    return HelpDocument(
        command_name=group.command_name,
        synopsis=_synopsis(description),
        description=description,
        example=f"To view examples, see: {group.link}" if group.link else "",
        link=group.link,
        inputs=_pipeline_input_types(group),
        outputs=group.output_types,
        parameters=tuple(
            sorted(
                (_parameter_help(group, pg) for pg in group.parameter_groups),
                key=lambda p: p.name,
            )
        ),
        syntax=tuple(
            SyntaxLine(
                variant_name=v.name,
                text=syntax_line(group.command_name, v),
                is_default=v.name == group.default_parameter_set_name,
            )
            for v in group.variants
        ),
        notes=_complex_notes(group, registry, half_indent, backticks)
        if registry is not None
        else (),
    )


# ---------------------------------------------------------------------------
# Syntax
# ---------------------------------------------------------------------------


def order_syntax_parameters(parameters: tuple[Parameter, ...]) -> list[Parameter]:
    """Positional mandatory (by position), named mandatory, then optional."""
    positional = sorted(
        (p for p in parameters if p.mandatory and p.position is not None),
        key=lambda p: p.position,  # type: ignore[arg-type,return-value]
    )
    named = [p for p in parameters if p.mandatory and p.position is None]
    optional = [p for p in parameters if not p.mandatory]
    return positional + named + optional


def property_syntax(parameter: Parameter) -> str:
    """Syntax token of one parameter, e.g. ``[-Tag <string>]`` or ``[-Value] <int>``."""
    left_optional = "[" if not parameter.mandatory else ""
    right_optional = "]" if not parameter.mandatory else ""
    left_positional = "[" if parameter.position is not None else ""
    right_positional = "]" if parameter.position is not None else ""
    type_text = "" if parameter.is_switch else f" <{syntax_type_name(parameter.type)}>"
    return (
        f"{left_optional}{left_positional}-{parameter.name}{right_positional}"
        f"{type_text}{right_optional}"
    )


def syntax_line(command_name: str, variant: Variant) -> str:
    tokens = [property_syntax(p) for p in order_syntax_parameters(variant.parameters)]
    return " ".join([command_name, *tokens])


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def _synopsis(description: str) -> str:
    for line in description.splitlines():
        if line.strip():
            return line.strip()
    return ""


def _pipeline_input_types(group: VariantGroup) -> tuple[str, ...]:
    types: dict[str, None] = {}
    for pg in group.parameter_groups:
        if pg.value_from_pipeline:
            types.setdefault(pg.type, None)
    return tuple(types)


def _parameter_help(group: VariantGroup, pg: ParameterGroup) -> ParameterHelp:
    params = [m.parameter for m in pg.members]
    first = params[0]
    if group.has_multiple_variants and not pg.has_all_variants_in_parameter_group:
        parameter_sets = pg.variant_names
    else:
        parameter_sets = (ALL_SETS_LABEL,)
    return ParameterHelp(
        name=pg.name,
        type=syntax_type_name(pg.type),
        description=tuple(line for line in pg.help_message.splitlines() if line.strip()),
        aliases=pg.aliases,
        parameter_sets=parameter_sets,
        required=all(p.mandatory for p in params),
        position=str(first.position) if first.position is not None else "named",
        pipeline_input=pg.value_from_pipeline,
        default_value=_format_default(pg.default_value),
        globbing=any(p.validation.globbing for p in params),
        dynamic=any(p.validation.dynamic for p in params),
        dont_show=pg.dont_show,
    )


def _format_default(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    return to_single_line(str(value))


def _complex_notes(
    group: VariantGroup,
    registry: TypeRegistry,
    half_indent: str,
    backticks: bool,
) -> tuple[ComplexNote, ...]:
    notes = []
    structured = sorted(
        (pg for pg in group.parameter_groups if pg.is_complex_interface),
        key=lambda pg: pg.name,
    )
    for pg in structured:
        info = parameter_group_info(pg, registry)
        notes.append(
            ComplexNote(
                parameter_name=pg.name,
                info=info,
                lines=tuple(render_note(info, half_indent=half_indent, backticks=backticks)),
            )
        )
    return tuple(notes)
