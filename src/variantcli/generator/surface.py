"""Assemble the complete proxy of a merged command.

This module ties the generator together.  For one
:class:`~variantcli.models.VariantGroup` it produces a
:class:`GeneratedSurface` holding:

* the emit directives of the proxy (help comment, command-level attributes,
  the parameter block and the begin/process/end phases);
* the :class:`~variantcli.generator.resolver.ParameterSetResolver` and
  :class:`~variantcli.generator.forwarder.ForwardingPlan` used at runtime;
* the synthesized :class:`~variantcli.docs.synthesizer.HelpDocument`.

:func:`generate_all` runs :func:`build_surface` over many independent
commands.  A command whose variants cannot be merged is reported in its
:class:`GroupResult` and never aborts the others.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from variantcli.docs.complex_info import COMPLEX_PARAMETER_HEADER
from variantcli.docs.synthesizer import HelpDocument, synthesize
from variantcli.exceptions import ConstructionError
from variantcli.generator.attributes import (
    alias_attribute,
    argument_completer_attribute,
    category_attribute,
    cmdlet_binding,
    description_attribute,
    info_attribute,
    output_type_attribute,
    parameter_attributes,
    parameter_type_attribute,
    profile_attribute,
    validate_not_null_attribute,
)
from variantcli.generator.builder import build_variant_group
from variantcli.generator.emit import (
    Attribute,
    AttributeSpec,
    Block,
    Directive,
    Literal,
    Renderer,
    TextRenderer,
    directive_to_dict,
)
from variantcli.generator.forwarder import (
    ForwardingPlan,
    build_forwarding_directives,
    build_forwarding_plan,
)
from variantcli.generator.resolver import ParameterSetResolver
from variantcli.models import (
    CommandSpec,
    GenerationConfig,
    ParameterGroup,
    TypeRegistry,
    VariantGroup,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedSurface:
    """Everything generated for one merged command."""

    group: VariantGroup
    directives: tuple[Directive, ...]
    resolver: ParameterSetResolver
    plan: ForwardingPlan
    help: HelpDocument

    @property
    def command_name(self) -> str:
        return self.group.command_name

    def render(self, renderer: Optional[Renderer] = None) -> str:
        """Render the proxy with *renderer* (the generic text renderer by default)."""
        return (renderer or TextRenderer()).render(self.directives)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view: directives, dispatch plan and help document."""
        return {
            "command": self.command_name,
            "default_parameter_set": self.group.default_parameter_set_name,
            "diagnostics": list(self.group.diagnostics),
            "plan": {
                "mapping": dict(self.plan.mapping),
                "unconditional": self.plan.unconditional,
                "buffer_parameter": self.plan.buffer_parameter,
            },
            "directives": [directive_to_dict(d) for d in self.directives],
            "help": self.help.model_dump(mode="json"),
        }


@dataclass(frozen=True)
class GroupResult:
    """Outcome of one command in :func:`generate_all`.

    Exactly one of ``surface`` and ``error`` is set.
    """

    command_name: str
    surface: Optional[GeneratedSurface] = None
    error: Optional[ConstructionError] = None

    @property
    def ok(self) -> bool:
        return self.surface is not None


def renderer_for(config: GenerationConfig) -> TextRenderer:
    """The text renderer configured by the ``generation`` settings."""
    return TextRenderer(half_indent=config.half_indent, item_separator=config.item_separator)


def build_surface(
    group: VariantGroup,
    registry: Optional[TypeRegistry] = None,
    config: Optional[GenerationConfig] = None,
) -> GeneratedSurface:
    """Build the proxy directives, dispatch data and help of *group*.

    Args:
        group: The merged command.
        registry: Type arena for structured parameters.
        config: Rendering settings; defaults apply when omitted.

    Raises:
        ConstructionError: If a structured parameter references a type that
            is not in *registry*.
    """
    config = config or GenerationConfig()
    resolver = ParameterSetResolver.from_group(group)
    plan = build_forwarding_plan(resolver)
    document = synthesize(
        group,
        registry=registry if config.include_complex_notes else None,
        half_indent=" " * config.half_indent,
        backticks=config.backticks,
    )

    body: list[Directive] = []
    body.extend(_attributes(output_type_attribute(group.output_types)))
    for profile in group.profiles:
        body.extend(_attributes(profile_attribute(profile)))
    body.extend(_attributes(description_attribute(group.description)))
    body.append(Attribute(cmdlet_binding(group, confirm_impact=config.confirm_impact)))
    body.append(_parameter_block(group))
    body.append(Literal())
    body.extend(build_forwarding_directives(plan))

    directives = (
        Block(
            f"function {group.command_name} {{",
            tuple([*help_comment(document), *body]),
        ),
    )
    return GeneratedSurface(
        group=group,
        directives=directives,
        resolver=resolver,
        plan=plan,
        help=document,
    )


def generate_command(
    spec: CommandSpec,
    registry: Optional[TypeRegistry] = None,
    config: Optional[GenerationConfig] = None,
) -> GeneratedSurface:
    """Merge the variants of *spec* and build its surface."""
    try:
        group = build_variant_group(spec.name, spec.variants)
        return build_surface(group, registry, config)
    except ConstructionError as exc:
        if exc.command_name is None:
            exc.command_name = spec.name
        raise


def generate_all(
    specs: Sequence[CommandSpec],
    registry: Optional[TypeRegistry] = None,
    config: Optional[GenerationConfig] = None,
    max_workers: Optional[int] = None,
) -> list[GroupResult]:
    """Generate every command in *specs*, isolating failures per command.

    Commands share no mutable state, so with ``max_workers`` greater than 1
    they are generated on a bounded thread pool.  Results are returned in
    input order either way.

    Example::

        results = generate_all(document.commands, document.types, max_workers=4)
        failed = [r.command_name for r in results if not r.ok]
    """

    def run(spec: CommandSpec) -> GroupResult:
        try:
            return GroupResult(spec.name, surface=generate_command(spec, registry, config))
        except ConstructionError as exc:
            logger.warning("Skipping command '%s': %s", spec.name, exc)
            return GroupResult(spec.name, error=exc)

    if max_workers is None or max_workers <= 1 or len(specs) <= 1:
        return [run(spec) for spec in specs]

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="variantcli") as pool:
        return list(pool.map(run, specs))


# ---------------------------------------------------------------------------
# Help comment
# ---------------------------------------------------------------------------


def help_comment(document: HelpDocument) -> list[Directive]:
    """The help comment block placed at the top of a proxy."""
    sections: list[tuple[str, list[str]]] = [
        (".Synopsis", [document.synopsis]),
        (".Description", document.description.splitlines()),
        (".Example", [document.example]),
    ]
    sections.extend((".Inputs", [item]) for item in document.inputs)
    sections.extend((".Outputs", [item]) for item in document.outputs)
    if document.notes:
        note_lines = COMPLEX_PARAMETER_HEADER.rstrip("\n").splitlines()
        note_lines.append("")
        for note in document.notes:
            note_lines.extend(note.lines)
            note_lines.append("")
        sections.append((".Notes", note_lines[:-1]))
    sections.append((".Link", [document.link]))

    lines: list[Directive] = [Literal("<#")]
    for keyword, content in sections:
        if not any(line.strip() for line in content):
            continue
        lines.append(Literal(keyword))
        lines.extend(Literal(line) for line in content)
    lines.append(Literal("#>"))
    return lines


# ---------------------------------------------------------------------------
# Parameter block
# ---------------------------------------------------------------------------


def _parameter_block(group: VariantGroup) -> Block:
    children: list[Directive] = []
    count = len(group.parameter_groups)
    for index, pg in enumerate(group.parameter_groups):
        children.extend(parameter_directives(pg, group.has_multiple_variants))
        last = index == count - 1
        children.append(Literal(pg.name if last else f"{pg.name},"))
        if not last:
            children.append(Literal())
    return Block("param(", tuple(children), footer=")")


def parameter_directives(pg: ParameterGroup, has_multiple_variants: bool) -> list[Directive]:
    """Help comment lines and attributes preceding one parameter."""
    directives: list[Directive] = [
        Literal(f"# {line.strip()}") for line in pg.help_message.splitlines() if line.strip()
    ]
    directives.extend(
        Attribute(spec) for spec in parameter_attributes(pg, has_multiple_variants)
    )
    directives.extend(_attributes(alias_attribute(pg.aliases)))
    directives.extend(_attributes(validate_not_null_attribute(pg.has_validate_not_null)))
    directives.extend(_attributes(argument_completer_attribute(pg)))
    directives.append(Attribute(category_attribute(pg.category)))
    info = next((m.parameter.info for m in pg.members if m.parameter.info is not None), None)
    if info is not None:
        directives.append(Attribute(info_attribute(info)))
    directives.append(Attribute(parameter_type_attribute(pg.type)))
    return directives


def _attributes(spec: Optional[AttributeSpec]) -> list[Directive]:
    return [Attribute(spec)] if spec is not None else []
