"""Build and render :class:`~variantcli.models.ComplexInterfaceInfo` trees.

Structured parameters reference a :class:`~variantcli.models.TypeSchema` in
the type arena.  The tree is built depth-first; the type identifiers on the
current path are tracked in a ``path`` set, and a property whose type is
already on the path becomes a leaf instead of being expanded again.  A new
set is created for every branch so sibling properties do not interfere with
each other, and the traversal terminates on self-referential schemas.
"""

from __future__ import annotations

from typing import Optional

from variantcli.docs.text import syntax_type_name
from variantcli.exceptions import ConstructionError
from variantcli.models import (
    ComplexInterfaceInfo,
    ParameterGroup,
    TypeRegistry,
    is_switch_type,
)

COMPLEX_PARAMETER_HEADER = (
    "COMPLEX PARAMETER PROPERTIES\n"
    "To create the parameters described below, construct an object containing "
    "the appropriate properties.\n\n"
)


def build_complex_interface_info(
    name: str,
    type_tag: str,
    type_id: Optional[str],
    registry: TypeRegistry,
    required: bool = False,
    description: str = "",
    path: frozenset[str] = frozenset(),
) -> ComplexInterfaceInfo:
    """Describe the shape of *type_id* recursively.

    Args:
        name: Name of the parameter or property being described.
        type_tag: Its type tag as shown in syntax.
        type_id: Identifier of its schema in *registry*, or ``None`` for a
            scalar.
        registry: The type arena.
        required: Whether the property must be supplied.
        description: Help text of the property.
        path: Type identifiers already expanded on the way to this node.

    Raises:
        ConstructionError: If *type_id* is not in *registry*.
    """
    if type_id is None or type_id in path:
        return ComplexInterfaceInfo(
            name=name, type=type_tag, required=required, description=description, type_id=type_id
        )

    schema = registry.get(type_id)
    if schema is None:
        raise ConstructionError(f"Property '{name}' references unknown type '{type_id}'")

    branch = path | {type_id}
    nested = tuple(
        build_complex_interface_info(
            prop.name,
            prop.type,
            prop.type_id,
            registry,
            required=prop.required,
            description=prop.description,
            path=branch,
        )
        for prop in schema.properties
    )
    return ComplexInterfaceInfo(
        name=name,
        type=type_tag,
        required=required,
        description=description or schema.description,
        type_id=type_id,
        nested=nested,
    )


def parameter_group_info(group: ParameterGroup, registry: TypeRegistry) -> ComplexInterfaceInfo:
    """The shape tree of a structured parameter group."""
    return build_complex_interface_info(
        group.name,
        group.type,
        group.complex_type,
        registry,
        required=all(m.parameter.mandatory for m in group.members),
        description=group.help_message,
    )


def count_nodes(info: ComplexInterfaceInfo) -> int:
    return 1 + sum(count_nodes(child) for child in info.nested)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def info_property_syntax(info: ComplexInterfaceInfo) -> str:
    """``Name <Type>`` for required properties, ``[Name <Type>]`` otherwise."""
    left = "" if info.required else "["
    right = "" if info.required else "]"
    type_text = f" <{syntax_type_name(info.type)}>" if not is_switch_type(info.type) else ""
    return f"{left}{info.name}{type_text}{right}"


def render_note(
    info: ComplexInterfaceInfo,
    half_indent: str = "  ",
    dashes: bool = True,
    backticks: bool = False,
) -> list[str]:
    """Render a note as lines: the top entry unadorned, nested entries indented.

    Each nesting level adds one *half_indent*.  Nested entries are prefixed
    with ``- `` when *dashes* is set and wrapped in backticks when
    *backticks* is set.
    """
    lines: list[str] = []
    _render_into(lines, info, "", half_indent, dashes, backticks, is_first=True)
    return lines


def _render_into(
    lines: list[str],
    info: ComplexInterfaceInfo,
    indent: str,
    half_indent: str,
    dashes: bool,
    backticks: bool,
    is_first: bool,
) -> None:
    lines.append(_render_entry(info, indent, dashes and not is_first, backticks and not is_first))
    nested_indent = f"{indent}{half_indent}"
    for child in info.nested:
        if child.is_complex_interface:
            _render_into(lines, child, nested_indent, half_indent, dashes, backticks, is_first=False)
        else:
            lines.append(_render_entry(child, nested_indent, dashes, backticks))


def _render_entry(info: ComplexInterfaceInfo, indent: str, dash: bool, backtick: bool) -> str:
    tick = "`" if backtick else ""
    bullet = "- " if dash else ""
    return f"{indent}{bullet}{tick}{info_property_syntax(info)}{tick}: {info.description}".rstrip()
