"""Explicit attribute structs for the metadata a generated proxy carries.

Each builder returns an :class:`~variantcli.generator.emit.AttributeSpec`
listing every option the attribute recognises, with the option's value and
its presence condition.  Builders return ``None`` when the attribute as a
whole is absent (no aliases, no output types, ...).  How an attribute is
spelled is left to the renderer.
"""

from __future__ import annotations

from typing import Optional, Sequence

from variantcli.generator.builder import is_valid_default_parameter_set_name
from variantcli.generator.emit import AttributeOption, AttributeSpec, ScriptBlock, TypeRef
from variantcli.docs.text import to_single_line
from variantcli.models import (
    NO_PROFILES,
    ParameterCategory,
    ParameterGroup,
    ParameterMember,
    PropertyInfo,
    VariantGroup,
)


def cmdlet_binding(group: VariantGroup, confirm_impact: str = "Medium") -> AttributeSpec:
    """Command-level binding: default set, positional binding, should-process."""
    default_name = group.default_parameter_set_name
    return AttributeSpec(
        name="CmdletBinding",
        options=(
            AttributeOption(
                "DefaultParameterSetName",
                default_name,
                present=is_valid_default_parameter_set_name(default_name),
            ),
            AttributeOption("PositionalBinding", False),
            AttributeOption("SupportsShouldProcess", present=group.supports_should_process),
            AttributeOption("ConfirmImpact", confirm_impact, present=group.supports_should_process),
        ),
    )


def parameter_attribute(
    member: ParameterMember,
    has_multiple_variants: bool,
    has_all_variants: bool,
) -> AttributeSpec:
    """Per-parameter-set binding options of one member parameter.

    ``ParameterSetName`` is present only for exclusive parameters of a
    multi-variant group; common parameters apply to every set.
    """
    param = member.parameter
    return AttributeSpec(
        name="Parameter",
        options=(
            AttributeOption(
                "ParameterSetName",
                member.variant_name,
                present=has_multiple_variants and not has_all_variants,
            ),
            AttributeOption("Position", param.position, present=param.position is not None),
            AttributeOption("Mandatory", present=param.mandatory),
            AttributeOption("DontShow", present=param.dont_show),
            AttributeOption("ValueFromPipeline", present=param.value_from_pipeline),
            AttributeOption("HelpMessage", param.help_message, present=bool(param.help_message)),
        ),
    )


def parameter_attributes(
    parameter_group: ParameterGroup,
    has_multiple_variants: bool,
) -> list[AttributeSpec]:
    """All ``Parameter`` attributes of a parameter group.

    A common group emits one attribute from its first member; an exclusive
    group emits one per member.
    """
    has_all = parameter_group.has_all_variants_in_parameter_group
    members = parameter_group.members[:1] if has_all else parameter_group.members
    return [parameter_attribute(m, has_multiple_variants, has_all) for m in members]


def alias_attribute(aliases: Sequence[str]) -> Optional[AttributeSpec]:
    if not aliases:
        return None
    return AttributeSpec("Alias", tuple(AttributeOption(None, a) for a in aliases))


def validate_not_null_attribute(has_validate_not_null: bool) -> Optional[AttributeSpec]:
    if not has_validate_not_null:
        return None
    return AttributeSpec("ValidateNotNull")


def argument_completer_attribute(parameter_group: ParameterGroup) -> Optional[AttributeSpec]:
    """Completer bound to a parameter: its script, or completion by value type."""
    completer = parameter_group.completer
    if completer is None:
        return None
    if completer.script:
        value = ScriptBlock(to_single_line(completer.script, "; "))
    else:
        value = TypeRef(_unwrap_type(parameter_group.type))
    return AttributeSpec("ArgumentCompleter", (AttributeOption(None, value),))


def parameter_type_attribute(type_tag: str) -> AttributeSpec:
    return AttributeSpec(type_tag, bare=True)


def output_type_attribute(output_types: Sequence[str]) -> Optional[AttributeSpec]:
    if not output_types:
        return None
    return AttributeSpec("OutputType", tuple(AttributeOption(None, t) for t in output_types))


def profile_attribute(profile: Optional[str]) -> Optional[AttributeSpec]:
    if not profile or profile == NO_PROFILES:
        return None
    return AttributeSpec("Profile", (AttributeOption(None, profile),))


def description_attribute(description: str) -> Optional[AttributeSpec]:
    if not description:
        return None
    return AttributeSpec("Description", (AttributeOption(None, description),))


def category_attribute(category: ParameterCategory) -> AttributeSpec:
    return AttributeSpec("Category", (AttributeOption(None, category.value),))


def info_attribute(info: PropertyInfo) -> AttributeSpec:
    """Serialisation metadata of a body property."""
    return AttributeSpec(
        name="Info",
        options=(
            AttributeOption(
                "SerializedName", info.serialized_name, present=info.serialized_name is not None
            ),
            AttributeOption("Required", present=info.required),
            AttributeOption("ReadOnly", present=info.read_only),
            AttributeOption(
                "PossibleTypes",
                tuple(TypeRef(t) for t in info.possible_types),
                present=bool(info.possible_types),
            ),
            AttributeOption("Description", info.description, present=bool(info.description)),
        ),
    )


def _unwrap_type(type_tag: str) -> str:
    """Element type of array and nullable tags (``string[]`` -> ``string``)."""
    tag = type_tag
    while tag.endswith("[]") or tag.endswith("?"):
        tag = tag[:-2] if tag.endswith("[]") else tag[:-1]
    return tag
