"""Merge the variants of one command into a :class:`~variantcli.models.VariantGroup`.

This is the core algorithm of variantcli.  It takes the ordered variants
sharing one external command name and computes, once, everything the
resolver, the forwarder and the documentation synthesizer need.

**Algorithm summary**

1. Reject structurally invalid input (no variants, duplicate variant names,
   duplicate parameter names within a variant).
2. Group parameters by their ``(name, type)`` identity in first-seen order;
   names compare case-insensitively.
3. Tag each group: *common* when every variant declares it (no parameter-set
   name), *exclusive* when exactly one variant of a multi-variant group does
   (parameter-set name = that variant's name).  Any other membership is
   ambiguous and aborts the group.
4. Choose the default parameter set: the all-sets sentinel for a single
   variant, otherwise the one variant flagged ``is_default``.  Zero or
   several flagged variants leave the default unset and record an
   :class:`~variantcli.exceptions.AmbiguousDefaultError`.
5. Aggregate group-level flags and texts.

Output depends only on input order, so repeated builds are identical.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Optional, Sequence

from variantcli.exceptions import AmbiguousDefaultError, ConstructionError
from variantcli.models import (
    ALL_PARAMETER_SETS,
    NO_PARAMETERS,
    ParameterGroup,
    ParameterMember,
    Variant,
    VariantGroup,
)

logger = logging.getLogger(__name__)


def build_variant_group(command_name: str, variants: Sequence[Variant]) -> VariantGroup:
    """Build the merged :class:`~variantcli.models.VariantGroup` for one command.

    Args:
        command_name: The external command name shared by all *variants*.
        variants: The variants in their original input order.

    Returns:
        A frozen variant group with parameter groups, default parameter set,
        aggregate flags and any recoverable diagnostics.

    Raises:
        ConstructionError: If the variants violate the common/exclusive
            parameter-set model or contain duplicate names.

    Example::

        group = build_variant_group("Get-Widget", [by_name, by_tag])
        [pg.parameter_set_name for pg in group.parameter_groups]
        # [None, 'ByName', 'ByTag']
    """
    variants = tuple(variants)
    _check_variants(command_name, variants)

    parameter_groups = _build_parameter_groups(command_name, variants)
    default_name, diagnostics = _select_default_parameter_set(command_name, variants)
    primary = _primary_variant(variants, default_name)

    group = VariantGroup(
        command_name=command_name,
        variants=variants,
        parameter_groups=parameter_groups,
        default_parameter_set_name=default_name,
        supports_should_process=any(v.supports_should_process for v in variants),
        description=primary.description,
        link=primary.link,
        output_types=_ordered_union(v.output_types for v in variants),
        profiles=_ordered_union(((v.profile,) if v.profile else ()) for v in variants),
        diagnostics=diagnostics,
    )
    logger.debug(
        "Built variant group '%s': %d variants, %d parameter groups, default=%s",
        command_name,
        len(variants),
        len(parameter_groups),
        default_name,
    )
    return group


def is_valid_default_parameter_set_name(name: Optional[str]) -> bool:
    """Return ``True`` when *name* should be emitted as a default parameter set."""
    return bool(name) and name != NO_PARAMETERS


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _check_variants(command_name: str, variants: tuple[Variant, ...]) -> None:
    if not variants:
        raise ConstructionError(
            f"Command '{command_name}' has no variants", command_name=command_name
        )

    seen_variants: set[str] = set()
    for variant in variants:
        if variant.name in seen_variants:
            raise ConstructionError(
                f"Command '{command_name}' declares variant '{variant.name}' more than once",
                command_name=command_name,
            )
        seen_variants.add(variant.name)

        seen_params: set[str] = set()
        for param in variant.parameters:
            # Parameter names bind case-insensitively.
            key = param.name.lower()
            if key in seen_params:
                raise ConstructionError(
                    f"Variant '{variant.name}' of '{command_name}' declares "
                    f"parameter '{param.name}' more than once",
                    command_name=command_name,
                )
            seen_params.add(key)


# ---------------------------------------------------------------------------
# Parameter grouping
# ---------------------------------------------------------------------------


def _build_parameter_groups(
    command_name: str,
    variants: tuple[Variant, ...],
) -> tuple[ParameterGroup, ...]:
    """Group parameters by identity and tag each group common or exclusive."""
    members: dict[tuple[str, str], list[ParameterMember]] = defaultdict(list)
    # dict preserves first-seen order of identities across variants.
    for variant in variants:
        for param in variant.parameters:
            members[param.identity].append(
                ParameterMember(variant_name=variant.name, parameter=param)
            )

    variant_count = len(variants)
    multiple = variant_count > 1
    groups: list[ParameterGroup] = []

    for (_, type_tag), group_members in members.items():
        # The first declaration spells the group name.
        name = group_members[0].parameter.name
        has_all = len(group_members) == variant_count
        if multiple and not has_all and len(group_members) > 1:
            owners = ", ".join(m.variant_name for m in group_members)
            raise ConstructionError(
                f"Parameter '{name}' <{type_tag}> of '{command_name}' is shared by "
                f"variants {owners} but not by all {variant_count}; a parameter must "
                "belong to every variant or to exactly one",
                command_name=command_name,
            )

        set_name = group_members[0].variant_name if multiple and not has_all else None
        groups.append(_merge_members(name, type_tag, tuple(group_members), has_all, set_name))

    return tuple(groups)


def _merge_members(
    name: str,
    type_tag: str,
    members: tuple[ParameterMember, ...],
    has_all: bool,
    set_name: Optional[str],
) -> ParameterGroup:
    """Collapse the member parameters into the group's presentation fields.

    Texts are taken from the first member (variant input order); conflicting
    help messages are never concatenated.
    """
    params = [m.parameter for m in members]
    first = params[0]
    help_message = next((p.help_message for p in params if p.help_message), "")
    completer = next((p.completer for p in params if p.completer is not None), None)
    complex_type = next((p.complex_type for p in params if p.complex_type), None)
    default_value = next((p.default_value for p in params if p.default_value is not None), None)

    return ParameterGroup(
        name=name,
        type=type_tag,
        members=members,
        has_all_variants_in_parameter_group=has_all,
        parameter_set_name=set_name,
        help_message=help_message,
        aliases=_ordered_union(p.aliases for p in params),
        has_validate_not_null=any(p.validation.not_null for p in params),
        dont_show=all(p.dont_show for p in params),
        value_from_pipeline=any(p.value_from_pipeline for p in params),
        category=first.category,
        complex_type=complex_type,
        completer=completer,
        default_value=default_value,
    )


# ---------------------------------------------------------------------------
# Default parameter set
# ---------------------------------------------------------------------------


def _select_default_parameter_set(
    command_name: str,
    variants: tuple[Variant, ...],
) -> tuple[Optional[str], tuple[str, ...]]:
    """Return ``(default_name, diagnostics)`` for the variants.

    A single variant always yields the all-sets sentinel, whatever its
    ``is_default`` flag says.
    """
    if len(variants) == 1:
        return ALL_PARAMETER_SETS, ()

    flagged = tuple(v.name for v in variants if v.is_default)
    if len(flagged) == 1:
        return flagged[0], ()

    if flagged:
        message = (
            f"Command '{command_name}' has several default variants "
            f"({', '.join(flagged)}); no default parameter set is emitted"
        )
    else:
        message = (
            f"Command '{command_name}' has {len(variants)} variants and none is "
            "marked default; callers must choose a parameter set explicitly"
        )
    diagnostic = AmbiguousDefaultError(message, candidates=flagged)
    logger.warning("%s", diagnostic)
    return None, (str(diagnostic),)


def _primary_variant(variants: tuple[Variant, ...], default_name: Optional[str]) -> Variant:
    """The variant whose description and link represent the whole command."""
    for variant in variants:
        if variant.name == default_name:
            return variant
    return next((v for v in variants if v.description), variants[0])


def _ordered_union(chunks) -> tuple[str, ...]:  # noqa: ANN001
    """Flatten *chunks* of strings, dropping repeats but keeping first-seen order."""
    result: dict[str, None] = {}
    for chunk in chunks:
        for item in chunk:
            result.setdefault(item, None)
    return tuple(result)
