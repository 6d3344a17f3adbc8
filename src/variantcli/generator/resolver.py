"""Map a caller's parameter set to exactly one variant implementation.

The resolution work happens at generation time: the builder gives every
variant of a multi-variant group its own parameter-set name, so the runtime
contract is a plain table lookup from the set the caller bound to the
implementation identifier.  No parameter lists are searched at call time.

A single-variant group needs no table; every lookup returns its only
implementation.  For multi-variant groups an identifier without an entry is
an upstream construction bug and raises
:class:`~variantcli.exceptions.RuntimeDispatchError` instead of falling back
to any implementation.
"""

from __future__ import annotations

from typing import Optional

from variantcli.exceptions import RuntimeDispatchError
from variantcli.models import VariantGroup


class ParameterSetResolver:
    """Constant-time lookup from parameter-set name to implementation identifier.

    Build instances with :meth:`from_group`.

    Args:
        command_name: The external command the table belongs to.
        mapping: Parameter-set name -> implementation identifier, in variant
            input order.  Empty for unconditional forwarding.
        unconditional: The implementation every lookup returns when the
            group has a single variant, otherwise ``None``.
    """

    def __init__(
        self,
        command_name: str,
        mapping: dict[str, str],
        unconditional: Optional[str] = None,
    ) -> None:
        if unconditional is None and not mapping:
            raise ValueError("A resolver needs a mapping or an unconditional target")
        self._command_name = command_name
        self._mapping = dict(mapping)
        self._unconditional = unconditional

    @classmethod
    def from_group(cls, group: VariantGroup) -> ParameterSetResolver:
        """Create the resolver for *group*."""
        if not group.has_multiple_variants:
            return cls(group.command_name, {}, group.variants[0].implementation_id)
        mapping = {v.name: v.implementation_id for v in group.variants}
        return cls(group.command_name, mapping)

    @property
    def command_name(self) -> str:
        return self._command_name

    @property
    def is_unconditional(self) -> bool:
        """``True`` when the group has one variant and no lookup is performed."""
        return self._unconditional is not None

    @property
    def mapping(self) -> dict[str, str]:
        """A copy of the lookup table, in variant input order."""
        return dict(self._mapping)

    def resolve(self, parameter_set: Optional[str]) -> str:
        """Return the implementation identifier for *parameter_set*.

        Args:
            parameter_set: The parameter-set name the caller's arguments bound
                to.  Ignored for unconditional resolvers.

        Raises:
            RuntimeDispatchError: If *parameter_set* has no entry.
        """
        if self._unconditional is not None:
            return self._unconditional
        try:
            return self._mapping[parameter_set]  # type: ignore[index]
        except KeyError:
            raise RuntimeDispatchError(
                f"No implementation of '{self._command_name}' is mapped to "
                f"parameter set '{parameter_set}'",
                parameter_set=parameter_set,
            ) from None
