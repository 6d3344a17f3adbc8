"""Three-phase forwarding of an invocation to the resolved implementation.

The protocol has three phases:

* **begin** -- resolve the implementation from the bound parameter set,
  acquire exactly one pipeline handle for it and negotiate buffering;
* **process** -- forward each streamed input record, one for one, in
  arrival order;
* **end** -- finalise and flush.

The module exposes both faces of the protocol:

* :func:`build_forwarding_plan` captures the logical dispatch data and
  :func:`build_forwarding_directives` emits the begin/process/end blocks of a
  generated proxy as :mod:`~variantcli.generator.emit` directives.
* :class:`ProxyForwarder` runs the same protocol in-process against
  :class:`SteppablePipeline` implementations, which is how the semantics are
  exercised in tests and by embedding applications.

Failures are never swallowed or translated.  The first failure propagates
unchanged and every later phase is refused with
:class:`~variantcli.exceptions.ForwardingAbortedError`.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Protocol

from variantcli.exceptions import (
    ForwardingAbortedError,
    ForwardingStateError,
    RuntimeDispatchError,
)
from variantcli.docs.text import to_string_literal
from variantcli.generator.emit import Block, Directive, Literal
from variantcli.generator.resolver import ParameterSetResolver

logger = logging.getLogger(__name__)

OUT_BUFFER = "OutBuffer"
"""Bound parameter controlling output buffering; forced to 1 when present."""


class SteppablePipeline(Protocol):
    """The handle a forwarder drives; one instance per outer invocation."""

    def begin(self) -> Iterable[Any] | None: ...

    def process(self, record: Any) -> Iterable[Any] | None: ...

    def end(self) -> Iterable[Any] | None: ...


PipelineFactory = Callable[[dict[str, Any]], SteppablePipeline]
"""Creates the pipeline of one implementation from the bound parameters."""


class Phase(str, enum.Enum):
    """Lifecycle state of a :class:`ProxyForwarder`."""

    READY = "ready"
    BEGUN = "begun"
    ENDED = "ended"
    ABORTED = "aborted"


class ProxyForwarder:
    """Run the begin/process/end protocol for one outer invocation.

    Args:
        resolver: Maps the caller's parameter set to an implementation id.
        factories: Implementation id -> factory creating its pipeline.

    Example::

        forwarder = ProxyForwarder(resolver, {"Get-WidgetByName": make_pipeline})
        outputs = forwarder.forward("ByName", {"Name": "w1"}, records)
    """

    def __init__(
        self,
        resolver: ParameterSetResolver,
        factories: Mapping[str, PipelineFactory],
    ) -> None:
        self._resolver = resolver
        self._factories = dict(factories)
        self._phase = Phase.READY
        self._pipeline: Optional[SteppablePipeline] = None
        self._failure: Optional[BaseException] = None
        self.implementation_id: Optional[str] = None

    @property
    def phase(self) -> Phase:
        return self._phase

    # ------------------------------------------------------------------ #
    # Phases
    # ------------------------------------------------------------------ #

    def begin(
        self,
        parameter_set: Optional[str],
        bound_parameters: Optional[Mapping[str, Any]] = None,
    ) -> list[Any]:
        """Resolve the implementation, create its pipeline and begin it.

        Args:
            parameter_set: The parameter set the caller's arguments bound to.
            bound_parameters: The caller's bound parameters, passed through to
                the implementation.  ``OutBuffer`` is negotiated down to 1.

        Returns:
            Any records the implementation emitted while beginning.

        Raises:
            RuntimeDispatchError: If *parameter_set* is not mapped.
            ForwardingStateError: If the forwarder was already begun.
        """
        self._require(Phase.READY, "begin")
        bound = dict(bound_parameters or {})
        if OUT_BUFFER in bound:
            bound[OUT_BUFFER] = 1

        def _begin() -> list[Any]:
            implementation_id = self._resolver.resolve(parameter_set)
            factory = self._factories.get(implementation_id)
            if factory is None:
                raise RuntimeDispatchError(
                    f"No pipeline factory registered for implementation '{implementation_id}'"
                )
            self.implementation_id = implementation_id
            logger.debug(
                "Forwarding '%s' (set %s) to %s",
                self._resolver.command_name,
                parameter_set,
                implementation_id,
            )
            self._pipeline = factory(bound)
            return _collect(self._pipeline.begin())

        outputs = self._guarded(_begin)
        self._phase = Phase.BEGUN
        return outputs

    def process(self, record: Any) -> list[Any]:
        """Forward one input record to the implementation."""
        self._require(Phase.BEGUN, "process")
        assert self._pipeline is not None
        pipeline = self._pipeline
        return self._guarded(lambda: _collect(pipeline.process(record)))

    def end(self) -> list[Any]:
        """Finalise the implementation's pipeline."""
        self._require(Phase.BEGUN, "end")
        assert self._pipeline is not None
        pipeline = self._pipeline
        outputs = self._guarded(lambda: _collect(pipeline.end()))
        self._phase = Phase.ENDED
        return outputs

    def forward(
        self,
        parameter_set: Optional[str],
        bound_parameters: Optional[Mapping[str, Any]] = None,
        records: Iterable[Any] = (),
    ) -> list[Any]:
        """Run all three phases over *records* and return every output in order."""
        outputs = self.begin(parameter_set, bound_parameters)
        for record in records:
            outputs.extend(self.process(record))
        outputs.extend(self.end())
        return outputs

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _require(self, expected: Phase, action: str) -> None:
        if self._phase is Phase.ABORTED:
            raise ForwardingAbortedError(
                f"Cannot {action} '{self._resolver.command_name}': an earlier phase failed"
            ) from self._failure
        if self._phase is not expected:
            raise ForwardingStateError(
                f"Cannot {action} '{self._resolver.command_name}' while {self._phase.value}"
            )

    def _guarded(self, step: Callable[[], list[Any]]) -> list[Any]:
        try:
            return step()
        except BaseException as exc:
            self._phase = Phase.ABORTED
            self._failure = exc
            raise


def _collect(result: Iterable[Any] | None) -> list[Any]:
    return list(result) if result is not None else []


# ---------------------------------------------------------------------------
# Emitted phases
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ForwardingPlan:
    """Logical dispatch data of a generated proxy, independent of target syntax.

    Attributes:
        command_name: The external command being proxied.
        mapping: ``(parameter set, implementation id)`` pairs in variant
            input order; empty for unconditional forwarding.
        unconditional: The only implementation of a single-variant group.
        buffer_parameter: Bound parameter negotiated down to 1 in begin.
    """

    command_name: str
    mapping: tuple[tuple[str, str], ...] = ()
    unconditional: Optional[str] = None
    buffer_parameter: str = OUT_BUFFER


def build_forwarding_plan(resolver: ParameterSetResolver) -> ForwardingPlan:
    if resolver.is_unconditional:
        return ForwardingPlan(resolver.command_name, unconditional=resolver.resolve(None))
    return ForwardingPlan(resolver.command_name, mapping=tuple(resolver.mapping.items()))


def build_forwarding_directives(plan: ForwardingPlan) -> list[Directive]:
    """Emit the begin/process/end phases of a proxy as directives.

    Every phase body sits in a ``try`` block followed by a handler that
    rethrows the original failure.  The mapping table is emitted only for
    multi-variant groups.
    """
    begin_body: list[Directive] = [
        Block(
            f"if (bound {plan.buffer_parameter}) {{",
            (Literal(f"{plan.buffer_parameter} = 1"),),
        ),
        Literal("parameterSet = bound parameter set"),
    ]
    if plan.unconditional is not None:
        target = f"'{to_string_literal(plan.unconditional)}'"
    else:
        begin_body.append(
            Block(
                "mapping = {",
                tuple(
                    Literal(f"{name} = '{to_string_literal(impl)}';")
                    for name, impl in plan.mapping
                ),
            )
        )
        target = "mapping[parameterSet]"
    begin_body.extend(
        [
            Literal(f"pipeline = acquire({target}, bound parameters)"),
            Literal("pipeline.begin()"),
        ]
    )

    return [
        Block("begin {", _rethrowing(begin_body)),
        Literal(),
        Block("process {", _rethrowing([Literal("pipeline.process(record)")])),
        Literal(),
        Block("end {", _rethrowing([Literal("pipeline.end()")])),
    ]


def _rethrowing(body: list[Directive]) -> tuple[Directive, ...]:
    return (
        Block("try {", tuple(body)),
        Block("catch {", (Literal("throw"),)),
    )
