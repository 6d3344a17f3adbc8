"""Exception hierarchy for variantcli.

All exceptions inherit from :class:`VariantcliError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`variantcli.exit_codes`.
The top-level handler in :func:`variantcli.app.main` catches
``VariantcliError`` and exits with the matching code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    VariantcliError (exit 1)
    +-- InvalidUsageError        (exit 2)
    +-- ModelLoadError           (exit 7)
    +-- ConstructionError        (exit 8)
    +-- AmbiguousDefaultError    (exit 1, recorded rather than raised)
    +-- RuntimeDispatchError     (exit 9)
    |   +-- ForwardingStateError
    |   +-- ForwardingAbortedError
    +-- ConfigError              (exit 1)
"""

from variantcli.exit_codes import (
    EXIT_CONSTRUCTION_ERROR,
    EXIT_DISPATCH_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MODEL_LOAD_ERROR,
)


class VariantcliError(Exception):
    """Base exception for all variantcli errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`variantcli.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(VariantcliError):
    """Raised for invalid CLI arguments (unknown command name, bad option value)."""

    exit_code = EXIT_INVALID_USAGE


class ModelLoadError(VariantcliError):
    """Raised when a variant document cannot be read, parsed, or validated."""

    exit_code = EXIT_MODEL_LOAD_ERROR


class ConstructionError(VariantcliError):
    """Raised when a list of variants cannot be merged into a variant group.

    Causes are duplicate parameter names inside one variant, duplicate
    variant names, an empty variant list, and a parameter shared by more
    than one but not all variants.  Only the offending group is aborted.

    Args:
        message: Description of the violated invariant.
        command_name: The external command whose group failed, if known.
    """

    exit_code = EXIT_CONSTRUCTION_ERROR

    def __init__(self, message: str, command_name: str | None = None):
        super().__init__(message)
        self.command_name = command_name


class AmbiguousDefaultError(VariantcliError):
    """Zero or several variants of a multi-variant group claim to be the default.

    This error is recoverable.  The builder records an instance in
    :attr:`~variantcli.models.VariantGroup.diagnostics` and leaves the
    default parameter set unset instead of raising it.

    Args:
        message: Description of the conflict.
        candidates: Names of the variants flagged as default (may be empty).
    """

    def __init__(self, message: str, candidates: tuple[str, ...] = ()):
        super().__init__(message)
        self.candidates = candidates


class RuntimeDispatchError(VariantcliError):
    """Raised when an invocation cannot be routed to exactly one implementation.

    Args:
        message: Description of the failed lookup.
        parameter_set: The parameter-set identifier that had no entry.
    """

    exit_code = EXIT_DISPATCH_ERROR

    def __init__(self, message: str, parameter_set: str | None = None):
        super().__init__(message)
        self.parameter_set = parameter_set


class ForwardingStateError(RuntimeDispatchError):
    """Raised when forwarding phases are called out of order."""


class ForwardingAbortedError(RuntimeDispatchError):
    """Raised when a phase is requested after an earlier phase failed.

    The original failure is attached as ``__cause__``.
    """


class ConfigError(VariantcliError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
