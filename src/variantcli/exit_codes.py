"""Numeric process exit codes for the ``variantcli`` command.

Each constant maps to one error category and is referenced by the
corresponding :class:`~variantcli.exceptions.VariantcliError` subclass.
Shell wrappers and CI jobs can branch on the exit code without parsing
stderr.

Example::

    $ variantcli generate variants.yaml
    $ echo $?
    8   # EXIT_CONSTRUCTION_ERROR -- a variant group could not be merged
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_MODEL_LOAD_ERROR = 7
"""The variant document could not be read or validated."""

EXIT_CONSTRUCTION_ERROR = 8
"""A variant group violated a merge invariant during generation."""

EXIT_DISPATCH_ERROR = 9
"""A forwarded invocation could not be dispatched to an implementation."""
