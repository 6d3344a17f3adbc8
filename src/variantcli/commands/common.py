"""Helpers shared by the sub-commands: loading, lookup and error exits."""

from __future__ import annotations

from typing import NoReturn, Optional

import click
import typer

from variantcli.exceptions import InvalidUsageError, VariantcliError
from variantcli.models import CommandSpec, GenerationConfig, VariantDocument
from variantcli.output import error, suggest


def fail(exc: VariantcliError) -> NoReturn:
    """Report *exc* on stderr and exit with its exit code."""
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def load_document_or_exit(source: str) -> VariantDocument:
    """Load the variant document at *source*, exiting on failure."""
    from variantcli.parser import load_document

    try:
        return load_document(source)
    except VariantcliError as exc:
        fail(exc)


def find_command_or_exit(document: VariantDocument, name: str) -> CommandSpec:
    """Return the command named *name*, exiting with a usage error if absent."""
    spec = document.command(name)
    if spec is None:
        known = ", ".join(c.name for c in document.commands) or "none"
        suggest(f"Known commands: {known}")
        fail(InvalidUsageError(f"Unknown command: {name}"))
    return spec


def generation_settings(ctx: Optional[click.Context] = None) -> GenerationConfig:
    """The ``generation`` section of the config resolved by the root callback.

    Falls back to the active click context when *ctx* is not given, and to
    defaults outside of a CLI invocation.
    """
    if ctx is None:
        ctx = click.get_current_context(silent=True)
    config = ctx.obj.get("config") if ctx is not None and ctx.obj else None
    return config.generation if config is not None else GenerationConfig()
