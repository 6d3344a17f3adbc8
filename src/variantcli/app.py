"""Typer application and CLI entry point for variantcli.

This module wires together the top-level Typer application and registers the
built-in sub-commands (``inspect``, ``generate``, ``docs``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.  It installs signal handlers, registers commands and
invokes the Typer app.  Unhandled exceptions are written to a crash log under
the data directory.

See Also:
    :mod:`variantcli.config`: Global and project configuration resolution.
    :mod:`variantcli.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from variantcli import __version__
from variantcli.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="variantcli",
    help="Merge API operation variants into one proxy command surface.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

_registered = False


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"variantcli {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Output file path."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~variantcli.output.OutputManager` from
    CLI flags (falling back to ``VARIANTCLI_FORMAT`` and the config files),
    enables debug logging for ``--verbose``, and stores shared options in
    ``ctx.obj``.
    """
    from variantcli.config import resolve_config
    from variantcli.exceptions import ConfigError
    from variantcli.output import OutputFormat, OutputManager, set_output, warning

    _configure_logging(verbose)

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    config_problem: Optional[str] = None
    try:
        config = resolve_config(cli_format=cli_format)
        requested = config.output.format
    except ConfigError as exc:
        config = None
        requested = cli_format or OutputFormat.AUTO.value
        config_problem = str(exc)

    try:
        fmt = OutputFormat(requested)
    except ValueError:
        fmt = OutputFormat.AUTO

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
            output_file=output_file,
        )
    )
    if config_problem:
        warning(f"{config_problem}; using defaults")

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _configure_logging(verbose: bool) -> None:
    """Send variantcli log records to stderr; DEBUG with ``--verbose``."""
    logger = logging.getLogger("variantcli")
    # Rebind to the current stderr on every invocation.
    for handler in [h for h in logger.handlers if getattr(h, "_variantcli", False)]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handler._variantcli = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from variantcli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def register_commands() -> typer.Typer:
    """Attach the built-in sub-commands to :data:`app` (once) and return it."""
    global _registered
    if _registered:
        return app

    from variantcli.commands.config import config_app
    from variantcli.commands.docs import docs_command
    from variantcli.commands.generate import generate_command
    from variantcli.commands.inspect import inspect_app

    app.add_typer(inspect_app, name="inspect", help="Inspect merged variant groups.")
    app.command("generate")(generate_command)
    app.command("docs")(docs_command)
    app.add_typer(config_app, name="config", help="Configuration management.")
    _registered = True
    return app


def main() -> None:
    """CLI entry point invoked by the ``variantcli`` console script.

    Unhandled :class:`~variantcli.exceptions.VariantcliError` instances
    cause a clean exit with the error's ``exit_code``.  All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from variantcli.exceptions import VariantcliError
        from variantcli.output import error

        if isinstance(exc, VariantcliError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
