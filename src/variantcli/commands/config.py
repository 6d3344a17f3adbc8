"""Config commands -- view and modify global configuration.

Provides the ``variantcli config`` sub-command group for reading, updating
and resetting the user's global configuration file
(:class:`~variantcli.models.GlobalConfig`).
"""

from __future__ import annotations

import typer

from variantcli.commands.common import fail
from variantcli.exceptions import ConfigError
from variantcli.output import format_data, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    effective: bool = typer.Option(
        False, "--effective", help="Show the config after project and env overrides."
    ),
) -> None:
    """Show current configuration.

    Example::

        variantcli config show
        variantcli --json config show --effective
    """
    from variantcli.config import get_config_dir, load_global_config, resolve_config

    try:
        config = resolve_config() if effective else load_global_config()
    except ConfigError as exc:
        fail(exc)
    info(f"Config directory: {get_config_dir()}")
    format_data(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'generation.half_indent')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the existing field (bool, int, or
    str) and the whole config is validated before saving.

    Example::

        variantcli config set output.format json
        variantcli config set generation.half_indent 4
        variantcli config set generation.include_complex_notes false
    """
    from variantcli.config import load_global_config, save_global_config, set_config_value

    try:
        new_config = set_config_value(load_global_config(), key, value)
    except ConfigError as exc:
        fail(ConfigError(str(exc), exit_code=2))

    save_global_config(new_config)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.

    Example::

        variantcli --force config reset
    """
    from variantcli.config import save_global_config
    from variantcli.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
