"""Inspect commands -- examine merged variant groups.

Provides the ``variantcli inspect`` sub-command group with read-only views
of what the builder and resolver compute for a variant document: the
parameter groups of each command with their common/exclusive tagging, and
the implementation a parameter set resolves to.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from variantcli.commands.common import fail, find_command_or_exit, load_document_or_exit
from variantcli.exceptions import ConstructionError, RuntimeDispatchError
from variantcli.exit_codes import EXIT_CONSTRUCTION_ERROR
from variantcli.models import CommandSpec, VariantGroup
from variantcli.output import OutputFormat, error, format_data, get_output, warning


inspect_app = typer.Typer(no_args_is_help=True)


def _group_rows(group: VariantGroup) -> list[list[str]]:
    rows: list[list[str]] = []
    for pg in group.parameter_groups:
        params = [m.parameter for m in pg.members]
        rows.append([
            pg.name,
            pg.type,
            pg.parameter_set_name or "(All)",
            "Yes" if all(p.mandatory for p in params) else "",
            "Yes" if pg.value_from_pipeline else "",
            ", ".join(pg.aliases),
        ])
    return rows


def _group_data(group: VariantGroup) -> dict[str, Any]:
    return {
        "command": group.command_name,
        "variants": list(group.variant_names),
        "default_parameter_set": group.default_parameter_set_name,
        "supports_should_process": group.supports_should_process,
        "diagnostics": list(group.diagnostics),
        "parameter_groups": [
            {
                "name": pg.name,
                "type": pg.type,
                "parameter_set": pg.parameter_set_name,
                "variants": list(pg.variant_names),
                "common": pg.is_common,
            }
            for pg in group.parameter_groups
        ],
    }


@inspect_app.command("groups")
def inspect_groups(
    source: str = typer.Argument(help="Variant document (JSON/YAML file, or '-' for stdin)."),
    command: Optional[str] = typer.Option(
        None, "--command", "-c", help="Only inspect this command."
    ),
) -> None:
    """Show the merged parameter groups of each command.

    Every parameter group is listed with its type and the parameter set it
    belongs to (``(All)`` for common parameters).  Commands whose variants
    cannot be merged are reported and skipped; the exit code is then 8.

    Example::

        variantcli inspect groups widgets.yaml
        variantcli --json inspect groups widgets.yaml -c Get-Widget
    """
    from variantcli.generator import build_variant_group

    document = load_document_or_exit(source)
    specs: list[CommandSpec] = (
        [find_command_or_exit(document, command)] if command else list(document.commands)
    )

    output = get_output()
    collected: list[dict[str, Any]] = []
    failed = False
    for spec in specs:
        try:
            group = build_variant_group(spec.name, spec.variants)
        except ConstructionError as exc:
            error(str(exc))
            failed = True
            continue

        for diagnostic in group.diagnostics:
            warning(diagnostic)
        if output.format == OutputFormat.JSON:
            collected.append(_group_data(group))
        else:
            default = group.default_parameter_set_name or "-"
            output.print_table(
                ["Parameter", "Type", "Parameter set", "Mandatory", "Pipeline", "Aliases"],
                _group_rows(group),
                title=f"{group.command_name} -- default set: {default}",
            )

    if output.format == OutputFormat.JSON:
        format_data(collected)
    if failed:
        raise typer.Exit(code=EXIT_CONSTRUCTION_ERROR)


@inspect_app.command("resolve")
def inspect_resolve(
    source: str = typer.Argument(help="Variant document (JSON/YAML file, or '-' for stdin)."),
    command: str = typer.Argument(help="External command name."),
    parameter_set: str = typer.Argument(help="Parameter set the caller bound to."),
) -> None:
    """Show which implementation a parameter set dispatches to.

    Exits with code 9 when the parameter set has no entry.

    Example::

        variantcli inspect resolve widgets.yaml Get-Widget ByTag
    """
    from variantcli.generator import ParameterSetResolver, build_variant_group

    document = load_document_or_exit(source)
    spec = find_command_or_exit(document, command)
    try:
        group = build_variant_group(spec.name, spec.variants)
        resolver = ParameterSetResolver.from_group(group)
        implementation = resolver.resolve(parameter_set)
    except (ConstructionError, RuntimeDispatchError) as exc:
        fail(exc)

    format_data({
        "command": group.command_name,
        "parameter_set": parameter_set,
        "implementation": implementation,
        "unconditional": resolver.is_unconditional,
    })
