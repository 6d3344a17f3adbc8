"""Generate command -- render proxies for a variant document.

Merges the variants of every command in a document (or of one selected
command), builds its proxy and either prints it, prints the proxy IR as
JSON (``--json``), or writes one proxy file and one Markdown help file per
command into ``--output-dir``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer

from variantcli.commands.common import (
    find_command_or_exit,
    generation_settings,
    load_document_or_exit,
)
from variantcli.exit_codes import EXIT_CONSTRUCTION_ERROR
from variantcli.output import (
    OutputFormat,
    debug,
    error,
    format_data,
    get_output,
    print_document,
    success,
    warning,
)

PROXY_SUFFIX = ".proxy.txt"
HELP_SUFFIX = ".md"


def generate_command(
    ctx: typer.Context,
    source: str = typer.Argument(help="Variant document (JSON/YAML file, or '-' for stdin)."),
    command: Optional[str] = typer.Option(
        None, "--command", "-c", help="Only generate this command."
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-d", help="Write proxy and help files into this directory."
    ),
    workers: int = typer.Option(
        1, "--workers", "-w", min=1, help="Generate commands on this many threads."
    ),
) -> None:
    """Generate proxies for the commands of a variant document.

    A command whose variants cannot be merged is reported and skipped; the
    others are still generated and the exit code is then 8.

    Example::

        variantcli generate widgets.yaml
        variantcli generate widgets.yaml -c Get-Widget --output-dir out/
        variantcli --json generate widgets.yaml
    """
    from variantcli.docs import render_markdown
    from variantcli.generator import generate_all
    from variantcli.generator.surface import renderer_for

    document = load_document_or_exit(source)
    specs = [find_command_or_exit(document, command)] if command else list(document.commands)
    settings = generation_settings(ctx)
    renderer = renderer_for(settings)

    results = generate_all(specs, document.types, settings, max_workers=workers)

    output = get_output()
    collected: list[dict[str, Any]] = []
    for result in results:
        if result.surface is None:
            error(str(result.error))
            continue

        surface = result.surface
        for diagnostic in surface.group.diagnostics:
            warning(diagnostic)

        if output_dir is not None:
            output_dir.mkdir(parents=True, exist_ok=True)
            proxy_path = output_dir / f"{surface.command_name}{PROXY_SUFFIX}"
            help_path = output_dir / f"{surface.command_name}{HELP_SUFFIX}"
            proxy_path.write_text(surface.render(renderer), encoding="utf-8")
            help_path.write_text(render_markdown(surface.help), encoding="utf-8")
            debug(f"Wrote {proxy_path} and {help_path}")
        elif output.format == OutputFormat.JSON:
            collected.append(surface.to_dict())
        else:
            print_document(surface.render(renderer), language="text")

    generated = sum(1 for r in results if r.ok)
    if output_dir is not None:
        success(f"Generated {generated} of {len(results)} commands into {output_dir}")
    elif output.format == OutputFormat.JSON:
        format_data(collected)

    if generated != len(results):
        raise typer.Exit(code=EXIT_CONSTRUCTION_ERROR)
