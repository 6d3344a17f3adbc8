"""Docs command -- print the synthesized help of one command."""

from __future__ import annotations

import typer

from variantcli.commands.common import (
    fail,
    find_command_or_exit,
    generation_settings,
    load_document_or_exit,
)
from variantcli.exceptions import ConstructionError
from variantcli.output import OutputFormat, format_data, get_output, print_document, warning


def docs_command(
    ctx: typer.Context,
    source: str = typer.Argument(help="Variant document (JSON/YAML file, or '-' for stdin)."),
    command: str = typer.Argument(help="External command name."),
    markdown: bool = typer.Option(
        True, "--markdown/--syntax", help="Full Markdown help, or only the syntax lines."
    ),
) -> None:
    """Show the help synthesized for a merged command.

    Example::

        variantcli docs widgets.yaml Get-Widget
        variantcli docs widgets.yaml Get-Widget --syntax
        variantcli --json docs widgets.yaml Get-Widget
    """
    from variantcli.docs import render_markdown, synthesize
    from variantcli.generator import build_variant_group

    document = load_document_or_exit(source)
    spec = find_command_or_exit(document, command)
    settings = generation_settings(ctx)
    try:
        group = build_variant_group(spec.name, spec.variants)
        help_document = synthesize(
            group,
            registry=document.types if settings.include_complex_notes else None,
            half_indent=" " * settings.half_indent,
            backticks=settings.backticks,
        )
    except ConstructionError as exc:
        fail(exc)

    for diagnostic in group.diagnostics:
        warning(diagnostic)

    if get_output().format == OutputFormat.JSON:
        format_data(help_document.model_dump(mode="json"))
    elif markdown:
        print_document(render_markdown(help_document))
    else:
        print_document("\n".join(line.text for line in help_document.syntax), language="text")
