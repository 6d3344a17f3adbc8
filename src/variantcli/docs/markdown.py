"""Render a :class:`~variantcli.docs.synthesizer.HelpDocument` as Markdown.

The layout lives in ``docs/templates/help.md.j2`` and is rendered with
Jinja2.  Autoescaping is disabled for ``.md.j2`` templates since they
produce Markdown, not HTML.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from variantcli.docs.complex_info import COMPLEX_PARAMETER_HEADER
from variantcli.docs.synthesizer import HelpDocument

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``docs/templates/``)."""


def render_markdown(document: HelpDocument) -> str:
    """Render *document* with the ``help.md.j2`` template.

    Args:
        document: The synthesized help document.

    Returns:
        The Markdown text, ending with a single newline.
    """
    template = _create_jinja_env().get_template("help.md.j2")
    text = template.render(doc=document, notes_header=COMPLEX_PARAMETER_HEADER.strip())
    return text.rstrip("\n") + "\n"


def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for help templates.

    Block trimming and lstrip are enabled so the template can be indented for
    readability without leaking whitespace into the output.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(disabled_extensions=("md.j2",)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
