"""Documentation synthesizer -- help text for merged commands.

This sub-package turns a :class:`~variantcli.models.VariantGroup` into
documentation: a synopsis, per-parameter help, one syntax line per variant,
and recursive notes for structured parameters.

Typical usage::

    from variantcli.docs import synthesize, render_markdown

    document = synthesize(group, registry=doc.types)
    print(render_markdown(document))

Sub-modules:

* :mod:`~variantcli.docs.synthesizer` -- builds the :class:`HelpDocument`.
* :mod:`~variantcli.docs.complex_info` -- structured parameter trees with
  cycle termination and their note rendering.
* :mod:`~variantcli.docs.text` -- string escaping and type-name helpers.
* :mod:`~variantcli.docs.markdown` -- Jinja2 Markdown rendering.
* :mod:`~variantcli.docs.help_info` -- reader for existing help objects.
"""

from variantcli.docs.complex_info import build_complex_interface_info
from variantcli.docs.help_info import HelpInfo, parse_help_info
from variantcli.docs.markdown import render_markdown
from variantcli.docs.synthesizer import HelpDocument, synthesize

__all__ = [
    "HelpDocument",
    "HelpInfo",
    "build_complex_interface_info",
    "parse_help_info",
    "render_markdown",
    "synthesize",
]
