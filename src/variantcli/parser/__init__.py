"""Variant document parser -- read the upstream variant model.

Typical usage::

    from variantcli.parser import load_document

    document = load_document("widgets.yaml")
    for spec in document.commands:
        ...

Sub-modules:

* :mod:`~variantcli.parser.loader` -- I/O layer (file, stdin), JSON/YAML
  detection and validation into :class:`~variantcli.models.VariantDocument`.
"""

from variantcli.parser.loader import load_document, load_raw

__all__ = ["load_document", "load_raw"]
