"""Load variant documents from a local file or stdin.

A variant document lists the external commands to merge and the type arena
their structured parameters reference::

    commands:
      - name: Get-Widget
        variants:
          - name: ByName
            is_default: true
            parameters:
              - {name: Name, type: string, mandatory: true}
          - name: ByTag
            parameters:
              - {name: Tag, type: string, mandatory: true}
    types:
      widget-filter:
        name: WidgetFilter
        properties:
          - {name: Owner, type: string}

``types`` may be a mapping keyed by type identifier or a list of schemas
carrying their own ``id``.  JSON and YAML are both accepted, with format
detection by file extension and then by content.

The public functions are:

* :func:`load_raw` -- read and parse a document into a plain dict.
* :func:`load_document` -- additionally validate it into a
  :class:`~variantcli.models.VariantDocument`.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from variantcli.exceptions import ModelLoadError
from variantcli.models import VariantDocument

logger = logging.getLogger(__name__)


def load_document(source: str) -> VariantDocument:
    """Load and validate a variant document from a file path or stdin ('-').

    Args:
        source: A file path, or '-' for stdin.

    Returns:
        The validated document.

    Raises:
        ModelLoadError: If the source cannot be read, parsed, or validated.
    """
    raw = load_raw(source)
    raw = dict(raw)
    raw["types"] = _normalise_types(raw.get("types"))
    try:
        document = VariantDocument.model_validate(raw)
    except ValidationError as exc:
        raise ModelLoadError(f"Invalid variant document {_label(source)}:\n{exc}") from exc

    logger.debug(
        "Loaded %d commands and %d types from %s",
        len(document.commands),
        len(document.types),
        _label(source),
    )
    return document


def load_raw(source: str) -> dict[str, Any]:
    """Read *source* and parse it as JSON or YAML.

    Raises:
        ModelLoadError: If the source cannot be read or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    return _load_from_file(source)


def _label(source: str) -> str:
    return "from stdin" if source == "-" else f"in {source}"


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise ModelLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise ModelLoadError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    ``.json``, ``.yaml`` and ``.yml`` extensions select the parser; other
    extensions fall back to content-based detection.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ModelLoadError(f"Variant document not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ModelLoadError(f"Failed to read variant document {path}: {exc}") from exc

    if not content.strip():
        raise ModelLoadError(f"Variant document is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON, falling back to YAML unless hinted as JSON."""
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise ModelLoadError(f"Invalid JSON: {exc}") from exc
            json_error = exc
        else:
            return _require_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse variant document as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise ModelLoadError(msg) from exc
    return _require_mapping(result)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise ModelLoadError(f"Variant document must be a JSON/YAML object (got {kind})")
    return result


def _normalise_types(types: Any) -> Any:
    """Key the type arena by identifier.

    A list of schemas is keyed by each schema's ``id``; mapping entries
    without an ``id`` take their key.  Anything else is left for validation
    to reject.
    """
    if types is None:
        return {}
    if isinstance(types, list):
        arena: dict[str, Any] = {}
        for entry in types:
            if not isinstance(entry, dict) or "id" not in entry:
                raise ModelLoadError("Every entry of a 'types' list needs an 'id'")
            if entry["id"] in arena:
                raise ModelLoadError(f"Type '{entry['id']}' is declared more than once")
            arena[entry["id"]] = entry
        return arena
    if isinstance(types, dict):
        arena = {}
        for key, entry in types.items():
            if isinstance(entry, dict):
                entry = {"id": key, **entry}
                if entry["id"] != key:
                    raise ModelLoadError(
                        f"Type '{key}' declares a different id '{entry['id']}'"
                    )
            arena[key] = entry
        return arena
    return types
