"""Tests for variantcli.parser.loader."""

from __future__ import annotations

import io
import json
import textwrap
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from variantcli.exceptions import ModelLoadError
from variantcli.parser.loader import _normalise_types, _parse_content, load_document, load_raw


# ---------------------------------------------------------------------------
# load_document
# ---------------------------------------------------------------------------


class TestLoadDocument:
    def test_loads_json_file(self, widget_document_file: Path) -> None:
        document = load_document(str(widget_document_file))
        assert [c.name for c in document.commands] == ["Get-Widget", "Remove-Widget"]
        assert document.types["filter"].name == "WidgetFilter"
        assert document.types["filter"].id == "filter"

    def test_loads_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.yaml"
        path.write_text(
            textwrap.dedent("""\
                commands:
                  - name: Set-Value
                    variants:
                      - name: C
                        parameters:
                          - {name: Value, type: int, mandatory: true, position: 0}
                types:
                  - id: shape
                    name: Shape
            """)
        )
        document = load_document(str(path))
        (spec,) = document.commands
        assert spec.variants[0].parameters[0].position == 0
        assert document.types["shape"].name == "Shape"

    def test_command_lookup_case_insensitive(self, widget_document_file: Path) -> None:
        document = load_document(str(widget_document_file))
        spec = document.command("get-widget")
        assert spec is not None
        assert spec.variants[0].implementation_id == "Get-WidgetByName"
        assert document.command("Nope") is None

    def test_validation_error(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"commands": [{"name": "X"}]}))
        with pytest.raises(ModelLoadError, match="Invalid variant document in"):
            load_document(str(path))

    def test_negative_position_rejected(
        self, tmp_path: Path, widget_document_dict: dict[str, Any]
    ) -> None:
        data = widget_document_dict
        data["commands"][0]["variants"][0]["parameters"][0]["position"] = -1
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(data))
        with pytest.raises(ModelLoadError):
            load_document(str(path))

    def test_from_stdin(self, widget_document_dict: dict[str, Any]) -> None:
        content = json.dumps(widget_document_dict)
        with patch("sys.stdin", io.StringIO(content)):
            document = load_document("-")
        assert len(document.commands) == 2


# ---------------------------------------------------------------------------
# load_raw
# ---------------------------------------------------------------------------


class TestLoadRaw:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ModelLoadError, match="Variant document not found"):
            load_raw(str(tmp_path / "missing.json"))

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("   \n")
        with pytest.raises(ModelLoadError, match="Variant document is empty"):
            load_raw(str(path))

    def test_empty_stdin(self) -> None:
        with patch("sys.stdin", io.StringIO("")):
            with pytest.raises(ModelLoadError, match="No input received from stdin"):
                load_raw("-")

    def test_invalid_json_with_json_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.json"
        path.write_text("{not json")
        with pytest.raises(ModelLoadError, match="Invalid JSON"):
            load_raw(str(path))

    def test_unknown_extension_detects_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.txt"
        path.write_text("commands: []\n")
        assert load_raw(str(path)) == {"commands": []}


class TestParseContent:
    def test_json_first(self) -> None:
        assert _parse_content('{"a": 1}') == {"a": 1}

    def test_non_mapping(self) -> None:
        with pytest.raises(ModelLoadError, match=r"must be a JSON/YAML object \(got list\)"):
            _parse_content("[1, 2]")

    def test_empty_yaml(self) -> None:
        with pytest.raises(ModelLoadError, match="empty document"):
            _parse_content("---\n", hint="yaml")

    def test_both_parsers_fail(self) -> None:
        with pytest.raises(ModelLoadError, match="JSON error"):
            _parse_content("key: [unclosed")


# ---------------------------------------------------------------------------
# Type arena normalisation
# ---------------------------------------------------------------------------


class TestNormaliseTypes:
    def test_none(self) -> None:
        assert _normalise_types(None) == {}

    def test_mapping_gets_ids(self) -> None:
        assert _normalise_types({"a": {"name": "A"}}) == {"a": {"id": "a", "name": "A"}}

    def test_mapping_id_mismatch(self) -> None:
        with pytest.raises(ModelLoadError, match="different id 'b'"):
            _normalise_types({"a": {"id": "b", "name": "A"}})

    def test_list_needs_ids(self) -> None:
        with pytest.raises(ModelLoadError, match="needs an 'id'"):
            _normalise_types([{"name": "A"}])

    def test_list_duplicate_ids(self) -> None:
        with pytest.raises(ModelLoadError, match="declared more than once"):
            _normalise_types([{"id": "a", "name": "A"}, {"id": "a", "name": "B"}])
