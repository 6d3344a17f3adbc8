"""Tests for variantcli.docs.help_info."""

from __future__ import annotations

from typing import Any

import pytest

from variantcli.docs.help_info import parse_help_info, parse_parameter_help, to_nullable_bool


def _help_object() -> dict[str, Any]:
    return {
        "Name": "Get-Widget",
        "ModuleName": "Widgets",
        "Synopsis": "Gets widgets.",
        "Category": "Function",
        "CommonParameters": "true",
        "description": [{"Text": "First paragraph."}, {"Text": "Second paragraph."}],
        "relatedLinks": {
            "navigationLink": [
                {"uri": "https://example.com/get-widget", "linkText": "Online Version:"},
                {"uri": "https://example.com/about", "linkText": "About widgets"},
            ]
        },
        "inputTypes": {"inputType": {"type": {"name": "System.String"}}},
        "returnValues": {
            "returnValue": [{"type": {"name": "Widget"}, "description": [{"Text": "A widget."}]}]
        },
        "examples": {
            "example": {"title": "Example 1", "code": "Get-Widget -Name a", "remarks": "Gets a."}
        },
        "aliases": "gw\nwidget",
        "parameters": {
            "parameter": [
                {
                    "name": "Name",
                    "type": {"name": "System.String"},
                    "required": "true",
                    "position": "0",
                    "parameterSetName": "ByName, ByTag",
                    "pipelineInput": "False",
                    "globbing": "false",
                }
            ]
        },
        "syntax": {"syntaxItem": {"name": "Get-Widget", "parameter": {"name": "Name"}}},
    }


class TestParseHelpInfo:
    def test_scalars(self) -> None:
        info = parse_help_info(_help_object())
        assert info.command_name == "Get-Widget"
        assert info.module_name == "Widgets"
        assert info.synopsis == "Gets widgets."
        assert info.has_common_parameters is True
        assert info.description == "First paragraph.\nSecond paragraph."

    def test_links(self) -> None:
        info = parse_help_info(_help_object())
        assert info.online_version is not None
        assert info.online_version.uri == "https://example.com/get-widget"
        assert [link.text for link in info.related_links] == ["About widgets"]

    def test_single_untitled_link_is_online(self) -> None:
        info = parse_help_info(
            {"relatedLinks": {"navigationLink": {"uri": "https://example.com/x"}}}
        )
        assert info.online_version is not None
        assert info.online_version.uri == "https://example.com/x"
        assert info.related_links == []

    def test_single_item_lists(self) -> None:
        info = parse_help_info(_help_object())
        assert [t.name for t in info.input_types] == ["System.String"]
        assert info.output_types[0].description == "A widget."
        assert info.examples[0].code == "Get-Widget -Name a"
        assert info.syntax[0].parameters[0].name == "Name"

    def test_aliases(self) -> None:
        assert parse_help_info(_help_object()).aliases == ["gw", "widget"]

    def test_case_insensitive_keys(self) -> None:
        info = parse_help_info({"name": "Get-Widget", "SYNOPSIS": "Gets."})
        assert info.command_name == "Get-Widget"
        assert info.synopsis == "Gets."

    def test_name_falls_back_to_details(self) -> None:
        info = parse_help_info(
            {"Name": "", "details": {"name": "Get-Widget", "description": [{"Text": "From details."}]}}
        )
        assert info.command_name == "Get-Widget"
        assert info.description == "From details."

    def test_empty_object(self) -> None:
        info = parse_help_info({})
        assert info.command_name is None
        assert info.parameters == []
        assert info.online_version is None


class TestParseParameterHelp:
    def test_fields(self) -> None:
        (raw,) = _help_object()["parameters"]["parameter"]
        param = parse_parameter_help(raw)
        assert param.name == "Name"
        assert param.type_name == "System.String"
        assert param.parameter_set_names == ["ByName", "ByTag"]
        assert param.is_required is True
        assert param.supports_globbing is False
        assert param.is_dynamic is None

    def test_parameter_value_preferred(self) -> None:
        param = parse_parameter_help({"parameterValue": "String", "type": {"name": "System.String"}})
        assert param.type_name == "String"


class TestToNullableBool:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(True, True), (False, False), ("True", True), (" false ", False), ("yes", None), (None, None), (1, None)],
    )
    def test_values(self, value: Any, expected: Any) -> None:
        assert to_nullable_bool(value) is expected
