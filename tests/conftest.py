"""Shared test fixtures for variantcli.

Provides reusable variant fixtures (including the two reference examples),
a self-referential type arena, isolated config environments, output
management and a CLI runner.  These fixtures are discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from variantcli.models import (
    CommandSpec,
    Parameter,
    TypeProperty,
    TypeSchema,
    Variant,
)
from variantcli.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at creation
    time.  When CliRunner redirects those streams and the test finishes, the
    cached references become stale, so a fresh manager is forced.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Variant fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def example_a_variants() -> list[Variant]:
    """A(Name mandatory, Id optional) and B(Name mandatory, Tag mandatory + pipeline)."""
    return [
        Variant(
            name="A",
            parameters=(
                Parameter(name="Name", mandatory=True, help_message="Name from A."),
                Parameter(name="Id", type="int"),
            ),
            description="Gets widgets.\nSupports lookups by name, id and tag.",
            link="https://example.com/widgets",
        ),
        Variant(
            name="B",
            parameters=(
                Parameter(name="Name", mandatory=True, help_message="Name from B."),
                Parameter(name="Tag", mandatory=True, value_from_pipeline=True),
            ),
        ),
    ]


@pytest.fixture
def example_b_variant() -> Variant:
    """Single variant C(Value mandatory at position 0)."""
    return Variant(
        name="C",
        parameters=(Parameter(name="Value", type="int", mandatory=True, position=0),),
    )


@pytest.fixture
def widget_spec(example_a_variants: list[Variant]) -> CommandSpec:
    return CommandSpec(name="Get-Widget", variants=tuple(example_a_variants))


@pytest.fixture
def cyclic_registry() -> dict[str, TypeSchema]:
    """Type arena with a depth-2 cycle: Node -> Edge -> Node, plus a self-loop."""
    return {
        "node": TypeSchema(
            id="node",
            name="Node",
            description="A graph node.",
            properties=(
                TypeProperty(name="Id", type="string", required=True, description="Node id."),
                TypeProperty(name="Edges", type="Edge[]", type_id="edge", description="Out edges."),
                TypeProperty(name="Parent", type="Node", type_id="node", description="Parent node."),
            ),
        ),
        "edge": TypeSchema(
            id="edge",
            name="Edge",
            properties=(
                TypeProperty(name="Weight", type="int", description="Edge weight."),
                TypeProperty(name="Target", type="Node", type_id="node", description="Target node."),
            ),
        ),
    }


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


def widget_document_data() -> dict[str, Any]:
    """Raw variant document used by loader and CLI tests."""
    return {
        "commands": [
            {
                "name": "Get-Widget",
                "variants": [
                    {
                        "name": "ByName",
                        "is_default": True,
                        "description": "Gets a widget.",
                        "link": "https://example.com/get-widget",
                        "implementation": "Get-WidgetByName",
                        "parameters": [
                            {"name": "Name", "type": "string", "mandatory": True, "position": 0},
                            {"name": "Filter", "type": "WidgetFilter", "complex_type": "filter"},
                        ],
                    },
                    {
                        "name": "ByTag",
                        "implementation": "Get-WidgetByTag",
                        "parameters": [
                            {"name": "Tag", "type": "string", "mandatory": True,
                             "value_from_pipeline": True},
                            {"name": "Filter", "type": "WidgetFilter", "complex_type": "filter"},
                        ],
                    },
                ],
            },
            {
                "name": "Remove-Widget",
                "variants": [
                    {
                        "name": "Delete",
                        "supports_should_process": True,
                        "parameters": [
                            {"name": "Name", "mandatory": True},
                            {"name": "Force", "type": "switch"},
                        ],
                    }
                ],
            },
        ],
        "types": {
            "filter": {
                "name": "WidgetFilter",
                "description": "Filter for widgets.",
                "properties": [
                    {"name": "Owner", "type": "string", "required": True, "description": "Owner."},
                    {"name": "Limit", "type": "int", "description": "Maximum results."},
                ],
            }
        },
    }


@pytest.fixture
def widget_document_dict() -> dict[str, Any]:
    return widget_document_data()


@pytest.fixture
def widget_document_file(tmp_path: Path) -> Path:
    """The widget document written as JSON into tmp_path."""
    path = tmp_path / "widgets.json"
    path.write_text(json.dumps(widget_document_data()), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at tmp_path, clears ``VARIANTCLI_*``
    variables and changes the working directory to tmp_path.
    """
    monkeypatch.setattr("variantcli.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("VARIANTCLI_FORMAT", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
