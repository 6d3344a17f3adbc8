"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- JSON and plain data output, tables and documents
- Output file redirection
- Global instance management
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from variantcli import output as output_module
from variantcli.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture()
def non_tty(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("variantcli.output._is_tty", lambda: False)


@pytest.fixture()
def clean_color_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("TERM", raising=False)


class TestFormatResolution:
    def test_auto_resolves_to_plain_when_piped(self, non_tty: None) -> None:
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_on_tty(
        self, monkeypatch: pytest.MonkeyPatch, clean_color_env: None
    ) -> None:
        monkeypatch.setattr("variantcli.output._is_tty", lambda: True)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_explicit_format_kept(self) -> None:
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_default(self, clean_color_env: None) -> None:
        assert _should_disable_color() is False


class TestDataOutput:
    def test_json_dict(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.JSON).format_data({"command": "Get-Widget"})
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"command": "Get-Widget"}
        assert captured.err == ""

    def test_plain_dict_is_tab_separated(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).format_data({"a": 1, "b": [1, 2]})
        assert capsys.readouterr().out == "a\t1\nb\t[1, 2]\n"

    def test_plain_list_of_dicts(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).format_data([{"x": "1", "y": "2"}])
        assert capsys.readouterr().out == "1\t2\n"

    def test_print_data_strips_trailing_newlines(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).print_data("text\n\n")
        assert capsys.readouterr().out == "text\n"

    def test_document_verbatim_when_plain(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).print_document("# Title\n\nBody\n")
        assert capsys.readouterr().out == "# Title\n\nBody\n"

    def test_table_plain(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).print_table(["A", "B"], [["1", "2"]])
        assert capsys.readouterr().out == "A\tB\n1\t2\n"

    def test_table_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.JSON).print_table(["A", "B"], [["1", "2"]])
        assert json.loads(capsys.readouterr().out) == [{"A": "1", "B": "2"}]

    def test_output_file_appends(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        target = tmp_path / "out.txt"
        manager = OutputManager(format=OutputFormat.PLAIN, output_file=str(target))
        manager.print_data("one")
        manager.format_data({"two": 2})
        assert target.read_text() == 'one\n{\n  "two": 2\n}\n'
        assert capsys.readouterr().out == ""


class TestDiagnostics:
    def test_messages_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        manager = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        manager.info("working")
        manager.warning("careful")
        manager.error("broken")
        manager.suggest("try this")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "working\nWarning: careful\nError: broken\n→ try this\n"

    def test_quiet_keeps_warnings_and_errors(self, capsys: pytest.CaptureFixture[str]) -> None:
        manager = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        manager.info("hidden")
        manager.success("hidden")
        manager.suggest("hidden")
        manager.warning("shown")
        manager.error("shown")
        assert capsys.readouterr().err == "Warning: shown\nError: shown\n"

    def test_debug_needs_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(no_color=True).debug("quiet")
        OutputManager(no_color=True, verbose=True).debug("loud")
        assert capsys.readouterr().err == "[debug] loud\n"


class TestGlobalInstance:
    def test_lazy_default(self) -> None:
        reset_output()
        assert get_output() is get_output()

    def test_set_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        manager = OutputManager(format=OutputFormat.JSON)
        set_output(manager)
        assert get_output() is manager
        output_module.format_data([1])
        assert json.loads(capsys.readouterr().out) == [1]
