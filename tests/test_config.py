"""Tests for variantcli.config: XDG paths, atomic writes and precedence."""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from variantcli.config import (
    ENV_FORMAT,
    _atomic_write,
    _deep_merge,
    get_config_dir,
    get_data_dir,
    global_config_path,
    load_global_config,
    load_project_config,
    resolve_config,
    save_global_config,
    set_config_value,
)
from variantcli.exceptions import ConfigError
from variantcli.models import GenerationConfig, GlobalConfig, OutputConfig


# ---------------------------------------------------------------------------
# XDG paths
# ---------------------------------------------------------------------------


class TestXDGPathsLinux:
    """XDG paths on Linux (the default XDG platform)."""

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("variantcli.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "variantcli"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("variantcli.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        assert get_config_dir() == custom / "variantcli"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("variantcli.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_data_dir()
        assert result == tmp_path / ".local" / "share" / "variantcli"
        assert result.is_dir()


class TestXDGPathsFallback:
    """macOS and Windows use ~/.variantcli."""

    def test_config_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("variantcli.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".variantcli"

    def test_data_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("variantcli.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_data_dir() == tmp_path / ".variantcli" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "out.json"
        _atomic_write(target, '{"key": "value"}')
        assert target.read_text() == '{"key": "value"}'

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "file.txt"
        _atomic_write(target, "nested")
        assert target.read_text() == "nested"

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "fail.txt"
        with patch("variantcli.config.os.replace", side_effect=OSError("boom")):
            with pytest.raises(OSError, match="boom"):
                _atomic_write(target, "data")
        assert os.listdir(tmp_path) == []


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_load_returns_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.generation.half_indent == 2

    def test_save_and_load_roundtrip(self, isolated_config: Path) -> None:
        config = GlobalConfig(
            output=OutputConfig(format="json"),
            generation=GenerationConfig(half_indent=4, backticks=True),
        )
        save_global_config(config)
        assert load_global_config() == config
        assert json.loads(global_config_path().read_text())["generation"]["half_indent"] == 4

    def test_load_invalid_json_raises_config_error(self, isolated_config: Path) -> None:
        global_config_path().write_text("{nope")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_load_invalid_schema_raises_config_error(self, isolated_config: Path) -> None:
        global_config_path().write_text(json.dumps({"generation": {"half_indent": 0}}))
        with pytest.raises(ConfigError):
            load_global_config()


class TestSetConfigValue:
    def test_int_coercion(self) -> None:
        updated = set_config_value(GlobalConfig(), "generation.half_indent", "3")
        assert updated.generation.half_indent == 3

    def test_bool_coercion(self) -> None:
        updated = set_config_value(GlobalConfig(), "generation.include_complex_notes", "false")
        assert updated.generation.include_complex_notes is False

    def test_string_value(self) -> None:
        updated = set_config_value(GlobalConfig(), "generation.confirm_impact", "High")
        assert updated.generation.confirm_impact == "High"

    def test_original_unchanged(self) -> None:
        config = GlobalConfig()
        set_config_value(config, "output.format", "json")
        assert config.output.format == "auto"

    def test_unknown_section(self) -> None:
        with pytest.raises(ConfigError, match="Invalid config key"):
            set_config_value(GlobalConfig(), "nope.half_indent", "3")

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigError, match="Unknown config key"):
            set_config_value(GlobalConfig(), "generation.nope", "3")

    def test_section_is_not_a_value(self) -> None:
        with pytest.raises(ConfigError, match="Unknown config key"):
            set_config_value(GlobalConfig(), "generation", "3")

    def test_bad_integer(self) -> None:
        with pytest.raises(ConfigError, match="Expected integer"):
            set_config_value(GlobalConfig(), "generation.half_indent", "wide")

    def test_out_of_range(self) -> None:
        with pytest.raises(ConfigError, match="Invalid value for generation.half_indent"):
            set_config_value(GlobalConfig(), "generation.half_indent", "0")


# ---------------------------------------------------------------------------
# Project config and precedence
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_none_when_missing(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_loads_partial_object(self, isolated_config: Path) -> None:
        (isolated_config / "variantcli.json").write_text('{"generation": {"backticks": true}}')
        assert load_project_config() == {"generation": {"backticks": True}}

    def test_non_object_rejected(self, isolated_config: Path) -> None:
        (isolated_config / "variantcli.json").write_text("[1]")
        with pytest.raises(ConfigError, match="must be a JSON object"):
            load_project_config()


class TestDeepMerge:
    def test_nested_override(self) -> None:
        base = {"a": {"x": 1, "y": 2}, "b": 1}
        assert _deep_merge(base, {"a": {"y": 3}}) == {"a": {"x": 1, "y": 3}, "b": 1}
        assert base["a"]["y"] == 2


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config() == GlobalConfig()

    def test_project_overrides_global(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(generation=GenerationConfig(half_indent=4, backticks=True)))
        (isolated_config / "variantcli.json").write_text('{"generation": {"half_indent": 3}}')

        config = resolve_config()
        assert config.generation.half_indent == 3
        assert config.generation.backticks is True

    def test_env_overrides_files(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_global_config(GlobalConfig(output=OutputConfig(format="plain")))
        monkeypatch.setenv(ENV_FORMAT, "json")
        assert resolve_config().output.format == "json"

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_FORMAT, "json")
        assert resolve_config(cli_format="plain").output.format == "plain"

    def test_invalid_project_values(self, isolated_config: Path) -> None:
        (isolated_config / "variantcli.json").write_text('{"generation": {"half_indent": -1}}')
        with pytest.raises(ConfigError, match="Invalid project config"):
            resolve_config()
