"""Tests for restdoc.config -- build configuration precedence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from restdoc.config import (
    ENV_BOOKMARK_EXTENSION,
    ENV_OUTPUT_DIR,
    ENV_STRICT,
    PROJECT_CONFIG_FILENAME,
    load_project_config,
    resolve_config,
)
from restdoc.exceptions import ConfigError


def _write_project(directory: Path, data) -> None:
    (directory / PROJECT_CONFIG_FILENAME).write_text(json.dumps(data), encoding="utf-8")


class TestLoadProjectConfig:
    def test_missing_file(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_reads_object(self, isolated_config: Path) -> None:
        _write_project(isolated_config, {"output_dir": "out"})
        assert load_project_config() == {"output_dir": "out"}

    def test_explicit_directory(self, tmp_path: Path) -> None:
        _write_project(tmp_path, {"strict": False})
        assert load_project_config(tmp_path) == {"strict": False}

    def test_invalid_json(self, isolated_config: Path) -> None:
        (isolated_config / PROJECT_CONFIG_FILENAME).write_text("{nope", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()

    def test_non_object(self, isolated_config: Path) -> None:
        _write_project(isolated_config, [1, 2])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        config = resolve_config()
        assert config.output_dir == "_site"
        assert config.strict is True
        assert config.bookmark_extension == "x-bookmark-id"
        assert config.metadata == {}
        assert config.verbose is False

    def test_project_over_defaults(self, isolated_config: Path) -> None:
        _write_project(
            isolated_config,
            {"output_dir": "docs/api", "strict": False, "metadata": {"_appTitle": "Contoso"}},
        )
        config = resolve_config()
        assert config.output_dir == "docs/api"
        assert config.strict is False
        assert config.metadata == {"_appTitle": "Contoso"}

    def test_env_over_project(self, isolated_config: Path, monkeypatch) -> None:
        _write_project(isolated_config, {"output_dir": "docs/api", "strict": True})
        monkeypatch.setenv(ENV_OUTPUT_DIR, "env-out")
        monkeypatch.setenv(ENV_STRICT, "no")
        monkeypatch.setenv(ENV_BOOKMARK_EXTENSION, "x-anchor")
        config = resolve_config()
        assert config.output_dir == "env-out"
        assert config.strict is False
        assert config.bookmark_extension == "x-anchor"

    def test_cli_over_env(self, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setenv(ENV_OUTPUT_DIR, "env-out")
        monkeypatch.setenv(ENV_STRICT, "false")
        config = resolve_config(cli_output_dir="cli-out", cli_strict=True, cli_verbose=True)
        assert config.output_dir == "cli-out"
        assert config.strict is True
        assert config.verbose is True

    def test_cli_metadata_merged_over_project(self, isolated_config: Path) -> None:
        _write_project(isolated_config, {"metadata": {"a": 1, "b": 2}})
        config = resolve_config(cli_metadata={"b": "cli", "c": "new"})
        assert config.metadata == {"a": 1, "b": "cli", "c": "new"}

    def test_blank_env_ignored(self, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setenv(ENV_STRICT, "  ")
        monkeypatch.setenv(ENV_OUTPUT_DIR, "")
        config = resolve_config()
        assert config.strict is True
        assert config.output_dir == "_site"

    def test_invalid_env_flag(self, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setenv(ENV_STRICT, "maybe")
        with pytest.raises(ConfigError, match=ENV_STRICT):
            resolve_config()

    def test_invalid_project_field(self, isolated_config: Path) -> None:
        _write_project(isolated_config, {"strict": "sometimes"})
        with pytest.raises(ConfigError, match="Invalid project config"):
            resolve_config()

    def test_explicit_directory(self, tmp_path: Path, isolated_config: Path) -> None:
        project_dir = tmp_path / "project"
        project_dir.mkdir()
        _write_project(project_dir, {"output_dir": "elsewhere"})
        assert resolve_config(directory=project_dir).output_dir == "elsewhere"
