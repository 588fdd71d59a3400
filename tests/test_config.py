"""Tests for actionscli.config.

Covers:
- XDG data directory resolution
- Project config loading from ./actionscli.json
- Build settings precedence: CLI > env > project > defaults
- Validation errors surfaced as ConfigError
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from actionscli.config import get_data_dir, load_project_config, resolve_build_config
from actionscli.exceptions import ConfigError


class TestDataDir:
    """Test get_data_dir."""

    def test_xdg(self, isolated_config: Path) -> None:
        with patch("actionscli.config.platform.system", return_value="Linux"):
            path = get_data_dir()
        assert path == isolated_config / "data" / "actionscli"
        assert path.is_dir()

    def test_non_xdg_platform(self, tmp_path: Path) -> None:
        with patch("actionscli.config.platform.system", return_value="Darwin"), patch(
            "actionscli.config.Path.home", return_value=tmp_path
        ):
            assert get_data_dir() == tmp_path / ".actionscli"


class TestProjectConfig:
    """Test load_project_config."""

    def test_missing(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_loaded(self, isolated_config: Path) -> None:
        (isolated_config / "actionscli.json").write_text(
            json.dumps({"build": {"output": "./dist/tool"}})
        )
        assert load_project_config() == {"build": {"output": "./dist/tool"}}

    def test_invalid_json(self, isolated_config: Path) -> None:
        (isolated_config / "actionscli.json").write_text("{broken")
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()

    def test_not_an_object(self, isolated_config: Path) -> None:
        (isolated_config / "actionscli.json").write_text("[]")
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()


class TestResolveBuildConfig:
    """Test the precedence chain."""

    def test_defaults(self, isolated_config: Path) -> None:
        cfg = resolve_build_config()
        assert cfg.app == "app.json"
        assert cfg.output == "./app"
        assert cfg.timeout is None

    def test_project_over_defaults(self, isolated_config: Path) -> None:
        (isolated_config / "actionscli.json").write_text(
            json.dumps({"build": {"app": "tool.yaml", "onedir": True}})
        )
        cfg = resolve_build_config()
        assert cfg.app == "tool.yaml"
        assert cfg.onedir is True

    def test_env_over_project(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (isolated_config / "actionscli.json").write_text(
            json.dumps({"build": {"output": "./from-project", "timeout": 10}})
        )
        monkeypatch.setenv("ACTIONSCLI_OUTPUT", "./from-env")
        monkeypatch.setenv("ACTIONSCLI_BUILD_TIMEOUT", "42.5")
        cfg = resolve_build_config()
        assert cfg.output == "./from-env"
        assert cfg.timeout == 42.5

    def test_cli_over_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ACTIONSCLI_APP", "env.json")
        cfg = resolve_build_config(cli_app="cli.json", cli_name="renamed")
        assert cfg.app == "cli.json"
        assert cfg.name == "renamed"

    def test_invalid_timeout(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ACTIONSCLI_BUILD_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="Invalid build configuration"):
            resolve_build_config()

    def test_build_section_must_be_object(self, isolated_config: Path) -> None:
        (isolated_config / "actionscli.json").write_text(json.dumps({"build": "fast"}))
        with pytest.raises(ConfigError, match="'build' must be an object"):
            resolve_build_config()
