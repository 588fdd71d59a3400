"""Configuration with XDG paths and precedence resolution.

This module handles the settings that shape ``actionscli build``:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.actionscli/`` on macOS and Windows. See :func:`get_data_dir`.
* **Project config** -- an optional ``./actionscli.json`` whose ``build``
  section holds per-project defaults. See :func:`load_project_config`.
* **Precedence resolution** -- :func:`resolve_build_config` merges CLI
  flags, environment variables, project config and defaults into a
  :class:`~actionscli.models.BuildConfig`.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from actionscli.exceptions import ConfigError
from actionscli.models import BuildConfig

_APP_NAME = "actionscli"
_PROJECT_CONFIG_FILENAME = "actionscli.json"

ENV_APP = "ACTIONSCLI_APP"
ENV_OUTPUT = "ACTIONSCLI_OUTPUT"
ENV_BUILD_TIMEOUT = "ACTIONSCLI_BUILD_TIMEOUT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/actionscli/`` (default
    ``~/.local/share/actionscli/``). On macOS/Windows: ``~/.actionscli/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./actionscli.json``.

    Returns:
        The decoded mapping, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file cannot be read or is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_build_config(
    cli_app: Optional[str] = None,
    cli_output: Optional[str] = None,
    cli_name: Optional[str] = None,
    cli_onedir: Optional[bool] = None,
    cli_timeout: Optional[float] = None,
) -> BuildConfig:
    """Resolve builder settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_*`` arguments that are not ``None``)
        2. Environment variables (``ACTIONSCLI_APP``, ``ACTIONSCLI_OUTPUT``,
           ``ACTIONSCLI_BUILD_TIMEOUT``)
        3. Project config (``build`` section of ``./actionscli.json``)
        4. Defaults

    Raises:
        ConfigError: If the project config is malformed or a value fails
            validation.
    """
    settings: dict[str, Any] = {}

    # 3. Project-local config
    project = load_project_config()
    if project is not None:
        section = project.get("build") or {}
        if not isinstance(section, dict):
            raise ConfigError("Invalid project config: 'build' must be an object")
        settings.update(section)

    # 2. Environment variables
    env_app = os.environ.get(ENV_APP)
    if env_app:
        settings["app"] = env_app
    env_output = os.environ.get(ENV_OUTPUT)
    if env_output:
        settings["output"] = env_output
    env_timeout = os.environ.get(ENV_BUILD_TIMEOUT)
    if env_timeout:
        settings["timeout"] = env_timeout

    # 1. CLI flags
    cli = {
        "app": cli_app,
        "output": cli_output,
        "name": cli_name,
        "onedir": cli_onedir,
        "timeout": cli_timeout,
    }
    settings.update({key: value for key, value in cli.items() if value is not None})

    try:
        return BuildConfig.model_validate(settings)
    except ValidationError as exc:
        raise ConfigError(f"Invalid build configuration: {exc}") from exc
