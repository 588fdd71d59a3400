"""Shared test fixtures for actionscli.

Provides reusable fixtures for loading application documents, creating
isolated config environments, recording action requests, managing output
state, and running CLI commands. These fixtures are automatically
discovered by pytest and available to all test modules without explicit
imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import pytest

from actionscli.models import ActionRequest, Command
from actionscli.output import reset_output
from actionscli.sources import SourceRegistry


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _restore_package_logger() -> None:
    """Undo the Rich handler installed by the root CLI callback.

    ``main_callback`` stops the ``actionscli`` logger from propagating,
    which would hide records from ``caplog`` in later tests.
    """
    logger = logging.getLogger("actionscli")
    handlers = list(logger.handlers)
    level, propagate = logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app_json_path() -> Path:
    """Path to the JSON application document fixture."""
    return FIXTURES_DIR / "app.json"


@pytest.fixture
def app_yaml_path() -> Path:
    """Path to the YAML application document fixture."""
    return FIXTURES_DIR / "app.yaml"


@pytest.fixture
def app_raw(app_json_path: Path) -> dict[str, Any]:
    """Raw decoded JSON application document."""
    with open(app_json_path) as f:
        return json.load(f)


@pytest.fixture
def app_tree(app_raw: dict[str, Any]) -> Command:
    """Parsed command tree of the JSON fixture."""
    return Command.model_validate(app_raw)


# ---------------------------------------------------------------------------
# Runtime fixtures
# ---------------------------------------------------------------------------


class RecordingRuntime:
    """Action runtime that records requests instead of executing them.

    Every request is appended to :attr:`requests` and answered with its
    own context, which makes the dispatched context visible in output.
    """

    def __init__(self, registry: SourceRegistry | None = None) -> None:
        self.registry = registry if registry is not None else SourceRegistry()
        self.requests: list[ActionRequest] = []

    def run(self, request: ActionRequest) -> Mapping[str, Any]:
        self.requests.append(request)
        return dict(request.context)

    @property
    def last(self) -> ActionRequest:
        return self.requests[-1]


@pytest.fixture
def recording_runtime() -> RecordingRuntime:
    """A fresh :class:`RecordingRuntime` with an empty registry."""
    return RecordingRuntime()


@pytest.fixture
def runtime_factory() -> type[RecordingRuntime]:
    """The :class:`RecordingRuntime` class, for tests that need several."""
    return RecordingRuntime


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_DATA_HOME to a subdirectory of tmp_path so that tests never
    touch real user data. Clears all ACTIONSCLI_* environment variables and
    changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "ACTIONSCLI_APP",
        "ACTIONSCLI_OUTPUT",
        "ACTIONSCLI_BUILD_TIMEOUT",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
