"""Output formatting with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- action results only (tables or JSON). This is what
  downstream tools pipe and parse.
* **stderr** -- all diagnostics (status, warnings, errors, suggestions).
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

The module exposes two layers:

1. :class:`OutputManager` -- holds the result format, quiet/verbose flags
   and the Rich consoles. The dispatcher creates one per invocation from
   the ``--format`` and ``-q`` flags of the dispatched command.
2. Module-level convenience functions (:func:`info`, :func:`error`, ...)
   that delegate to a global ``OutputManager`` installed by
   :func:`actionscli.app.main_callback`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Mapping, Optional

from rich.console import Console
from rich.table import Table

MAX_CELL_WIDTH = 100
"""Longest value shown in a table cell before it is shortened."""


class OutputFormat(str, Enum):
    """Result formats accepted by the ``--format`` flag."""

    TABLE = "table"
    JSON = "json"


def display_value(value: Any, limit: int = MAX_CELL_WIDTH) -> str:
    """Convert a result value to table text, shortening long values.

    Strings are used as-is, bytes are decoded as UTF-8, and mappings are
    JSON-encoded. Text longer than *limit* characters is cut to *limit*
    characters followed by ``...``. The original value is never modified.
    """
    if isinstance(value, str):
        text = value
    elif isinstance(value, (bytes, bytearray)):
        text = bytes(value).decode("utf-8", errors="replace")
    elif isinstance(value, Mapping):
        text = json.dumps(dict(value), ensure_ascii=False, default=str)
    else:
        text = f"{value}"

    if len(text) > limit:
        text = text[:limit] + "..."
    return text


class OutputManager:
    """Central manager for result output and diagnostics.

    Args:
        format: Result format for :meth:`print_result`.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress results and non-essential messages.
        verbose: Enable debug-level messages on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.TABLE,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._format = OutputFormat(format)
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        self._stdout = Console(file=sys.stdout, no_color=self._no_color)
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        """The result format."""
        return self._format

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_result(self, result: Mapping[str, Any]) -> None:
        """Render an action result to stdout. Suppressed by quiet mode.

        * **JSON** -- the whole result, pretty-printed.
        * **Table** -- one column per key, values shortened with
          :func:`display_value`.

        Args:
            result: Mapping returned by the action runtime.
        """
        if self._quiet:
            return

        if self._format == OutputFormat.JSON:
            self.print_data(
                json.dumps(dict(result), indent=2, ensure_ascii=False, default=_json_default)
            )
            return

        headers = [str(key) for key in result]
        row = [display_value(value) for value in result.values()]
        self.print_table(headers, [row])

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print a Rich table to stdout.

        Args:
            headers: Column header strings.
            rows: List of rows, where each row is a list of cell strings.
            title: Optional table title.
        """
        table = Table(title=title, show_header=True, header_style="bold cyan")
        for h in headers:
            table.add_column(h, overflow="fold")
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    def print_data(self, text: str) -> None:
        """Print raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def _diagnostic(self, level: str, message: str) -> None:
        label, style, quietable = _DIAGNOSTIC_LEVELS[level]
        if quietable and self._quiet:
            return
        if level == "debug" and not self._verbose:
            return

        text = f"{label}{message}"
        if self._no_color:
            print(text, file=sys.stderr, flush=True)
        elif style:
            self._stderr.print(text, style=style, markup=False, highlight=False)
        else:
            self._stderr.print(text, markup=False)

    def info(self, message: str) -> None:
        """Status line on stderr. Suppressed by quiet mode."""
        self._diagnostic("info", message)

    def success(self, message: str) -> None:
        self._diagnostic("success", message)

    def warning(self, message: str) -> None:
        """Warning on stderr, shown even in quiet mode."""
        self._diagnostic("warning", message)

    def error(self, message: str) -> None:
        """Error on stderr. Never suppressed."""
        self._diagnostic("error", message)

    def suggest(self, message: str) -> None:
        """Dimmed next-step hint, e.g. how to try a freshly built binary."""
        self._diagnostic("suggest", message)

    def debug(self, message: str) -> None:
        self._diagnostic("debug", message)


# level -> (label, rich style, suppressed by quiet mode)
_DIAGNOSTIC_LEVELS: dict[str, tuple[str, str, bool]] = {
    "info": ("", "", True),
    "success": ("", "green", True),
    "warning": ("Warning: ", "yellow", False),
    "error": ("Error: ", "bold red", False),
    "suggest": ("→ ", "dim", True),
    "debug": ("[debug] ", "dim", True),
}


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _should_disable_color() -> bool:
    """Return True when NO_COLOR is set (any value) or TERM=dumb."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)
