"""Load application documents from JSON or YAML files.

An application document is a single mapping in the :class:`~actionscli.models.Command`
schema. This module handles the I/O and format detection; validation is
delegated to Pydantic.

The two public functions are:

* :func:`load_document` -- Read and parse a document file.
* :func:`parse_document` -- Validate an already-decoded mapping.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from actionscli.exceptions import DocumentParseError
from actionscli.models import Command


def load_document(path: str | Path) -> Command:
    """Load an application document from *path*.

    ``.json`` files are parsed as JSON and ``.yaml``/``.yml`` files as YAML.
    Other extensions are tried as JSON first, then YAML.

    Args:
        path: Path to the document file.

    Returns:
        The root :class:`~actionscli.models.Command` of the tree.

    Raises:
        DocumentParseError: If the file is missing, empty, malformed, or does
            not match the command schema.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DocumentParseError(f"Application document not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentParseError(f"Failed to read {path}: {exc}") from exc

    if not content.strip():
        raise DocumentParseError(f"Application document is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return parse_document(_parse_content(content, hint=hint), source=str(path))


def parse_document(data: Any, source: str = "<document>") -> Command:
    """Validate decoded document *data* into a command tree.

    Args:
        data: The decoded JSON/YAML value.
        source: Label used in error messages.

    Raises:
        DocumentParseError: If *data* is not a mapping or fails validation.
    """
    if not isinstance(data, dict):
        kind = type(data).__name__ if data is not None else "empty document"
        raise DocumentParseError(
            f"{source}: document root must be a mapping (got {kind})"
        )
    try:
        return Command.model_validate(data)
    except ValidationError as exc:
        raise DocumentParseError(f"{source}: invalid application document\n{exc}") from exc


def _parse_content(content: str, hint: str = "") -> Any:
    """Decode *content* as JSON or YAML according to *hint*.

    With no hint, JSON is tried first since every JSON document is also YAML
    but JSON errors are more precise.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise DocumentParseError(f"Invalid JSON: {exc}") from exc
            json_error = exc

    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML: {exc}"
        if json_error is not None:
            msg = f"Failed to parse as JSON or YAML\n  JSON error: {json_error}\n  YAML error: {exc}"
        raise DocumentParseError(msg) from exc
