"""Tests for actionscli.document.

Covers:
- Loading JSON and YAML documents into identical trees
- Extension-less documents (JSON first, YAML fallback)
- Missing, empty, malformed and non-mapping documents
- Schema validation errors wrapped in DocumentParseError
"""

from __future__ import annotations

from pathlib import Path

import pytest

from actionscli.exceptions import DocumentParseError
from actionscli.exit_codes import EXIT_DOCUMENT_ERROR
from actionscli.document import load_document, parse_document
from actionscli.models import NamedAction


class TestLoadDocument:
    """Test load_document."""

    def test_json(self, app_json_path: Path) -> None:
        tree = load_document(app_json_path)
        assert tree.name == "tool"
        assert [c.name for c in tree.commands] == ["greet", "fetch", "copy", "remote"]

    def test_yaml_matches_json(self, app_json_path: Path, app_yaml_path: Path) -> None:
        assert load_document(app_yaml_path) == load_document(app_json_path)

    def test_named_action_from_yaml(self, app_yaml_path: Path) -> None:
        fetch = load_document(app_yaml_path).get_command("fetch")
        assert fetch.action == NamedAction(name="http.get", context={"timeout": "5s"})

    def test_string_path(self, app_json_path: Path) -> None:
        assert load_document(str(app_json_path)).name == "tool"

    def test_no_extension_json(self, tmp_path: Path) -> None:
        path = tmp_path / "app"
        path.write_text('{"name": "x"}')
        assert load_document(path).name == "x"

    def test_no_extension_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "app"
        path.write_text("name: x\naction: core.echo\n")
        assert load_document(path).is_runnable

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentParseError, match="not found"):
            load_document(tmp_path / "nope.json")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "app.json"
        path.write_text("  \n")
        with pytest.raises(DocumentParseError, match="empty"):
            load_document(path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "app.json"
        path.write_text("{not json")
        with pytest.raises(DocumentParseError, match="Invalid JSON"):
            load_document(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "app.yaml"
        path.write_text("name: [unclosed\n")
        with pytest.raises(DocumentParseError, match="Invalid YAML"):
            load_document(path)

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        path = tmp_path / "app.json"
        path.write_text("[1, 2]")
        with pytest.raises(DocumentParseError, match="must be a mapping"):
            load_document(path)

    def test_exit_code(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentParseError) as exc_info:
            load_document(tmp_path / "nope.json")
        assert exc_info.value.exit_code == EXIT_DOCUMENT_ERROR


class TestParseDocument:
    """Test parse_document validation."""

    def test_valid(self) -> None:
        assert parse_document({"name": "x"}).name == "x"

    def test_missing_name(self) -> None:
        with pytest.raises(DocumentParseError, match="invalid application document"):
            parse_document({"description": "no name"})

    def test_bad_action_shape(self) -> None:
        with pytest.raises(DocumentParseError):
            parse_document({"name": "x", "action": {"ctx": {}}})

    def test_flag_shadowing_format_option(self) -> None:
        data = {
            "name": "t",
            "commands": [{"name": "sub", "flags": [{"name": "format"}]}],
        }
        with pytest.raises(DocumentParseError, match="reserved for a built-in option"):
            parse_document(data)

    def test_source_label_in_message(self) -> None:
        with pytest.raises(DocumentParseError, match="custom.json"):
            parse_document(None, source="custom.json")
