"""Tests for actionscli.generator.emitter.

Covers:
- indent_block leaves blank lines untouched
- Value rendering of scalars, escapes, nested containers
- Values without a literal form raise CodegenError
- Call and Sequence layout, empty forms, nesting
"""

from __future__ import annotations

import ast
from datetime import datetime

import pytest

from actionscli.exceptions import CodegenError
from actionscli.generator.emitter import Call, Sequence, Value, indent_block, render


class TestIndentBlock:
    """Test indent_block."""

    def test_indents_each_line(self) -> None:
        assert indent_block("a\nb") == "    a\n    b"

    def test_blank_lines_untouched(self) -> None:
        assert indent_block("a\n\nb", depth=2) == "        a\n\n        b"


class TestValue:
    """Test literal rendering."""

    @pytest.mark.parametrize("value", ["", "plain", 0, 1.5, True, None, [], {}])
    def test_scalars(self, value) -> None:
        assert ast.literal_eval(Value(value).render()) == value

    def test_escapes(self) -> None:
        tricky = 'say "hi"\\n\nnext \'line\''
        assert ast.literal_eval(Value(tricky).render()) == tricky

    def test_nested(self) -> None:
        data = {"a": [1, {"b": "c"}], "z": None}
        text = Value(data).render()
        assert ast.literal_eval(text) == data
        assert text.index("'a'") < text.index("'z'")

    def test_long_string(self) -> None:
        long = "word " * 60
        assert ast.literal_eval(Value(long).render()) == long

    def test_no_literal_form(self) -> None:
        with pytest.raises(CodegenError, match="cannot be written as a literal"):
            Value(datetime(2024, 1, 1)).render()

    def test_nan_rejected(self) -> None:
        with pytest.raises(CodegenError):
            Value(float("nan")).render()


class TestCall:
    """Test call rendering."""

    def test_no_fields(self) -> None:
        assert Call("Thing", []).render() == "Thing()"

    def test_fields_one_per_line(self) -> None:
        text = Call("Point", [("x", Value(1)), ("y", Value("a"))]).render()
        assert text == "Point(\n    x=1,\n    y='a',\n)"

    def test_nested_indentation(self) -> None:
        node = Call("Outer", [("inner", Call("Inner", [("v", Value(2))]))])
        assert node.render() == "Outer(\n    inner=Inner(\n        v=2,\n    ),\n)"


class TestSequence:
    """Test list rendering."""

    def test_empty(self) -> None:
        assert Sequence([]).render() == "[]"

    def test_items(self) -> None:
        text = Sequence([Value(1), Call("X", [])]).render()
        assert text == "[\n    1,\n    X(),\n]"


class TestRender:
    """Test the top-level render function."""

    def test_depth(self) -> None:
        assert render(Sequence([Value(1)]), depth=1) == "    [\n        1,\n    ]"

    def test_output_is_valid_python(self) -> None:
        node = Call("f", [("items", Sequence([Value("a\nb"), Value({"k": [1]})]))])
        ast.parse(render(node))
