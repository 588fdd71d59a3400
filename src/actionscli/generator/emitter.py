"""Indentation-aware emitter for Python literal source.

Source is built as a small tree of nodes and rendered in one pass:

* :class:`Value` -- any Python literal (str, int, float, bool, None, and
  lists/dicts of those), rendered with :func:`pprint.pformat`.
* :class:`Call` -- a constructor call with keyword fields, one per line.
* :class:`Sequence` -- a list literal, one item per line.

Containers render their children at depth 0 and then shift every line of
the child text one indent unit to the right with :func:`indent_block`, so
nesting depth never has to be threaded through the node constructors.

Example::

    >>> print(render(Call("Point", [("x", Value(1)), ("tags", Sequence([]))])))
    Point(
        x=1,
        tags=[],
    )
"""

from __future__ import annotations

import ast
import pprint
from typing import Any

from actionscli.exceptions import CodegenError

INDENT = "    "


def indent_block(text: str, depth: int = 1) -> str:
    """Prefix every non-empty line of *text* with *depth* indent units."""
    prefix = INDENT * depth
    return "\n".join(prefix + line if line else line for line in text.split("\n"))


class Node:
    """Base class of emitter nodes."""

    def render(self) -> str:
        raise NotImplementedError


class Value(Node):
    """A literal value.

    Raises:
        CodegenError: When rendered, if the value has no literal form that
            evaluates back to an equal value (e.g. a ``datetime``).
    """

    def __init__(self, value: Any) -> None:
        self.value = value

    def render(self) -> str:
        text = pprint.pformat(self.value, indent=1, width=88, sort_dicts=False)
        try:
            ok = ast.literal_eval(text) == self.value
        except (ValueError, SyntaxError, TypeError):
            ok = False
        if not ok:
            raise CodegenError(
                f"Value of type {type(self.value).__name__} cannot be written as a literal: "
                f"{self.value!r}"
            )
        return text


class Call(Node):
    """A call expression ``func(field=value, ...)``."""

    def __init__(self, func: str, fields: list[tuple[str, Node]]) -> None:
        self.func = func
        self.fields = fields

    def render(self) -> str:
        if not self.fields:
            return f"{self.func}()"
        lines = [f"{self.func}("]
        for key, node in self.fields:
            lines.append(indent_block(f"{key}={node.render()},"))
        lines.append(")")
        return "\n".join(lines)


class Sequence(Node):
    """A list literal; empty lists render as ``[]``."""

    def __init__(self, items: list[Node]) -> None:
        self.items = items

    def render(self) -> str:
        if not self.items:
            return "[]"
        lines = ["["]
        for node in self.items:
            lines.append(indent_block(f"{node.render()},"))
        lines.append("]")
        return "\n".join(lines)


def render(node: Node, depth: int = 0) -> str:
    """Render *node* and indent the result by *depth* units."""
    text = node.render()
    return indent_block(text, depth) if depth else text
