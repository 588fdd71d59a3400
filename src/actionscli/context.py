"""Bind command-line tokens and flag values into an execution context.

The execution context is a plain ``dict`` keyed by each argument's
:meth:`~actionscli.models.Argument.push_name`. It is built fresh for every
invocation and handed to :func:`~actionscli.actions.resolve_action`.

Binding rules:

* Positional arguments bind by index. Binding stops at the first argument
  for which no token is left.
* The **last** declared argument is greedy: it receives all remaining
  tokens joined by a single space. Earlier arguments take exactly one token.
* An empty token falls back to the argument's default value.
* Flags are read from the already-parsed flag values. Empty strings and
  ``None`` are skipped, so an explicitly empty flag is the same as an
  absent one. Flags are never defaulted here.
* Required fields are checked in a separate pass after all binding.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from actionscli.exceptions import MissingFieldError
from actionscli.models import Argument


def resolve_context(
    arguments: Sequence[Argument],
    flags: Sequence[Argument],
    tokens: Sequence[str],
    flag_values: Mapping[str, Any],
) -> dict[str, Any]:
    """Build the execution context for one invocation.

    Args:
        arguments: Declared positional arguments, in order.
        flags: Declared flags.
        tokens: Positional tokens left after option parsing.
        flag_values: Parsed flag values keyed by declared flag name. Flags
            that were not supplied map to ``None`` (or are missing).

    Returns:
        The execution context.

    Raises:
        MissingFieldError: If a required argument or flag has no value.
    """
    context: dict[str, Any] = {}

    for n, arg in enumerate(arguments):
        if len(tokens) < n + 1:
            break

        if n + 1 >= len(arguments):
            value = " ".join(tokens[n:])
        else:
            value = tokens[n]

        if value == "":
            value = arg.value

        context[arg.push_name()] = value

    for flag in flags:
        value = flag_values.get(flag.name)
        if value is None or value == "":
            continue
        context[flag.push_name()] = value

    _check_required(arguments, context, "Argument")
    _check_required(flags, context, "Flag")

    return context


def _check_required(
    declared: Sequence[Argument],
    context: Mapping[str, Any],
    kind: str,
) -> None:
    for arg in declared:
        if arg.required and context.get(arg.push_name()) is None:
            raise MissingFieldError(kind, arg.name)
