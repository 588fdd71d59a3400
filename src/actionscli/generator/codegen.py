"""Generate the source of a standalone program from a command tree.

The generated module rebuilds the tree as a literal of
:mod:`actionscli.models` objects and hands :data:`sys.argv` to
:meth:`~actionscli.models.Command.run`, the same entry point the
``actionscli run`` interpreter uses. Interpreting a document and running
the program generated from it therefore dispatch identically.

Every field is written verbatim and in document order. Strings are emitted
with :func:`repr`, so quotes, backslashes and newlines survive the round
trip exactly.
"""

from __future__ import annotations

from typing import Optional, Sequence as SequenceType

from actionscli.exceptions import CodegenError
from actionscli.generator.emitter import Call, Node, Sequence, Value, render
from actionscli.models import ActionRef, Argument, BareAction, Command, NamedAction


PROGRAM_TEMPLATE = '''\
#!/usr/bin/env python3
"""Generated command-line application {app_name_doc}.

Built by actionscli {version} from an application document.
"""

import sys

from actionscli.exceptions import ActionsCliError
from actionscli.models import Argument, BareAction, Command, NamedAction

APP_NAME = {app_name_repr}

app = {app_literal}


def main() -> None:
    try:
        app.run(sys.argv)
    except ActionsCliError as exc:
        sys.stderr.write(f"{{APP_NAME}}: {{exc}}\\n")
        sys.exit(exc.exit_code)
    except KeyboardInterrupt:
        sys.stderr.write("\\nCancelled.\\n")
        sys.exit(130)


if __name__ == "__main__":
    main()
'''


def argument_node(arg: Argument) -> Node:
    """Return the emitter node for one :class:`~actionscli.models.Argument`."""
    return Call(
        "Argument",
        [
            ("name", Value(arg.name)),
            ("push", Value(arg.push)),
            ("value", Value(arg.value)),
            ("required", Value(arg.required)),
            ("description", Value(arg.description)),
        ],
    )


def arguments_node(arguments: SequenceType[Argument]) -> Node:
    return Sequence([argument_node(arg) for arg in arguments])


def action_node(action: Optional[ActionRef]) -> Node:
    if action is None:
        return Value(None)
    if isinstance(action, BareAction):
        return Call("BareAction", [("name", Value(action.name))])
    if isinstance(action, NamedAction):
        return Call(
            "NamedAction",
            [("name", Value(action.name)), ("context", Value(action.context))],
        )
    raise CodegenError(f"Unsupported action type {type(action).__name__}")


def command_node(command: Command) -> Node:
    """Return the emitter node for *command* and, recursively, its children."""
    return Call(
        "Command",
        [
            ("name", Value(command.name)),
            ("usage", Value(command.usage)),
            ("example", Value(command.example)),
            ("description", Value(command.description)),
            ("action", action_node(command.action)),
            ("sources", Value(list(command.sources))),
            ("flags", arguments_node(command.flags)),
            ("arguments", arguments_node(command.arguments)),
            ("commands", commands_node(command.commands)),
        ],
    )


def commands_node(commands: SequenceType[Command]) -> Node:
    return Sequence([command_node(child) for child in commands])


def serialize_command(command: Command, depth: int = 0) -> str:
    """Render *command* as a Python expression indented by *depth* units."""
    return render(command_node(command), depth)


def generate_source(command: Command) -> str:
    """Return the full source of a standalone program for *command*.

    Args:
        command: Root of the command tree. Its ``name`` becomes the program
            name reported in error messages.

    Returns:
        Python source text ready to be written to ``main.py``.

    Raises:
        CodegenError: If a value in an action context has no literal form.
    """
    from actionscli import __version__

    return PROGRAM_TEMPLATE.format(
        app_name_doc=command.name.replace('"', "'").replace("\\", "/"),
        version=__version__,
        app_name_repr=repr(command.name),
        app_literal=serialize_command(command),
    )
