"""Build a click command tree from a :class:`~actionscli.models.Command` and dispatch to it.

Every node of the command tree becomes a :class:`CommandNode`, a
:class:`click.Command` carrying:

* the built-in ``--format [table|json]`` and ``-q`` options;
* one string option per declared flag (``--name`` and ``-name``);
* a variadic ``TOKENS`` argument holding everything after the options.

Options are only parsed up to the first positional token. Everything
after it, dash-prefixed words included, is left as a token so that a child
receives its own options and the greedy last argument keeps its tail. The
remaining tokens are then routed by :meth:`CommandNode.invoke`:

1. If the first token is exactly the name of a child, the child node is
   dispatched with the rest of the tokens.
2. Otherwise, if the node has an action, its handler runs with all tokens.
3. Otherwise a non-empty token list is an unknown-command error and an
   empty one prints the node's help.

The handler registers the node's sources, resolves the execution context
and the action request, runs the request on the action runtime, and renders
the result unless ``-q`` was passed.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import click
from click.core import ParameterSource

from actionscli.actions import resolve_action
from actionscli.context import resolve_context
from actionscli.exceptions import InvalidUsageError
from actionscli.models import Command
from actionscli.output import OutputFormat, OutputManager
from actionscli.runtime import ActionRuntime
from actionscli.sources import SourceRegistry

logger = logging.getLogger(__name__)

_TOKENS_PARAM = "tokens"
_FORMAT_PARAM = "format"
_QUIET_PARAM = "quiet"


class CommandNode(click.Command):
    """A click command bound to one node of the command tree.

    Args:
        command: The tree node this click command represents.
        dispatcher: The :class:`Dispatcher` that built it; used to run the
            handler and to build child nodes on demand.
    """

    def __init__(self, command: Command, dispatcher: Dispatcher) -> None:
        self.command = command
        self.dispatcher = dispatcher
        self.flag_params: dict[str, str] = {}

        params: list[click.Parameter] = [
            click.Option(
                [_FORMAT_PARAM, "--format"],
                type=click.Choice([f.value for f in OutputFormat]),
                default=OutputFormat.TABLE.value,
                show_default=True,
                help="Result display format.",
            ),
            click.Option(
                [_QUIET_PARAM, "-q"],
                is_flag=True,
                default=False,
                help="Only print error and warning messages, all other output will be suppressed.",
            ),
        ]
        for index, flag in enumerate(command.flags):
            param_name = f"flag_{index}"
            self.flag_params[flag.name] = param_name
            params.append(
                click.Option(
                    [param_name, f"--{flag.name}", f"-{flag.name}"],
                    type=str,
                    default=flag.value or None,
                    show_default=bool(flag.value),
                    required=False,
                    help=flag.description or None,
                )
            )
        params.append(click.Argument([_TOKENS_PARAM], nargs=-1, type=click.UNPROCESSED))

        super().__init__(
            name=command.name,
            params=params,
            help=command.long_description(),
            short_help=command.description or None,
            context_settings={
                "allow_interspersed_args": False,
                "help_option_names": ["-h", "--help"],
            },
        )

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    def invoke(self, ctx: click.Context) -> Any:
        tokens: tuple[str, ...] = ctx.params.get(_TOKENS_PARAM) or ()

        if tokens:
            child = self.command.get_command(tokens[0])
            if child is not None:
                node = self.dispatcher.build(child)
                with node.make_context(child.name, list(tokens[1:]), parent=ctx) as sub_ctx:
                    return node.invoke(sub_ctx)

        if self.command.is_runnable:
            return self.dispatcher.handle(self, ctx, list(tokens))

        if tokens:
            raise click.UsageError(f"Unknown command: {tokens[0]}", ctx=ctx)

        click.echo(self.get_help(ctx))
        return None

    def flag_values(self, ctx: click.Context) -> dict[str, Optional[str]]:
        """Map declared flag names to the values given on the command line.

        Flags left at their declared default map to ``None`` so that only
        explicitly supplied flags reach the execution context.
        """
        values: dict[str, Optional[str]] = {}
        for flag_name, param_name in self.flag_params.items():
            source = ctx.get_parameter_source(param_name)
            if source in (None, ParameterSource.DEFAULT):
                values[flag_name] = None
            else:
                values[flag_name] = ctx.params.get(param_name)
        return values

    # ------------------------------------------------------------------ #
    # Help
    # ------------------------------------------------------------------ #

    def format_usage(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        parent = ctx.parent.command_path + " " if ctx.parent is not None else ""
        formatter.write_usage(f"{parent}{self.command.usage_line()}", "[OPTIONS]")

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        if self.command.commands:
            rows = [(child.name, child.description) for child in self.command.commands]
            with formatter.section("Commands"):
                formatter.write_dl(rows)
        super().format_epilog(ctx, formatter)


class Dispatcher:
    """Compiles command trees into click commands and runs them.

    Args:
        registry: Source registry that declared ``sources`` are added to.
        runtime: Action runtime that executes resolved requests.
    """

    def __init__(self, registry: SourceRegistry, runtime: ActionRuntime) -> None:
        self.registry = registry
        self.runtime = runtime

    def build(self, command: Command) -> CommandNode:
        """Return the click command for *command*.

        Children are built lazily, when dispatch reaches them.
        """
        return CommandNode(command, self)

    def run(self, command: Command, argv: Sequence[str]) -> Any:
        """Dispatch ``argv[1:]`` through the tree rooted at *command*.

        Args:
            command: Root of the command tree.
            argv: Full process argument vector (``argv[0]`` is the program).

        Returns:
            The handler's return value, or the exit code of ``--help``.

        Raises:
            InvalidUsageError: On unknown commands or invalid options.
            ActionsCliError: Any error raised by a handler.
        """
        self.registry.bind(command.sources)

        root = self.build(command)
        try:
            return root.main(
                args=list(argv[1:]),
                prog_name=command.name,
                standalone_mode=False,
            )
        except click.UsageError as exc:
            raise InvalidUsageError(_usage_message(exc)) from exc
        except click.Abort as exc:
            raise InvalidUsageError("Aborted.") from exc

    def handle(self, node: CommandNode, ctx: click.Context, tokens: list[str]) -> Any:
        """Run the action of *node* for one invocation."""
        command = node.command
        self.registry.bind(command.sources)

        context = resolve_context(
            command.arguments, command.flags, tokens, node.flag_values(ctx)
        )
        request = resolve_action(command.action, context)
        if request is None:
            return None

        logger.debug("Dispatching %s to action %s", ctx.command_path, request.name)
        result = self.runtime.run(request)

        output = OutputManager(
            format=OutputFormat(ctx.params[_FORMAT_PARAM]),
            quiet=ctx.params[_QUIET_PARAM],
        )
        output.print_result(result)
        return result


def _usage_message(exc: click.UsageError) -> str:
    message = exc.format_message()
    if exc.ctx is not None:
        return f"{message}\n\n{exc.ctx.get_usage()}"
    return message
