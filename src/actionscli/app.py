"""Typer application and CLI entry point for actionscli.

The root app exposes the two operating modes of the tool:

* ``actionscli run`` -- interpreter mode. Loads an application document and
  dispatches the remaining command-line tokens through its command tree.
* ``actionscli build`` -- builder mode. Generates a standalone program from
  the document and compiles it (see :mod:`actionscli.commands.build`).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`actionscli.config`: Build settings resolution.
    :mod:`actionscli.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from actionscli import __version__
from actionscli.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="actionscli",
    help="Run and compile declarative command-line applications.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

from actionscli.commands.build import build_app  # noqa: E402

app.add_typer(build_app, name="build", help="Build standalone programs.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"actionscli {__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool, no_color: bool) -> None:
    """Route the ``actionscli`` logger to stderr through Rich."""
    from rich.console import Console
    from rich.logging import RichHandler

    logger = logging.getLogger("actionscli")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_time=False,
        show_path=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~actionscli.output.OutputManager` and
    the ``actionscli`` log handler from CLI flags.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        no_color: Disable all colour and Rich markup.
        verbose: Enable debug-level diagnostic output.
    """
    from actionscli.output import OutputManager, set_output

    set_output(OutputManager(no_color=no_color, verbose=verbose))
    _setup_logging(verbose, no_color)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@app.command(
    "run",
    context_settings={
        "allow_extra_args": True,
        "allow_interspersed_args": False,
        "ignore_unknown_options": True,
    },
)
def run_command(
    ctx: typer.Context,
    app_path: str = typer.Option(
        "app.json", "--app", "-a",
        envvar="ACTIONSCLI_APP",
        help="Application document (JSON or YAML).",
    ),
) -> None:
    """Interpret an application document.

    Everything after the options is dispatched through the document's
    command tree, exactly as a compiled binary would dispatch it.

    Example:
        ::

            actionscli run --app app.json greet --name Ann
            actionscli run -a app.yaml -- --help
    """
    from actionscli.document import load_document
    from actionscli.exceptions import ActionsCliError
    from actionscli.output import error

    try:
        command = load_document(app_path)
        result = command.run([command.name, *ctx.args])
    except ActionsCliError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    # --help and other eager exits come back as an int exit code.
    if isinstance(result, int) and result:
        raise typer.Exit(code=result)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from actionscli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point invoked by the ``actionscli`` console script.

    :class:`~actionscli.exceptions.ActionsCliError` instances cause a clean
    exit with the error's ``exit_code``. All other exceptions produce a
    crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app(args=argv)
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from actionscli.exceptions import ActionsCliError
        from actionscli.output import error

        if isinstance(exc, ActionsCliError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
