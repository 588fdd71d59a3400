"""Build commands -- turn an application document into a standalone program.

This module implements the ``actionscli build`` command group:

* **compile** -- generates the program source and compiles it into a
  single-file binary (or a directory bundle with ``--onedir``) with
  PyInstaller. Toolchain output is streamed through the ``[build]`` log.
* **source** -- writes the generated program without compiling it, for
  inspection or for packaging with another tool.

Both commands resolve their settings through
:func:`~actionscli.config.resolve_build_config` (CLI flags > environment >
``./actionscli.json`` > defaults).

Usage::

    actionscli build compile --app app.json --output ./dist/my-app
    actionscli build compile --app app.yaml --name my-app --onedir
    actionscli build source --app app.json --output -
"""

from __future__ import annotations

import importlib.util
from pathlib import Path
from typing import Optional

import typer

from actionscli.exceptions import ActionsCliError, BuildError
from actionscli.exit_codes import EXIT_BUILD_FAILURE
from actionscli.models import Command
from actionscli.output import error, info, success, suggest


build_app = typer.Typer(no_args_is_help=True)


def _load_app(app_path: str, name: Optional[str]) -> Command:
    """Load the application document, applying a root ``--name`` override."""
    from actionscli.document import load_document

    command = load_document(app_path)
    if name:
        command = command.model_copy(update={"name": name})
    return command


def _check_pyinstaller() -> bool:
    """Return True if PyInstaller is importable by the current interpreter."""
    return importlib.util.find_spec("PyInstaller") is not None


@build_app.command("compile")
def build_compile(
    app_path: Optional[str] = typer.Option(
        None, "--app", "-a",
        help="Application document (JSON or YAML). [default: app.json]",
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o",
        help="Path of the binary to produce. [default: ./app]",
    ),
    name: Optional[str] = typer.Option(
        None, "--name", "-n",
        help="Override the root command name baked into the binary.",
    ),
    onedir: bool = typer.Option(
        False, "--onedir",
        help="Build as a directory bundle instead of a single file.",
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout",
        help="Seconds to wait for the toolchain before aborting the build.",
    ),
) -> None:
    """Compile a standalone binary from an application document.

    The build process:

    1. Loads and validates the document.
    2. Generates a Python program that rebuilds the command tree.
    3. Runs PyInstaller on it inside a temporary build directory, which is
       removed afterwards whether or not the build succeeded.

    Example:
        ::

            actionscli build compile --app app.json
            actionscli build compile -a app.yaml -o ./dist/tool --timeout 600
    """
    from actionscli.config import resolve_build_config
    from actionscli.generator.builder import PyInstallerToolchain
    from actionscli.generator.builder import build_app as build_binary

    try:
        cfg = resolve_build_config(
            cli_app=app_path,
            cli_output=output,
            cli_name=name,
            cli_onedir=onedir or None,
            cli_timeout=timeout,
        )
        command = _load_app(cfg.app, cfg.name)
    except ActionsCliError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    if not _check_pyinstaller():
        error("PyInstaller is not installed.")
        suggest("Install it: pip install 'actionscli[build]'")
        raise typer.Exit(code=EXIT_BUILD_FAILURE)

    info(f"Building {command.name} from {cfg.app}...")
    try:
        binary_path = build_binary(
            command,
            cfg.output,
            toolchain=PyInstallerToolchain(onedir=cfg.onedir),
            timeout=cfg.timeout,
        )
    except BuildError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    if cfg.onedir:
        binary_path = binary_path / binary_path.name

    success(f"Built: {binary_path}")
    suggest(f"Test it: {binary_path} --help")


@build_app.command("source")
def build_source(
    app_path: Optional[str] = typer.Option(
        None, "--app", "-a",
        help="Application document (JSON or YAML). [default: app.json]",
    ),
    output: str = typer.Option(
        "-", "--output", "-o",
        help="File to write the program to, or '-' for stdout.",
    ),
    name: Optional[str] = typer.Option(
        None, "--name", "-n",
        help="Override the root command name.",
    ),
) -> None:
    """Write the generated program source without compiling it.

    Example:
        ::

            actionscli build source --app app.json > main.py
            actionscli build source -a app.yaml -o dist/main.py
    """
    from actionscli.config import resolve_build_config
    from actionscli.generator import generate_source

    try:
        cfg = resolve_build_config(cli_app=app_path, cli_name=name)
        command = _load_app(cfg.app, cfg.name)
        source = generate_source(command)
    except ActionsCliError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    if output == "-":
        typer.echo(source, nl=False)
        return

    path = Path(output)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
    except OSError as exc:
        error(f"Cannot write {path}: {exc}")
        raise typer.Exit(code=EXIT_BUILD_FAILURE)
    success(f"Wrote {path}")
