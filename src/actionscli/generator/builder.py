"""Compile a command tree into a standalone binary.

The build pipeline, in order:

1. Create a temporary build directory named after the application
   (``actionscli-<name>-build-XXXX``).
2. Write the generated program to ``main.py`` inside it.
3. Run the toolchain (PyInstaller by default) on that file, forwarding its
   merged stdout/stderr to the ``actionscli.generator.builder`` logger one
   line at a time as it is produced.
4. Remove the build directory, whether or not the build succeeded.
5. Raise :class:`~actionscli.exceptions.BuildError` for any failure:
   directory creation, writing the source, spawning the toolchain, a
   non-zero exit status, or an expired timeout.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
import tempfile
import threading
from pathlib import Path
from typing import Optional, Protocol

from actionscli.exceptions import BuildError
from actionscli.generator.codegen import generate_source
from actionscli.models import Command

logger = logging.getLogger(__name__)

SOURCE_FILENAME = "main.py"
"""Name of the generated program inside the build directory."""

# Modules PyInstaller cannot see from the generated program's imports alone.
HIDDEN_IMPORTS = [
    "actionscli",
    "actionscli.actions",
    "actionscli.context",
    "actionscli.dispatcher",
    "actionscli.exceptions",
    "actionscli.exit_codes",
    "actionscli.models",
    "actionscli.output",
    "actionscli.runtime",
    "actionscli.sources",
]


class Toolchain(Protocol):
    """Builds the argv that compiles *source* into *output*."""

    def command(self, source: Path, output: Path, workdir: Path) -> list[str]:
        ...


class PyInstallerToolchain:
    """Compile with ``python -m PyInstaller``.

    Args:
        python: Interpreter used to run PyInstaller.
        onedir: Produce a directory bundle instead of a single file.
        hidden_imports: Extra modules to force into the bundle.
    """

    def __init__(
        self,
        python: str = sys.executable,
        onedir: bool = False,
        hidden_imports: Optional[list[str]] = None,
    ) -> None:
        self.python = python
        self.onedir = onedir
        self.hidden_imports = HIDDEN_IMPORTS if hidden_imports is None else hidden_imports

    def command(self, source: Path, output: Path, workdir: Path) -> list[str]:
        args = [
            self.python, "-m", "PyInstaller",
            "--name", output.name,
            "--distpath", str(output.parent),
            "--workpath", str(workdir / "work"),
            "--specpath", str(workdir),
            "--noconfirm",
            "--clean",
            "--log-level", "WARN",
            "--onedir" if self.onedir else "--onefile",
        ]
        for mod in self.hidden_imports:
            args.extend(["--hidden-import", mod])
        # rich ships data modules with non-standard names (rich._unicode_data).
        args.extend(["--collect-submodules", "rich"])
        args.append(str(source))
        return args


def build_app(
    command: Command,
    output: str | Path,
    *,
    toolchain: Optional[Toolchain] = None,
    timeout: Optional[float] = None,
) -> Path:
    """Generate and compile a standalone program for *command*.

    Args:
        command: Root of the command tree; its ``name`` labels the build
            directory.
        output: Path of the binary to produce.
        toolchain: Toolchain to run; defaults to :class:`PyInstallerToolchain`.
        timeout: Seconds to wait for the toolchain before killing it.
            ``None`` waits indefinitely.

    Returns:
        The resolved output path.

    Raises:
        BuildError: If any stage of the build fails.
    """
    toolchain = toolchain or PyInstallerToolchain()
    output_path = Path(output).resolve()

    try:
        prefix = f"actionscli-{_safe_prefix(command.name)}-build-"
        build_dir = Path(tempfile.mkdtemp(prefix=prefix))
    except OSError as exc:
        raise BuildError(f"Cannot create build directory: {exc}") from exc

    try:
        source = generate_source(command)
        logger.debug("Generated source for %s:\n%s", command.name, source)

        source_file = build_dir / SOURCE_FILENAME
        try:
            source_file.write_text(source, encoding="utf-8")
        except OSError as exc:
            raise BuildError(f"Cannot write {source_file}: {exc}") from exc

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BuildError(f"Cannot create output directory: {exc}") from exc

        argv = toolchain.command(source_file, output_path, build_dir)
        logger.info("Building %s -> %s", command.name, output_path)
        _run_toolchain(argv, cwd=build_dir, timeout=timeout)
    finally:
        shutil.rmtree(build_dir, ignore_errors=True)

    return output_path


def _run_toolchain(argv: list[str], cwd: Path, timeout: Optional[float]) -> None:
    """Run *argv*, logging each output line as it arrives."""
    logger.debug("Running %s", " ".join(argv))
    try:
        proc = subprocess.Popen(
            argv,
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
        )
    except OSError as exc:
        raise BuildError(f"Cannot start build toolchain {argv[0]}: {exc}") from exc

    timed_out = threading.Event()

    def _kill() -> None:
        timed_out.set()
        proc.kill()

    timer = threading.Timer(timeout, _kill) if timeout is not None else None
    if timer is not None:
        timer.start()
    try:
        assert proc.stdout is not None
        for line in proc.stdout:
            line = line.rstrip("\r\n")
            if line:
                logger.info("[build] %s", line)
        returncode = proc.wait()
    finally:
        if timer is not None:
            timer.cancel()

    if timed_out.is_set():
        raise BuildError(f"Build timed out after {timeout:g} seconds.", returncode=returncode)
    if returncode != 0:
        raise BuildError(
            f"Build toolchain exited with status {returncode}.", returncode=returncode
        )


def _safe_prefix(name: str) -> str:
    """Make *name* usable inside a single path component."""
    for sep in {"/", os.sep, os.altsep or "/"}:
        name = name.replace(sep, "-")
    return name
