"""Source generation and binary builds for command trees.

Typical usage::

    from actionscli.document import load_document
    from actionscli.generator import build_app, generate_source

    app = load_document("app.json")
    print(generate_source(app))        # inspect the generated program
    build_app(app, "./dist/my-app")    # compile it with PyInstaller

Sub-modules:

* :mod:`~actionscli.generator.emitter` -- literal nodes and the
  indentation-aware renderer.
* :mod:`~actionscli.generator.codegen` -- command tree to program source.
* :mod:`~actionscli.generator.builder` -- temporary build directory and
  toolchain invocation.
"""

from actionscli.generator.builder import PyInstallerToolchain, build_app
from actionscli.generator.codegen import generate_source, serialize_command

__all__ = ["build_app", "generate_source", "serialize_command", "PyInstallerToolchain"]
