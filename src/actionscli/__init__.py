"""actionscli -- run or compile command-line applications described as documents.

An application document (JSON or YAML) declares a tree of commands: names,
positional arguments, flags, the action each command triggers, and the
sources that define those actions. actionscli can either interpret the
document directly or compile it into a standalone binary.

Typical workflow::

    actionscli run --app app.json greet Ada Lovelace   # interpret
    actionscli build compile --app app.json -o ./greet  # compile

Modules:
    app: Typer application and console-script entry point.
    models: Pydantic models for the command tree and action requests.
    document: JSON/YAML application document loader.
    context: Binding of command-line tokens into an execution context.
    actions: Resolution of a command's action into an action request.
    dispatcher: click-based routing of process arguments to commands.
    sources: Registry of file and HTTP action sources.
    runtime: Local action runtime.
    output: Result rendering and diagnostics.
    generator: Source generation and binary builds.
"""

__version__ = "0.3.0"
