"""Canonical Pydantic models shared across all actionscli modules.

The models fall into three groups:

**Command tree** -- parsed once from an application document and immutable
afterwards:
    :class:`Argument`, :class:`BareAction`, :class:`NamedAction`, and the
    recursive :class:`Command`.

**Invocation data** -- built fresh for every dispatch:
    :class:`ActionRequest`.

**Configuration** -- resolved by :mod:`actionscli.config`:
    :class:`BuildConfig`.

The document schema uses a few keys that differ from the attribute names
(``default`` for :attr:`Argument.value`, ``ctx`` for
:attr:`NamedAction.context`). Models accept both spellings on input and
:meth:`Command.to_document` writes the document spelling back out.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


RESERVED_FLAG_NAMES = frozenset({"format", "q", "h", "help"})
"""Flag names whose option strings belong to the options every node carries."""

LONG_DESCRIPTION_TEMPLATE = """{description}

example:

    $ {example}"""
"""Layout of a command's long help text (description + example)."""


# --- Arguments ---


class Argument(BaseModel):
    """A positional argument or a flag declared on a :class:`Command`.

    Values bound to an argument are stored in the execution context under
    :meth:`push_name`, which lets a document rename a CLI parameter to the
    field name the backend action expects.

    Example::

        Argument(name="name", push="person", required=True)
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    push: str = Field(default="", description="Context key override")
    required: bool = False
    value: str = Field(default="", alias="default", description="Default value")
    description: str = ""

    @field_validator("push", "description", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_default(cls, value: Any) -> Any:
        # YAML documents often carry unquoted numbers and booleans.
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value

    def push_name(self) -> str:
        """Return the context key: ``push`` if set, otherwise ``name``."""
        return self.push or self.name

    def __str__(self) -> str:
        return f"{{{self.name}}}"


def format_arguments(arguments: Sequence[Argument]) -> str:
    """Join argument display forms with spaces, e.g. ``"{src} {dst}"``."""
    return " ".join(str(arg) for arg in arguments)


def get_argument(arguments: Sequence[Argument], name: str) -> Optional[Argument]:
    """Return the first argument called *name*, or ``None``."""
    for arg in arguments:
        if arg.name == name:
            return arg
    return None


# --- Action references ---


class BareAction(BaseModel):
    """An action referenced by name only (document form: a plain string)."""

    name: str


class NamedAction(BaseModel):
    """An action with a static context seed.

    Document form::

        {"name": "http.request", "ctx": {"method": "GET"}}

    The seed is layered *under* the invocation context when the action is
    resolved, so values bound from the command line win.
    """

    name: str
    context: dict[str, Any] = Field(default_factory=dict)


ActionRef = Union[BareAction, NamedAction]


def parse_action(value: Any) -> Optional[ActionRef]:
    """Turn a raw document ``action`` value into an :data:`ActionRef`.

    Args:
        value: ``None``, an action name, a ``{"name", "ctx"}`` mapping, or an
            already-built action model.

    Returns:
        The matching action variant, or ``None`` when *value* is ``None``.

    Raises:
        ValueError: If *value* has any other shape.
    """
    if value is None or isinstance(value, (BareAction, NamedAction)):
        return value
    if isinstance(value, str):
        return BareAction(name=value)
    if isinstance(value, dict):
        name = value.get("name")
        if not isinstance(name, str):
            raise ValueError("action mapping must have a string 'name'")
        seed = value.get("ctx")
        if seed is None:
            seed = {}
        if not isinstance(seed, dict):
            raise ValueError(
                f"action 'ctx' must be a mapping, got {type(seed).__name__}"
            )
        return NamedAction(name=name, context=seed)
    raise ValueError(
        f"action must be a name or a mapping, got {type(value).__name__}"
    )


def action_to_document(action: Optional[ActionRef]) -> Any:
    """Inverse of :func:`parse_action`."""
    if action is None:
        return None
    if isinstance(action, BareAction):
        return action.name
    document: dict[str, Any] = {"name": action.name}
    if action.context:
        document["ctx"] = action.context
    return document


# --- Command tree ---


def _clean_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, list):
        return [item for item in value if item is not None]
    return value


def _check_unique(arguments: list[Argument], label: str) -> list[Argument]:
    seen: set[str] = set()
    for arg in arguments:
        if arg.name in seen:
            raise ValueError(f"duplicate {label} name: {arg.name!r}")
        seen.add(arg.name)
    return arguments


class Command(BaseModel):
    """A node of the command tree.

    A command with children is a *group*; a command with an action is
    *runnable*. A node may be both, in which case tokens that do not name a
    child are handed to its own action.

    Example::

        Command(
            name="greet",
            arguments=[Argument(name="name", push="person", required=True)],
            action="core.echo",
        )
    """

    name: str
    usage: str = ""
    example: str = Field(default="", description="One line example")
    description: str = ""
    arguments: list[Argument] = Field(default_factory=list)
    flags: list[Argument] = Field(default_factory=list)
    action: Optional[ActionRef] = None
    sources: list[str] = Field(
        default_factory=list, description="File paths or URLs of action sources"
    )
    commands: list[Command] = Field(default_factory=list)

    @field_validator("usage", "example", "description", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("arguments", "flags", "sources", "commands", mode="before")
    @classmethod
    def _skip_nulls(cls, value: Any) -> Any:
        return _clean_list(value)

    @field_validator("arguments")
    @classmethod
    def _unique_arguments(cls, value: list[Argument]) -> list[Argument]:
        return _check_unique(value, "argument")

    @field_validator("flags")
    @classmethod
    def _unique_flags(cls, value: list[Argument]) -> list[Argument]:
        for flag in value:
            if flag.name in RESERVED_FLAG_NAMES:
                raise ValueError(
                    f"flag name {flag.name!r} is reserved for a built-in option"
                )
        return _check_unique(value, "flag")

    @field_validator("action", mode="before")
    @classmethod
    def _parse_action(cls, value: Any) -> Any:
        return parse_action(value)

    @field_serializer("action")
    def _dump_action(self, action: Optional[ActionRef]) -> Any:
        return action_to_document(action)

    @property
    def is_group(self) -> bool:
        """Whether the command has sub-commands."""
        return bool(self.commands)

    @property
    def is_runnable(self) -> bool:
        """Whether the command triggers an action."""
        return self.action is not None

    def get_command(self, name: str) -> Optional[Command]:
        """Return the direct child called *name* (exact match), or ``None``."""
        for child in self.commands:
            if child.name == name:
                return child
        return None

    def usage_line(self) -> str:
        """Return ``usage`` or a line synthesised from name and arguments."""
        if self.usage:
            return self.usage
        if not self.arguments:
            return self.name
        return f"{self.name} {format_arguments(self.arguments)}"

    def long_description(self) -> str:
        """Return the description followed by an ``example:`` block."""
        return LONG_DESCRIPTION_TEMPLATE.format(
            description=self.description,
            example=self.example or self.usage_line(),
        )

    def to_document(self) -> dict[str, Any]:
        """Dump the tree back into the JSON document schema."""
        return self.model_dump(mode="json", by_alias=True)

    def run(
        self,
        argv: Sequence[str],
        runtime: Any = None,
        registry: Any = None,
    ) -> Any:
        """Dispatch a process argument vector through this command tree.

        ``argv[0]`` is the program name and is skipped, as with
        :data:`sys.argv`. Both the ``actionscli run`` interpreter and every
        generated program enter the tree through this method.

        Args:
            argv: Full process argument vector.
            runtime: Action runtime; defaults to
                :func:`~actionscli.runtime.default_runtime`.
            registry: Source registry; defaults to the runtime's registry.

        Returns:
            The value returned by the dispatched handler (usually the
            action result), or ``None``.
        """
        from actionscli.dispatcher import Dispatcher
        from actionscli.runtime import default_runtime

        if runtime is None:
            runtime = default_runtime(registry)
        if registry is None:
            registry = runtime.registry
        return Dispatcher(registry, runtime).run(self, argv)


# --- Invocation data ---


class ActionRequest(BaseModel):
    """A resolved ``{name, context}`` pair handed to the action runtime."""

    name: str
    context: dict[str, Any] = Field(default_factory=dict)


# --- Configuration ---


class BuildConfig(BaseModel):
    """Effective settings for ``actionscli build``.

    See :func:`~actionscli.config.resolve_build_config` for the precedence
    chain that produces this model.
    """

    app: str = Field(default="app.json", description="Application document path")
    output: str = Field(default="./app", description="Output binary path")
    name: Optional[str] = Field(default=None, description="Application name override")
    onedir: bool = Field(default=False, description="Build a directory bundle")
    timeout: Optional[float] = Field(
        default=None, description="Seconds before the toolchain is killed"
    )
