"""Local action runtime.

The runtime turns an :class:`~actionscli.models.ActionRequest` into a result
mapping. Actions come from two places:

* **Functions** registered in-process, either with :meth:`LocalRuntime.register`
  or discovered from the ``actionscli.actions`` entry-point group. Each
  function takes the context dict and returns a mapping.
* **Definitions** found in the :class:`~actionscli.sources.SourceRegistry`.
  A definition names another action plus a context seed; it is resolved
  recursively with the caller's context layered over the seed.

Third-party packages ship actions by declaring entry points::

    [project.entry-points."actionscli.actions"]
    "http.get" = "my_package.actions:http_get"
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Any, Callable, Mapping, Optional, Protocol

from actionscli.exceptions import ActionNotFoundError, ActionsCliError
from actionscli.models import ActionRequest
from actionscli.sources import SourceRegistry

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "actionscli.actions"
"""Entry-point group scanned by :meth:`LocalRuntime.discover`."""

MAX_DEFINITION_DEPTH = 32
"""Longest chain of source definitions followed before giving up."""

ActionFunction = Callable[[dict[str, Any]], Mapping[str, Any]]


class ActionRuntime(Protocol):
    """Anything that can execute an action request."""

    registry: SourceRegistry

    def run(self, request: ActionRequest) -> Mapping[str, Any]:
        ...


class LocalRuntime:
    """Executes actions in the current process.

    Args:
        registry: Source registry consulted for action definitions. A new
            empty registry is created when omitted.

    Example::

        runtime = LocalRuntime()

        @runtime.register("greet")
        def greet(ctx):
            return {"greeting": f"Hello, {ctx['person']}!"}

        runtime.run(ActionRequest(name="greet", context={"person": "Ada"}))
    """

    def __init__(self, registry: Optional[SourceRegistry] = None) -> None:
        self.registry = registry if registry is not None else SourceRegistry()
        self._functions: dict[str, ActionFunction] = {}
        self._functions["core.echo"] = _echo

    def register(self, name: str) -> Callable[[ActionFunction], ActionFunction]:
        """Decorator registering a function as action *name*."""

        def decorator(fn: ActionFunction) -> ActionFunction:
            self._functions[name] = fn
            return fn

        return decorator

    def discover(self) -> list[str]:
        """Load action functions from the ``actionscli.actions`` entry points.

        Returns:
            Names of the actions that were loaded. Entry points that fail to
            import are logged and skipped.
        """
        loaded: list[str] = []
        for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            try:
                self._functions[ep.name] = ep.load()
                loaded.append(ep.name)
            except Exception as exc:
                logger.warning("Failed to load action '%s': %s", ep.name, exc)
        return loaded

    @property
    def actions(self) -> list[str]:
        """Names of the registered action functions, sorted."""
        return sorted(self._functions)

    def run(self, request: ActionRequest) -> Mapping[str, Any]:
        """Execute *request* and return its result mapping.

        Raises:
            ActionNotFoundError: If no function or definition provides the
                action, or definitions nest deeper than
                :data:`MAX_DEFINITION_DEPTH`.
            ActionsCliError: If the action returns something other than a
                mapping.
        """
        name = request.name
        context = dict(request.context)

        for _ in range(MAX_DEFINITION_DEPTH):
            fn = self._functions.get(name)
            if fn is not None:
                logger.debug("Running action %s", name)
                result = fn(context)
                if not isinstance(result, Mapping):
                    raise ActionsCliError(
                        f"Action {name} returned {type(result).__name__}, expected a mapping"
                    )
                return result

            definition = self.registry.find(name)
            if definition is None:
                raise ActionNotFoundError(f"Action {name} not found")

            seed = definition.get("ctx") or {}
            merged = dict(seed)
            merged.update(context)
            name, context = definition["name"], merged

        raise ActionNotFoundError(
            f"Action {request.name} nests more than {MAX_DEFINITION_DEPTH} definitions"
        )


def default_runtime(registry: Optional[SourceRegistry] = None) -> LocalRuntime:
    """Return a :class:`LocalRuntime` with entry-point actions loaded."""
    runtime = LocalRuntime(registry)
    runtime.discover()
    return runtime


def _echo(context: dict[str, Any]) -> dict[str, Any]:
    return dict(context)
