"""Resolve a command's action reference into an :class:`~actionscli.models.ActionRequest`."""

from __future__ import annotations

from typing import Any, Optional

from actionscli.exceptions import ActionResolutionError
from actionscli.models import ActionRequest, BareAction, NamedAction


def resolve_action(action: Any, context: dict[str, Any]) -> Optional[ActionRequest]:
    """Combine *action* with the invocation *context*.

    * ``None`` -- the command only routes to children; returns ``None``.
    * :class:`~actionscli.models.BareAction` -- the request carries
      *context* unchanged.
    * :class:`~actionscli.models.NamedAction` -- the action's seed is copied
      and *context* is layered on top, so invocation values win on key
      collisions.

    Args:
        action: The command's parsed action reference.
        context: Execution context from
            :func:`~actionscli.context.resolve_context`.

    Returns:
        The action request, or ``None`` when there is nothing to run.

    Raises:
        ActionResolutionError: If *action* is not a known variant.

    Example::

        >>> resolve_action(
        ...     NamedAction(name="fetch", context={"timeout": "5s"}),
        ...     {"url": "http://x"},
        ... ).context
        {'timeout': '5s', 'url': 'http://x'}
    """
    if action is None:
        return None
    if isinstance(action, BareAction):
        return ActionRequest(name=action.name, context=context)
    if isinstance(action, NamedAction):
        merged = dict(action.context)
        merged.update(context)
        return ActionRequest(name=action.name, context=merged)
    raise ActionResolutionError(
        f"Cannot resolve action of type {type(action).__name__}"
    )
