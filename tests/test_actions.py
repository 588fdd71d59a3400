"""Tests for actionscli.actions.resolve_action."""

from __future__ import annotations

import pytest

from actionscli.actions import resolve_action
from actionscli.exceptions import ActionResolutionError
from actionscli.models import ActionRequest, BareAction, NamedAction


class TestResolveAction:
    """Test resolving action references into requests."""

    def test_none_means_nothing_to_run(self) -> None:
        assert resolve_action(None, {"a": "1"}) is None

    def test_bare_action_carries_context(self) -> None:
        request = resolve_action(BareAction(name="core.echo"), {"a": "1"})
        assert request == ActionRequest(name="core.echo", context={"a": "1"})

    def test_named_action_merges_seed(self) -> None:
        action = NamedAction(name="fetch", context={"timeout": "5s"})
        request = resolve_action(action, {"url": "http://x"})
        assert request.name == "fetch"
        assert request.context == {"timeout": "5s", "url": "http://x"}

    def test_invocation_context_wins(self) -> None:
        action = NamedAction(name="fetch", context={"timeout": "5s"})
        request = resolve_action(action, {"timeout": "1s"})
        assert request.context == {"timeout": "1s"}

    def test_seed_not_mutated(self) -> None:
        action = NamedAction(name="fetch", context={"timeout": "5s"})
        resolve_action(action, {"url": "a"})
        resolve_action(action, {"other": "b"})
        assert action.context == {"timeout": "5s"}

    def test_unknown_variant(self) -> None:
        with pytest.raises(ActionResolutionError):
            resolve_action({"name": "raw"}, {})
