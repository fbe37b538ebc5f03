"""Tests for the session state machine."""

from __future__ import annotations

from typing import Any

import pytest

from cyclelens.core.session_state import (
    VALID_TRANSITIONS,
    SessionState,
    SessionStateMachine,
)
from cyclelens.errors import InvalidTransitionError


@pytest.fixture
def sm() -> SessionStateMachine:
    return SessionStateMachine()


class TestInitialState:
    def test_starts_hidden(self, sm: SessionStateMachine) -> None:
        assert sm.state == SessionState.HIDDEN
        assert not sm.is_visible
        assert not sm.is_disposed


class TestTransitions:
    def test_show_hide(self, sm: SessionStateMachine) -> None:
        sm.show()
        assert sm.is_visible
        sm.hide()
        assert sm.state == SessionState.HIDDEN

    @pytest.mark.parametrize("visible", [True, False])
    def test_dispose_from_any_live_state(self, sm: SessionStateMachine, visible: bool) -> None:
        if visible:
            sm.show()
        sm.dispose()
        assert sm.is_disposed

    def test_cannot_show_twice(self, sm: SessionStateMachine) -> None:
        sm.show()
        with pytest.raises(InvalidTransitionError, match="visible -> visible"):
            sm.show()

    def test_disposed_is_terminal(self, sm: SessionStateMachine) -> None:
        sm.dispose()
        for state in SessionState:
            assert not sm.can_transition(state)
        with pytest.raises(InvalidTransitionError):
            sm.show()

    def test_every_declared_edge_is_reachable(self) -> None:
        for from_state, to_state in VALID_TRANSITIONS:
            machine = SessionStateMachine(_state=from_state)
            machine.transition(to_state)
            assert machine.state == to_state


class TestListeners:
    def test_listener_receives_transition(self, sm: SessionStateMachine) -> None:
        seen: list[tuple[SessionState, SessionState]] = []
        sm.on_transition(lambda a, b: seen.append((a, b)))
        sm.show()
        sm.dispose()
        assert seen == [
            (SessionState.HIDDEN, SessionState.VISIBLE),
            (SessionState.VISIBLE, SessionState.DISPOSED),
        ]

    def test_listener_error_does_not_block(self, sm: SessionStateMachine) -> None:
        def broken(*_: Any) -> None:
            raise RuntimeError("boom")

        sm.on_transition(broken)
        sm.show()
        assert sm.is_visible
