"""Session state machine - Hidden / Visible / Disposed.

Provides formal transitions with listeners for an annotation session's
lifecycle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Callable

from cyclelens.errors import InvalidTransitionError

logger = logging.getLogger(__name__)


class SessionState(StrEnum):
    """Lifecycle states for an annotation session."""

    HIDDEN = "hidden"
    VISIBLE = "visible"
    DISPOSED = "disposed"


# Valid transitions: (from_state, to_state)
VALID_TRANSITIONS: set[tuple[SessionState, SessionState]] = {
    (SessionState.HIDDEN, SessionState.VISIBLE),
    (SessionState.VISIBLE, SessionState.HIDDEN),
    (SessionState.HIDDEN, SessionState.DISPOSED),
    (SessionState.VISIBLE, SessionState.DISPOSED),
}


TransitionListener = Callable[[SessionState, SessionState], None]


@dataclass
class SessionStateMachine:
    """Tracks a session's visibility and enforces valid transitions."""

    _state: SessionState = field(default=SessionState.HIDDEN)
    _listeners: list[TransitionListener] = field(default_factory=list, repr=False)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_visible(self) -> bool:
        return self._state == SessionState.VISIBLE

    @property
    def is_disposed(self) -> bool:
        return self._state == SessionState.DISPOSED

    def can_transition(self, to_state: SessionState) -> bool:
        """Check if a transition is valid without performing it."""
        return (self._state, to_state) in VALID_TRANSITIONS

    def transition(self, to_state: SessionState) -> None:
        """Transition to a new state.

        Raises InvalidTransitionError if the transition is not allowed.
        """
        if not self.can_transition(to_state):
            raise InvalidTransitionError(self._state, to_state)

        from_state = self._state
        self._state = to_state
        for listener in self._listeners:
            try:
                listener(from_state, to_state)
            except Exception as exc:
                logger.debug("Transition listener error: %s", exc)

    def on_transition(self, listener: TransitionListener) -> None:
        """Register a transition listener."""
        self._listeners.append(listener)

    # Convenience methods

    def show(self) -> None:
        self.transition(SessionState.VISIBLE)

    def hide(self) -> None:
        self.transition(SessionState.HIDDEN)

    def dispose(self) -> None:
        self.transition(SessionState.DISPOSED)
