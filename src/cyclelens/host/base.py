"""The narrow interface between sessions and the host editor.

Sessions read buffers, subscribe to four notification streams and ask the
host to paint per-line decorations and a single status string. Anything
that implements these protocols can host cyclelens.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Protocol, TypeVar

from cyclelens.types.events import (
    ActiveViewEvent,
    BufferClosedEvent,
    EditEvent,
    SelectionEvent,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class DecorationRequest:
    """A zero-width annotation painted at column 0 of ``line``."""

    line: int
    label: str
    color: str
    detail: str | None = None


class DecorationHandle(Protocol):
    """A live decoration owned by whoever requested it."""

    @property
    def line(self) -> int: ...

    def move_to(self, line: int) -> None: ...

    def dispose(self) -> None: ...


class TextBuffer(Protocol):
    """Read access to a live text buffer."""

    @property
    def buffer_id(self) -> str: ...

    @property
    def line_count(self) -> int: ...

    def get_text(self, line_range: tuple[int, int] | None = None) -> str:
        """Whole text, or the text of lines ``[start, end]`` inclusive."""
        ...


class Subscription:
    """Handle returned by ``Signal.subscribe``; dispose to unsubscribe."""

    def __init__(self, signal: Signal[Any], callback: Callable[[Any], Any]) -> None:
        self._signal: Signal[Any] | None = signal
        self.callback = callback

    @property
    def active(self) -> bool:
        return self._signal is not None

    def dispose(self) -> None:
        if self._signal is not None:
            self._signal._remove(self)
            self._signal = None


class Signal(Generic[T]):
    """Synchronous in-process notification stream.

    Subscribers run in subscription order, one at a time. A failing
    subscriber is logged and does not stop delivery to the others.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._subscriptions: list[Subscription] = []

    def subscribe(self, callback: Callable[[T], Any]) -> Subscription:
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def emit(self, event: T) -> None:
        for subscription in list(self._subscriptions):
            if not subscription.active:
                continue
            try:
                subscription.callback(event)
            except Exception:
                logger.warning("Subscriber error on signal %r", self.name, exc_info=True)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def _remove(self, subscription: Subscription) -> None:
        self._subscriptions = [s for s in self._subscriptions if s is not subscription]


class HostSubstrate(Protocol):
    """Everything a session consumes from, and produces to, the editor."""

    edits: Signal[EditEvent]
    selections: Signal[SelectionEvent]
    active_views: Signal[ActiveViewEvent]
    closes: Signal[BufferClosedEvent]

    def active_buffer(self) -> Any | None: ...

    def selection(self, buffer: Any) -> tuple[int, int] | None:
        """Start and end line of the selection in ``buffer``'s view, if any."""
        ...

    def decorate(self, buffer: Any, request: DecorationRequest) -> DecorationHandle: ...

    def set_status(self, owner: Any, text: str) -> None:
        """Show ``text`` in the status line on behalf of ``owner``."""
        ...

    def hide_status(self, owner: Any) -> None:
        """Hide the status line if ``owner`` is the one showing it."""
        ...
