"""Session registry - at most one annotation session per open buffer."""

from __future__ import annotations

import logging
from typing import Any

from cyclelens.analyzer import LineAnalyzer
from cyclelens.core.decorations import DecorationStyle
from cyclelens.core.session import AnnotationSession
from cyclelens.host.base import HostSubstrate
from cyclelens.types.events import BufferClosedEvent

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Creates, toggles and disposes sessions as buffers come and go.

    Construct one per application and ``dispose()`` it on shutdown.
    """

    def __init__(
        self,
        host: HostSubstrate,
        analyzer: LineAnalyzer,
        *,
        style: DecorationStyle | None = None,
    ) -> None:
        self._host = host
        self._analyzer = analyzer
        self._style = style
        self._sessions: dict[Any, AnnotationSession] = {}
        self._close_subscription = host.closes.subscribe(self._on_buffer_closed)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, buffer: Any) -> bool:
        return buffer in self._sessions

    def get(self, buffer: Any) -> AnnotationSession | None:
        return self._sessions.get(buffer)

    @property
    def sessions(self) -> list[AnnotationSession]:
        return list(self._sessions.values())

    def toggle_for(self, buffer: Any) -> AnnotationSession:
        """Create a visible session for ``buffer``, or toggle its existing one."""
        session = self._sessions.get(buffer)
        if session is None:
            session = AnnotationSession(buffer, self._host, self._analyzer, style=self._style)
            self._sessions[buffer] = session
            logger.debug("Session created for %s", buffer.buffer_id)
        else:
            session.toggle()
        return session

    def toggle_active(self) -> AnnotationSession | None:
        """Command entry point: toggle the buffer in the active view, if any."""
        buffer = self._host.active_buffer()
        if buffer is None:
            return None
        return self.toggle_for(buffer)

    def on_buffer_closed(self, buffer: Any) -> None:
        session = self._sessions.pop(buffer, None)
        if session is not None:
            session.dispose()

    def dispose(self) -> None:
        for session in self._sessions.values():
            session.dispose()
        self._sessions.clear()
        self._close_subscription.dispose()

    def _on_buffer_closed(self, event: BufferClosedEvent) -> None:
        self.on_buffer_closed(event.buffer)
