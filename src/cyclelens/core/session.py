"""Annotation session - keeps one buffer's annotations in sync with its text."""

from __future__ import annotations

import logging
from typing import Any

from cyclelens.analyzer import GuardedAnalyzer, LineAnalyzer
from cyclelens.core.decorations import DecorationStyle, DecorationTable, compose_decoration
from cyclelens.core.overlay import AnnotationOverlay
from cyclelens.core.session_state import SessionState, SessionStateMachine
from cyclelens.core.totals import Totals, aggregate, format_totals
from cyclelens.errors import OverlayRangeError, SessionDisposedError
from cyclelens.host.base import DecorationHandle, HostSubstrate, Subscription
from cyclelens.types.events import (
    ActiveViewEvent,
    ContentChange,
    EditEvent,
    SelectionEvent,
)
from cyclelens.types.facts import LineFacts

logger = logging.getLogger(__name__)

SELECTION_PREFIX = "Sel "


class AnnotationSession:
    """Owns the overlay and the rendered decorations of one buffer.

    Starts visible. While hidden, the overlay is empty and edits are
    ignored; showing again re-analyzes the whole buffer. When the buffer's
    view loses focus the decorations stay attached and only the totals
    display is hidden.
    """

    def __init__(
        self,
        buffer: Any,
        host: HostSubstrate,
        analyzer: LineAnalyzer,
        *,
        style: DecorationStyle | None = None,
    ) -> None:
        self.buffer = buffer
        self._host = host
        if not isinstance(analyzer, GuardedAnalyzer):
            analyzer = GuardedAnalyzer(analyzer, sanitize=False)
        self._analyzer = analyzer
        self._style = style or DecorationStyle()
        self._overlay = AnnotationOverlay(analyzer)
        self._decorations = DecorationTable()
        self._state = SessionStateMachine()
        self._state.on_transition(self._log_transition)
        self._subscriptions: list[Subscription] = [
            host.edits.subscribe(self._on_edit),
            host.selections.subscribe(self._on_selection),
            host.active_views.subscribe(self._on_active_view),
        ]
        self.show()

    @property
    def state(self) -> SessionState:
        return self._state.state

    @property
    def is_visible(self) -> bool:
        return self._state.is_visible

    @property
    def overlay(self) -> AnnotationOverlay:
        return self._overlay

    @property
    def decorations(self) -> DecorationTable:
        return self._decorations

    # Visibility

    def toggle(self) -> None:
        if self._state.is_disposed:
            raise SessionDisposedError(self.buffer.buffer_id)
        if self.is_visible:
            self.hide()
        else:
            self.show()

    def show(self) -> None:
        self._state.show()
        self._rebuild()
        self.refresh_totals()

    def hide(self) -> None:
        self._decorations.release_all()
        self._overlay.clear()
        self._hide_totals()
        self._state.hide()

    def dispose(self) -> None:
        """Release decorations, the totals display and all subscriptions."""
        if self._state.is_disposed:
            return
        self._decorations.release_all()
        self._overlay.clear()
        self._hide_totals()
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()
        self._state.dispose()

    # Totals

    def totals(self, selection: tuple[int, int] | None = None) -> Totals:
        """Totals over ``selection`` lines when it spans several lines, else the whole buffer."""
        if selection is not None and selection[0] != selection[1]:
            start, end = sorted(selection)
            return aggregate(self._overlay.slice(start, end))
        return aggregate(self._overlay)

    def refresh_totals(self) -> None:
        """Recompute and show totals when this buffer has the active view."""
        if not self.is_visible or self._host.active_buffer() is not self.buffer:
            return
        selection = self._host.selection(self.buffer)
        is_selection = selection is not None and selection[0] != selection[1]
        text = format_totals(
            self.totals(selection),
            self._analyzer,
            prefix=SELECTION_PREFIX if is_selection else "",
        )
        self._host.set_status(self.buffer, text)

    def _hide_totals(self) -> None:
        self._host.hide_status(self.buffer)

    def _log_transition(self, from_state: SessionState, to_state: SessionState) -> None:
        logger.debug("Session %s: %s -> %s", self.buffer.buffer_id, from_state, to_state)

    # Rendering

    def _rebuild(self) -> None:
        self._decorations.release_all()
        self._overlay.rebuild_all(self.buffer.get_text())
        self._decorations.insert(
            0, [self._decorate(line, facts) for line, facts in enumerate(self._overlay)]
        )

    def _decorate(self, line: int, facts: LineFacts) -> DecorationHandle | None:
        request = compose_decoration(line, facts, self._analyzer, self._style)
        if not request.label:
            return None
        return self._host.decorate(self.buffer, request)

    def _apply_change(self, change: ContentChange) -> bool:
        """Apply one change; False when it forced a full rebuild instead."""
        try:
            result = self._overlay.apply_edit(change.start_line, change.end_line, change.text)
        except OverlayRangeError as exc:
            logger.warning("%s; re-analyzing %s", exc, self.buffer.buffer_id)
            self._rebuild()
            return False
        self._decorations.remove(result.start_line, result.replaced_count)
        self._decorations.insert(
            result.start_line,
            [
                self._decorate(result.start_line + offset, facts)
                for offset, facts in enumerate(result.inserted)
            ],
        )
        return True

    # Host notifications

    def _on_edit(self, event: EditEvent) -> None:
        if event.buffer is not self.buffer or not self.is_visible:
            return
        for change in event.changes:
            # A rebuild already reflects the rest of the batch.
            if not self._apply_change(change):
                break
        self.refresh_totals()

    def _on_selection(self, event: SelectionEvent) -> None:
        if event.buffer is self.buffer and self.is_visible:
            self.refresh_totals()

    def _on_active_view(self, event: ActiveViewEvent) -> None:
        if not self.is_visible:
            return
        if event.buffer is self.buffer:
            self._rebuild()
            self.refresh_totals()
        else:
            self._hide_totals()
