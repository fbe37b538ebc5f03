"""Host substrate backed by Textual ``TextArea`` widgets.

``TextArea`` reports that its text changed but not where, so each buffer
keeps a snapshot of its lines and turns every change into one whole-line
``ContentChange`` by trimming the common prefix and suffix.
"""

from __future__ import annotations

from typing import Any, Callable

from textual.widgets import TextArea

from cyclelens.host.base import DecorationRequest, Signal
from cyclelens.host.memory import DecorationLayer, LayerDecoration
from cyclelens.types.events import (
    ActiveViewEvent,
    BufferClosedEvent,
    ContentChange,
    EditEvent,
    SelectionEvent,
)


def diff_lines(old: list[str], new: list[str]) -> ContentChange | None:
    """Smallest whole-line change turning ``old`` into ``new``.

    The replaced range always covers at least one old line and the
    replacement at least one new line, widening by a neighbouring line for
    pure insertions and deletions.
    """
    if old == new:
        return None
    limit = min(len(old), len(new))
    prefix = 0
    while prefix < limit and old[prefix] == new[prefix]:
        prefix += 1
    suffix = 0
    while suffix < limit - prefix and old[-1 - suffix] == new[-1 - suffix]:
        suffix += 1

    if prefix + suffix >= limit:
        if prefix > 0:
            prefix -= 1
        else:
            suffix -= 1

    start = prefix
    end = len(old) - suffix - 1
    replacement = new[start : len(new) - suffix]
    return ContentChange(start_line=start, end_line=end, text="\n".join(replacement))


class TextAreaBuffer:
    """A buffer shown in a ``TextArea``."""

    def __init__(
        self,
        text_area: TextArea,
        *,
        buffer_id: str,
        on_layer_change: Callable[[], Any] | None = None,
    ) -> None:
        self.text_area = text_area
        self.buffer_id = buffer_id
        self.layer = DecorationLayer(on_change=on_layer_change)
        self._lines = text_area.text.split("\n")

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_text(self, line_range: tuple[int, int] | None = None) -> str:
        if line_range is None:
            return "\n".join(self._lines)
        start, end = line_range
        return "\n".join(self._lines[start : end + 1])

    def sync(self) -> ContentChange | None:
        """Take a new snapshot and return what changed since the last one."""
        lines = self.text_area.text.split("\n")
        change = diff_lines(self._lines, lines)
        self._lines = lines
        return change

    def selection_lines(self) -> tuple[int, int]:
        selection = self.text_area.selection
        return selection.start[0], selection.end[0]

    def __repr__(self) -> str:
        return f"TextAreaBuffer({self.buffer_id!r})"


class TextualHost:
    """Bridges Textual widget messages to session notifications."""

    def __init__(self, on_status: Callable[[str | None], Any] | None = None) -> None:
        self.edits: Signal[EditEvent] = Signal("edits")
        self.selections: Signal[SelectionEvent] = Signal("selections")
        self.active_views: Signal[ActiveViewEvent] = Signal("active_views")
        self.closes: Signal[BufferClosedEvent] = Signal("closes")
        self.status_text = ""
        self.status_owner: Any = None
        self._on_status = on_status
        self._active: TextAreaBuffer | None = None

    # Widget side

    def set_active(self, buffer: TextAreaBuffer | None) -> None:
        if buffer is self._active:
            return
        self._active = buffer
        self.active_views.emit(ActiveViewEvent(buffer))

    def text_changed(self, buffer: TextAreaBuffer) -> None:
        change = buffer.sync()
        if change is not None:
            self.edits.emit(EditEvent(buffer, (change,)))

    def selection_changed(self, buffer: TextAreaBuffer) -> None:
        start, end = buffer.selection_lines()
        self.selections.emit(SelectionEvent(buffer, start, end))

    def close(self, buffer: TextAreaBuffer) -> None:
        self.closes.emit(BufferClosedEvent(buffer))
        if self._active is buffer:
            self._active = None

    # Substrate side

    def active_buffer(self) -> TextAreaBuffer | None:
        return self._active

    def selection(self, buffer: TextAreaBuffer) -> tuple[int, int] | None:
        return buffer.selection_lines()

    def decorate(self, buffer: TextAreaBuffer, request: DecorationRequest) -> LayerDecoration:
        return buffer.layer.add(request)

    def set_status(self, owner: Any, text: str) -> None:
        self.status_owner = owner
        self.status_text = text
        if self._on_status is not None:
            self._on_status(text)

    def hide_status(self, owner: Any) -> None:
        if self.status_owner is not owner:
            return
        self.status_owner = None
        if self._on_status is not None:
            self._on_status(None)
