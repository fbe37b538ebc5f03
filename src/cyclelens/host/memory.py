"""In-memory host substrate.

Buffers are lists of lines, decorations are records in a per-buffer
``DecorationLayer``. Used headless and by the tests; the terminal editor
reuses ``DecorationLayer`` for its gutter.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Callable

from cyclelens.host.base import DecorationRequest, Signal
from cyclelens.types.events import (
    ActiveViewEvent,
    BufferClosedEvent,
    ContentChange,
    EditEvent,
    SelectionEvent,
)

_buffer_ids = itertools.count(1)


class LayerDecoration:
    """A decoration living in a ``DecorationLayer``."""

    def __init__(self, layer: DecorationLayer, request: DecorationRequest) -> None:
        self._layer = layer
        self._line = request.line
        self.request = request
        self.disposed = False

    @property
    def line(self) -> int:
        return self._line

    @property
    def label(self) -> str:
        return self.request.label

    @property
    def color(self) -> str:
        return self.request.color

    @property
    def detail(self) -> str | None:
        return self.request.detail

    def move_to(self, line: int) -> None:
        if self.disposed or line == self._line:
            return
        self._line = line
        self._layer._changed()

    def dispose(self) -> None:
        if not self.disposed:
            self.disposed = True
            self._layer._discard(self)

    def __repr__(self) -> str:
        return f"LayerDecoration(line={self._line}, label={self.label!r})"


class DecorationLayer:
    """Live decorations of one buffer."""

    def __init__(self, on_change: Callable[[], Any] | None = None) -> None:
        self._live: dict[int, LayerDecoration] = {}
        self._on_change = on_change

    def add(self, request: DecorationRequest) -> LayerDecoration:
        decoration = LayerDecoration(self, request)
        self._live[id(decoration)] = decoration
        self._changed()
        return decoration

    @property
    def live_count(self) -> int:
        return len(self._live)

    def decorations(self) -> list[LayerDecoration]:
        return sorted(self._live.values(), key=lambda d: d.line)

    def at(self, line: int) -> list[LayerDecoration]:
        return [d for d in self._live.values() if d.line == line]

    def render_lines(self, line_count: int) -> list[str]:
        """Label shown on each line, ``""`` where there is none."""
        rows: list[list[str]] = [[] for _ in range(line_count)]
        for decoration in self._live.values():
            if 0 <= decoration.line < line_count:
                rows[decoration.line].append(decoration.label)
        return [" ".join(labels) for labels in rows]

    def _discard(self, decoration: LayerDecoration) -> None:
        self._live.pop(id(decoration), None)
        self._changed()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()


class MemoryBuffer:
    """A text buffer held as a list of lines."""

    def __init__(
        self,
        text: str = "",
        *,
        buffer_id: str | None = None,
        host: MemoryHost | None = None,
    ) -> None:
        self._lines = text.split("\n")
        self.buffer_id = buffer_id or f"buffer-{next(_buffer_ids)}"
        self._host = host
        self._batch: list[ContentChange] | None = None

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    def get_text(self, line_range: tuple[int, int] | None = None) -> str:
        if line_range is None:
            return "\n".join(self._lines)
        start, end = line_range
        return "\n".join(self._lines[start : end + 1])

    def replace(
        self,
        start_line: int,
        start_col: int,
        end_line: int,
        end_col: int,
        text: str,
    ) -> ContentChange:
        """Replace a character range and report it as whole-line change."""
        if not 0 <= start_line <= end_line < len(self._lines):
            raise IndexError(f"Line range [{start_line}, {end_line}] out of bounds")
        prefix = self._lines[start_line][:start_col]
        suffix = self._lines[end_line][end_col:]
        new_text = prefix + text + suffix
        self._lines[start_line : end_line + 1] = new_text.split("\n")
        change = ContentChange(start_line=start_line, end_line=end_line, text=new_text)
        self._publish(change)
        return change

    def insert(self, line: int, col: int, text: str) -> ContentChange:
        return self.replace(line, col, line, col, text)

    def insert_lines(self, line: int, text: str) -> ContentChange:
        """Insert ``text`` as new line(s) before ``line`` (or at the end)."""
        if line >= len(self._lines):
            last = len(self._lines) - 1
            return self.insert(last, len(self._lines[last]), "\n" + text)
        return self.insert(line, 0, text + "\n")

    def delete_lines(self, start_line: int, end_line: int) -> ContentChange:
        """Remove lines ``[start_line, end_line]`` entirely."""
        if end_line + 1 < len(self._lines):
            return self.replace(start_line, 0, end_line + 1, 0, "")
        if start_line > 0:
            previous = start_line - 1
            return self.replace(
                previous, len(self._lines[previous]), end_line, len(self._lines[end_line]), ""
            )
        return self.replace(0, 0, end_line, len(self._lines[end_line]), "")

    def set_text(self, text: str) -> ContentChange:
        last = len(self._lines) - 1
        return self.replace(0, 0, last, len(self._lines[last]), text)

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Deliver every change made inside the block as one edit event.

        A nested block joins the outer one.
        """
        if self._batch is not None:
            yield
            return
        self._batch = []
        try:
            yield
        finally:
            changes, self._batch = self._batch, None
            if changes and self._host is not None:
                self._host.edits.emit(EditEvent(self, tuple(changes)))

    def _publish(self, change: ContentChange) -> None:
        if self._batch is not None:
            self._batch.append(change)
        elif self._host is not None:
            self._host.edits.emit(EditEvent(self, (change,)))

    def __repr__(self) -> str:
        return f"MemoryBuffer({self.buffer_id!r}, lines={len(self._lines)})"


class MemoryHost:
    """A complete host substrate without any UI."""

    def __init__(self) -> None:
        self.edits: Signal[EditEvent] = Signal("edits")
        self.selections: Signal[SelectionEvent] = Signal("selections")
        self.active_views: Signal[ActiveViewEvent] = Signal("active_views")
        self.closes: Signal[BufferClosedEvent] = Signal("closes")
        self.buffers: list[MemoryBuffer] = []
        self.status_text = ""
        self.status_owner: Any = None
        self._active: MemoryBuffer | None = None
        self._selections: dict[MemoryBuffer, tuple[int, int]] = {}
        self._layers: dict[MemoryBuffer, DecorationLayer] = {}

    # Editor side

    def open(self, text: str = "", *, buffer_id: str | None = None, activate: bool = True) -> MemoryBuffer:
        buffer = MemoryBuffer(text, buffer_id=buffer_id, host=self)
        self.buffers.append(buffer)
        if activate:
            self.activate(buffer)
        return buffer

    def activate(self, buffer: MemoryBuffer | None) -> None:
        self._active = buffer
        self.active_views.emit(ActiveViewEvent(buffer))

    def select(self, buffer: MemoryBuffer, start_line: int, end_line: int) -> None:
        self._selections[buffer] = (start_line, end_line)
        self.selections.emit(SelectionEvent(buffer, start_line, end_line))

    def close(self, buffer: MemoryBuffer) -> None:
        self.closes.emit(BufferClosedEvent(buffer))
        if buffer in self.buffers:
            self.buffers.remove(buffer)
        self._selections.pop(buffer, None)
        self._layers.pop(buffer, None)
        if self._active is buffer:
            self._active = None

    # Substrate side

    def active_buffer(self) -> MemoryBuffer | None:
        return self._active

    def selection(self, buffer: MemoryBuffer) -> tuple[int, int] | None:
        return self._selections.get(buffer)

    def decorate(self, buffer: MemoryBuffer, request: DecorationRequest) -> LayerDecoration:
        return self.layer(buffer).add(request)

    def set_status(self, owner: Any, text: str) -> None:
        self.status_text = text
        self.status_owner = owner

    def hide_status(self, owner: Any) -> None:
        if self.status_owner is owner:
            self.status_owner = None

    @property
    def status_visible(self) -> bool:
        return self.status_owner is not None

    # Inspection

    def layer(self, buffer: MemoryBuffer) -> DecorationLayer:
        if buffer not in self._layers:
            self._layers[buffer] = DecorationLayer()
        return self._layers[buffer]

    def render_lines(self, buffer: MemoryBuffer) -> list[str]:
        return self.layer(buffer).render_lines(buffer.line_count)

    def live_decoration_count(self, buffer: MemoryBuffer) -> int:
        return self.layer(buffer).live_count
