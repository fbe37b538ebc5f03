"""Gutter that paints decoration labels next to the editor lines."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text
from textual.reactive import reactive
from textual.widgets import Static

if TYPE_CHECKING:
    from cyclelens.tui.host import TextAreaBuffer


class AnnotationGutter(Static):
    """One row per visible editor line, showing that line's label.

    Follows the editor's vertical scroll through ``scroll_top``.
    """

    DEFAULT_CSS = """
    AnnotationGutter {
        height: 1fr;
        background: $surface;
        color: $text-muted;
        padding: 0 1 0 0;
    }
    """

    scroll_top: reactive[int] = reactive(0)

    def __init__(self, *, gutter_width: int = 24, **kwargs) -> None:
        super().__init__(**kwargs)
        self.styles.width = gutter_width
        self._buffer: TextAreaBuffer | None = None

    def attach(self, buffer: TextAreaBuffer) -> None:
        self._buffer = buffer
        self.refresh()

    def render(self) -> Text:
        text = Text(no_wrap=True, overflow="crop")
        if self._buffer is None:
            return text
        rows: dict[int, tuple[str, str]] = {}
        for decoration in self._buffer.layer.decorations():
            rows.setdefault(decoration.line, (decoration.label, decoration.color))

        last = min(self._buffer.line_count, self.scroll_top + self.size.height)
        for line in range(self.scroll_top, last):
            label, color = rows.get(line, ("", ""))
            text.append(label, style=color or None)
            if line < last - 1:
                text.append("\n")
        return text

    def detail_for(self, line: int) -> str | None:
        """Long-form detail attached to ``line``, if any."""
        if self._buffer is None:
            return None
        for decoration in self._buffer.layer.at(line):
            if decoration.detail:
                return decoration.detail
        return None

    def follow_scroll(self, scroll_y: float) -> None:
        self.scroll_top = int(scroll_y)

    def watch_scroll_top(self) -> None:
        self.refresh()
