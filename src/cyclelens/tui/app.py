"""Terminal editor with live cycle annotations."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, TabbedContent, TabPane, TextArea

from cyclelens.analyzer import LineAnalyzer
from cyclelens.core.decorations import DecorationStyle
from cyclelens.core.registry import SessionRegistry
from cyclelens.core.totals import count_selection, format_totals
from cyclelens.tui.host import TextAreaBuffer, TextualHost
from cyclelens.tui.widgets.annotation_gutter import AnnotationGutter
from cyclelens.tui.widgets.toggle_lens import ToggleLens
from cyclelens.tui.widgets.totals_bar import TotalsBar

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Document:
    """A file opened in the editor."""

    name: str
    text: str


class CycleLensApp(App):
    """One tab per document: annotation gutter on the left, editor on the right.

    Annotations are managed by a ``SessionRegistry`` over a ``TextualHost``;
    the app only forwards widget messages to the host.
    """

    CSS = """
    TextArea {
        border: none;
        padding: 0;
    }
    TabPane {
        padding: 0;
    }
    """

    TITLE = "cyclelens"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=True, priority=True),
        Binding("f2", "toggle_counts", "Toggle counts", show=True, priority=True),
        Binding("f3", "count_selection", "Count selection", show=True, priority=True),
        Binding("f4", "close_buffer", "Close", show=True, priority=True),
    ]

    def __init__(
        self,
        documents: list[Document],
        analyzer: LineAnalyzer,
        *,
        style: DecorationStyle | None = None,
        gutter_width: int = 24,
        annotate: bool = True,
    ) -> None:
        super().__init__()
        self._documents = documents
        self._analyzer = analyzer
        self._gutter_width = gutter_width
        self._annotate = annotate
        self.host = TextualHost(on_status=self._show_status)
        self.registry = SessionRegistry(self.host, analyzer, style=style)
        self._buffers: dict[str, TextAreaBuffer] = {}
        self._gutters: dict[str, AnnotationGutter] = {}

    def compose(self) -> ComposeResult:
        yield ToggleLens(id="toggle-lens")
        with TabbedContent(id="buffers"):
            for index, document in enumerate(self._documents):
                with TabPane(document.name, id=f"buffer-{index}"):
                    with Horizontal():
                        yield AnnotationGutter(
                            gutter_width=self._gutter_width, id=f"gutter-{index}"
                        )
                        yield TextArea(document.text, soft_wrap=False, id=f"editor-{index}")
        yield TotalsBar(id="totals-bar")
        yield Footer()

    def on_mount(self) -> None:
        for index, document in enumerate(self._documents):
            pane_id = f"buffer-{index}"
            text_area = self.query_one(f"#editor-{index}", TextArea)
            gutter = self.query_one(f"#gutter-{index}", AnnotationGutter)
            buffer = TextAreaBuffer(
                text_area, buffer_id=document.name, on_layer_change=gutter.refresh
            )
            gutter.attach(buffer)
            self._buffers[pane_id] = buffer
            self._gutters[pane_id] = gutter
            self.watch(text_area, "scroll_y", gutter.follow_scroll, init=False)

        if self._buffers:
            self.host.set_active(self._buffers["buffer-0"])
        if self._annotate:
            for buffer in self._buffers.values():
                self.registry.toggle_for(buffer)
        logger.debug("Editor mounted with %d document(s)", len(self._buffers))

    def on_unmount(self) -> None:
        self.registry.dispose()

    # Widget messages

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        buffer = self._buffer_for(event.text_area)
        if buffer is not None:
            self.host.text_changed(buffer)

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        buffer = self._buffer_for(event.text_area)
        if buffer is None:
            return
        self.host.selection_changed(buffer)
        gutter = self._gutters.get(self._pane_id(buffer))
        if gutter is not None:
            gutter.tooltip = gutter.detail_for(event.selection.end[0])

    def on_tabbed_content_tab_activated(self, event: TabbedContent.TabActivated) -> None:
        self.host.set_active(self._buffers.get(event.pane.id or ""))

    def on_toggle_lens_pressed(self, event: ToggleLens.Pressed) -> None:
        self.action_toggle_counts()

    # Actions

    def action_toggle_counts(self) -> None:
        self.registry.toggle_active()

    def action_count_selection(self) -> None:
        buffer = self.host.active_buffer()
        if buffer is None:
            return
        start, end = sorted(buffer.selection_lines())
        totals = count_selection(buffer.get_text((start, end)), self._analyzer)
        self.notify(format_totals(totals, self._analyzer), title="Selection", timeout=5)

    async def action_close_buffer(self) -> None:
        buffer = self.host.active_buffer()
        if buffer is None:
            return
        pane_id = self._pane_id(buffer)
        self.host.close(buffer)
        self._buffers.pop(pane_id, None)
        self._gutters.pop(pane_id, None)
        await self.query_one("#buffers", TabbedContent).remove_pane(pane_id)

    # Helpers

    def _buffer_for(self, text_area: TextArea) -> TextAreaBuffer | None:
        for buffer in self._buffers.values():
            if buffer.text_area is text_area:
                return buffer
        return None

    def _pane_id(self, buffer: TextAreaBuffer) -> str:
        for pane_id, candidate in self._buffers.items():
            if candidate is buffer:
                return pane_id
        return ""

    def _show_status(self, text: str | None) -> None:
        for bar in self.query(TotalsBar):
            bar.show_totals(text)
