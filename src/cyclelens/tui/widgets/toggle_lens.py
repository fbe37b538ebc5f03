"""Clickable header above the editor that toggles annotations."""

from __future__ import annotations

from rich.text import Text
from textual.events import Click
from textual.message import Message
from textual.widgets import Static


class ToggleLens(Static):
    """A one-line ``Toggle counts`` link."""

    DEFAULT_CSS = """
    ToggleLens {
        height: 1;
        color: $text-muted;
        padding: 0 1;
    }
    ToggleLens:hover {
        color: $accent;
    }
    """

    class Pressed(Message):
        """The lens was clicked."""

    def __init__(self, **kwargs) -> None:
        super().__init__(Text("▸ Toggle counts", style="underline"), **kwargs)

    def on_click(self, event: Click) -> None:
        event.stop()
        self.post_message(self.Pressed())
