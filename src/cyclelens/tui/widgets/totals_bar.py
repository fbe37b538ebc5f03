"""Status line showing byte and cycle totals."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static


class TotalsBar(Static):
    """Bottom bar with the active session's totals."""

    DEFAULT_CSS = """
    TotalsBar {
        height: 1;
        background: $surface;
        color: $text;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.totals_text = ""

    def show_totals(self, text: str | None) -> None:
        """Show ``text``, or hide the bar when it is None."""
        self.totals_text = text or ""
        self.display = text is not None
        self.update(Text(self.totals_text, style="bold"))
