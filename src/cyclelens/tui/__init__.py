"""Textual front end for cyclelens."""

from cyclelens.tui.app import CycleLensApp, Document
from cyclelens.tui.host import TextAreaBuffer, TextualHost, diff_lines

__all__ = ["CycleLensApp", "Document", "TextAreaBuffer", "TextualHost", "diff_lines"]
