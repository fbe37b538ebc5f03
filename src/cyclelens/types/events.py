"""Notifications delivered by the host editor.

All line numbers are 0-based. Buffers are referenced by the host's own
buffer objects; events only carry them through.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class ContentChange:
    """Buffer lines ``[start_line, end_line]`` were replaced by ``text``.

    ``text`` is the full text of the replacement lines (no trailing newline);
    it spans ``text.count("\\n") + 1`` lines.
    """

    start_line: int
    end_line: int
    text: str

    @property
    def replaced_count(self) -> int:
        return self.end_line - self.start_line + 1

    @property
    def inserted_count(self) -> int:
        return self.text.count("\n") + 1

    @property
    def line_delta(self) -> int:
        return self.inserted_count - self.replaced_count


@dataclass(frozen=True, slots=True)
class EditEvent:
    """A batch of changes to one buffer, in document order."""

    buffer: Any
    changes: tuple[ContentChange, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class SelectionEvent:
    """The selection in a view of ``buffer`` now spans these lines."""

    buffer: Any
    start_line: int
    end_line: int


@dataclass(frozen=True, slots=True)
class ActiveViewEvent:
    """The focused view changed; ``buffer`` is None when nothing has focus."""

    buffer: Any | None


@dataclass(frozen=True, slots=True)
class BufferClosedEvent:
    """The host closed ``buffer``."""

    buffer: Any
