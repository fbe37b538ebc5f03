"""Annotation overlay - facts kept index-aligned with buffer lines.

``overlay[i]`` always describes buffer line ``i``. Edits are applied by
re-analyzing only the replacement lines and splicing them in, so the cost
of an edit is proportional to the edited range, not to the buffer.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import overload

from cyclelens.analyzer import LineAnalyzer, count_lines
from cyclelens.errors import OverlayRangeError
from cyclelens.types.facts import LineFacts

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EditResult:
    """What an edit did to the overlay."""

    start_line: int
    replaced_count: int
    inserted: tuple[LineFacts, ...]

    @property
    def line_delta(self) -> int:
        return len(self.inserted) - self.replaced_count


class OverlaySlice(Sequence[LineFacts]):
    """Read-only window over part of an overlay.

    Creating one is O(1); it reads through to the overlay and is only
    meaningful until the next edit.
    """

    __slots__ = ("_facts", "_start", "_stop")

    def __init__(self, facts: list[LineFacts], start: int, stop: int) -> None:
        self._facts = facts
        self._start = start
        self._stop = stop

    def __len__(self) -> int:
        return self._stop - self._start

    @overload
    def __getitem__(self, index: int) -> LineFacts: ...

    @overload
    def __getitem__(self, index: slice) -> list[LineFacts]: ...

    def __getitem__(self, index: int | slice) -> LineFacts | list[LineFacts]:
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("overlay slice index out of range")
        return self._facts[self._start + index]


class AnnotationOverlay(Sequence[LineFacts]):
    """Ordered per-line facts for one buffer."""

    def __init__(self, analyzer: LineAnalyzer) -> None:
        self._analyzer = analyzer
        self._facts: list[LineFacts] = []

    def __len__(self) -> int:
        return len(self._facts)

    @overload
    def __getitem__(self, index: int) -> LineFacts: ...

    @overload
    def __getitem__(self, index: slice) -> list[LineFacts]: ...

    def __getitem__(self, index: int | slice) -> LineFacts | list[LineFacts]:
        return self._facts[index]

    @property
    def analyzer(self) -> LineAnalyzer:
        return self._analyzer

    def rebuild_all(self, full_text: str) -> None:
        """Discard every fact and analyze ``full_text`` from scratch."""
        self._facts = self._analyze(full_text)
        logger.debug("Overlay rebuilt with %d line(s)", len(self._facts))

    def clear(self) -> None:
        self._facts = []

    def apply_edit(self, start_line: int, end_line: int, replacement_text: str) -> EditResult:
        """Replace facts for lines ``[start_line, end_line]`` with facts for ``replacement_text``.

        Only ``replacement_text`` is analyzed. Raises ``OverlayRangeError``
        when the range does not address existing lines.
        """
        if not 0 <= start_line <= end_line < len(self._facts):
            raise OverlayRangeError(start_line, end_line, len(self._facts))

        inserted = self._analyze(replacement_text)
        replaced_count = end_line - start_line + 1
        self._facts[start_line : end_line + 1] = inserted
        return EditResult(
            start_line=start_line,
            replaced_count=replaced_count,
            inserted=tuple(inserted),
        )

    def slice(self, start_line: int, end_line: int) -> OverlaySlice:
        """Facts for lines ``[start_line, end_line]``, clamped to the overlay."""
        start = max(0, start_line)
        stop = min(len(self._facts), end_line + 1)
        return OverlaySlice(self._facts, start, max(start, stop))

    def _analyze(self, text: str) -> list[LineFacts]:
        facts = list(self._analyzer.analyze(text))
        expected = count_lines(text)
        if len(facts) != expected:
            # Keep alignment even with an unguarded analyzer.
            logger.warning("Analyzer returned %d fact(s) for %d line(s)", len(facts), expected)
            facts = facts[:expected]
            facts.extend([LineFacts.empty()] * (expected - len(facts)))
        return facts
