"""Per-line decoration labels and the table of handles a session owns."""

from __future__ import annotations

from dataclasses import dataclass, field

from cyclelens.analyzer import LineAnalyzer
from cyclelens.host.base import DecorationHandle, DecorationRequest
from cyclelens.types.facts import CalculationDetail, Level, LineFacts

DEFAULT_LEVEL_COLORS: dict[Level, str] = {
    Level.VHIGH: "red",
    Level.HIGH: "#f38ba8",
    Level.MED: "#f9e2af",
    Level.LOW: "#89dceb",
}
DEFAULT_FALLBACK_COLOR = "#6c7086"


@dataclass(frozen=True)
class DecorationStyle:
    """Colors used for labels."""

    level_colors: dict[Level, str] = field(default_factory=lambda: dict(DEFAULT_LEVEL_COLORS))
    fallback_color: str = DEFAULT_FALLBACK_COLOR

    def color_for(self, facts: LineFacts) -> str:
        if facts.timing is None or facts.level is None:
            return self.fallback_color
        return self.level_colors.get(facts.level, self.fallback_color)


def format_calculation(calculation: CalculationDetail, analyzer: LineAnalyzer) -> str:
    """``base(+multiplier·n) [+ ea]`` followed by the resolved ``n``."""
    text = analyzer.format_timing(calculation.base)
    if calculation.multiplier is not None:
        text += f"(+{analyzer.format_timing(calculation.multiplier)}·n)"
    if calculation.ea is not None:
        text += f" + {analyzer.format_timing(calculation.ea)}"
    if calculation.n is not None:
        text += f" n={calculation.n}"
    return text


def compose_decoration(
    line: int,
    facts: LineFacts,
    analyzer: LineAnalyzer,
    style: DecorationStyle,
) -> DecorationRequest:
    """Build the inline label (timings, then bytes) and detail for one line."""
    parts: list[str] = []
    detail = None
    timing = facts.timing
    if timing is not None:
        parts.append(" ".join(analyzer.format_timing(v) for v in timing.values))
        if timing.is_multi:
            details = []
            if timing.labels:
                details.append(" / ".join(timing.labels))
            if timing.calculation is not None:
                details.append(format_calculation(timing.calculation, analyzer))
            detail = "  ".join(details) or None
    if facts.byte_cost:
        parts.append(str(facts.byte_cost))
    return DecorationRequest(
        line=line,
        label="  ".join(parts),
        color=style.color_for(facts),
        detail=detail,
    )


class DecorationTable:
    """Decoration handles indexed by line; ``None`` where a line shows nothing.

    Every handle placed in the table is disposed exactly once, when its
    slot is removed or the table is released.
    """

    def __init__(self) -> None:
        self._slots: list[DecorationHandle | None] = []

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, line: int) -> DecorationHandle | None:
        return self._slots[line]

    @property
    def live_count(self) -> int:
        return sum(1 for handle in self._slots if handle is not None)

    def remove(self, start: int, count: int) -> None:
        """Dispose and drop slots ``[start, start + count)``."""
        for handle in self._slots[start : start + count]:
            if handle is not None:
                handle.dispose()
        del self._slots[start : start + count]

    def insert(self, start: int, handles: list[DecorationHandle | None]) -> None:
        """Insert ``handles`` at ``start`` and move every later handle to its new line."""
        self._slots[start:start] = handles
        for line in range(start + len(handles), len(self._slots)):
            handle = self._slots[line]
            if handle is not None and handle.line != line:
                handle.move_to(line)

    def release_all(self) -> None:
        for handle in self._slots:
            if handle is not None:
                handle.dispose()
        self._slots = []
