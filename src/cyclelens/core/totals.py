"""Totals aggregation over a run of line facts."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from cyclelens.analyzer import LineAnalyzer
from cyclelens.types.facts import LineFacts, Number


@dataclass(frozen=True, slots=True)
class Totals:
    """Byte and cycle sums for a contiguous range of lines."""

    bytes: int = 0
    bss_bytes: int = 0
    min: Number = 0
    max: Number = 0

    @classmethod
    def empty(cls) -> Totals:
        return cls()

    @property
    def is_range(self) -> bool:
        """True when the cycle cost is not a single fixed number."""
        return self.min != self.max

    def __add__(self, other: Totals) -> Totals:
        if not isinstance(other, Totals):
            return NotImplemented
        return Totals(
            bytes=self.bytes + other.bytes,
            bss_bytes=self.bss_bytes + other.bss_bytes,
            min=self.min + other.min,
            max=self.max + other.max,
        )


def aggregate(facts: Iterable[LineFacts]) -> Totals:
    """Fold facts into totals. Lines without timing add no cycles."""
    total_bytes = 0
    total_bss = 0
    total_min: Number = 0
    total_max: Number = 0
    for fact in facts:
        total_bytes += fact.byte_cost
        total_bss += fact.bss_byte_cost
        if fact.timing is not None:
            total_min += fact.timing.min
            total_max += fact.timing.max
    return Totals(bytes=total_bytes, bss_bytes=total_bss, min=total_min, max=total_max)


def format_totals(totals: Totals, analyzer: LineAnalyzer, *, prefix: str = "") -> str:
    """Compact status-line text, e.g. ``Bytes: 4 (8 bss) Cycles: 12–14``."""
    text = f"{prefix}Bytes: {totals.bytes}"
    if totals.bss_bytes:
        text += f" ({totals.bss_bytes} bss)"
    if totals.is_range:
        cycles = analyzer.format_timing((totals.min, totals.max))
    else:
        cycles = analyzer.format_timing(totals.min)
    return f"{text} Cycles: {cycles}"


def count_selection(text: str, analyzer: LineAnalyzer) -> Totals:
    """Analyze ``text`` from scratch and total it, independent of any session."""
    return aggregate(analyzer.analyze(text))
