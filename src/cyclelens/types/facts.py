"""Per-line facts produced by a line analyzer.

A ``LineFacts`` value describes what one source line contributes: its
static size, its size in the uninitialized-data region and, when the line
executes, a ``Timing``. A timing with several values models alternative
outcomes (branch taken / not taken) or several size variants of the same
instruction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

Number = int | float


class Level(StrEnum):
    """Coarse severity of a line's primary timing value."""

    LOW = "low"
    MED = "med"
    HIGH = "high"
    VHIGH = "vhigh"


@dataclass(frozen=True, slots=True)
class CalculationDetail:
    """Breakdown of a timing that depends on a repeat count.

    Rendered as ``base(+multiplier·n) [+ ea]``.
    """

    base: Number
    multiplier: Number | None = None
    n: int | None = None
    ea: Number | None = None


@dataclass(frozen=True, slots=True)
class Timing:
    """One or more alternative cycle costs for a line."""

    values: tuple[Number, ...]
    labels: tuple[str, ...] = ()
    calculation: CalculationDetail | None = None

    def __post_init__(self) -> None:
        if not self.values:
            raise ValueError("Timing requires at least one value")
        if self.labels and len(self.labels) != len(self.values):
            raise ValueError("Timing labels must match values in length")

    @property
    def min(self) -> Number:
        return min(self.values)

    @property
    def max(self) -> Number:
        return max(self.values)

    @property
    def primary(self) -> Number:
        return self.values[0]

    @property
    def is_multi(self) -> bool:
        """Whether the timing carries more than one value."""
        return len(self.values) > 1


@dataclass(frozen=True, slots=True)
class LineFacts:
    """Derived data for one source line."""

    byte_cost: int = 0
    bss_byte_cost: int = 0
    timing: Timing | None = None
    level: Level | None = field(default=None)

    @classmethod
    def empty(cls) -> LineFacts:
        return _EMPTY

    @property
    def is_empty(self) -> bool:
        return self.byte_cost == 0 and self.bss_byte_cost == 0 and self.timing is None


_EMPTY = LineFacts()
