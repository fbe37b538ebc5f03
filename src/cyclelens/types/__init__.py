"""Shared value types."""

from cyclelens.types.facts import CalculationDetail, Level, LineFacts, Timing
from cyclelens.types.events import (
    ActiveViewEvent,
    BufferClosedEvent,
    ContentChange,
    EditEvent,
    SelectionEvent,
)

__all__ = [
    "CalculationDetail",
    "Level",
    "LineFacts",
    "Timing",
    "ActiveViewEvent",
    "BufferClosedEvent",
    "ContentChange",
    "EditEvent",
    "SelectionEvent",
]
