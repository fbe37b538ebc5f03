"""Annotation engine: overlay, totals, sessions and their registry."""

from cyclelens.core.decorations import DecorationStyle, DecorationTable, compose_decoration
from cyclelens.core.overlay import AnnotationOverlay, EditResult
from cyclelens.core.registry import SessionRegistry
from cyclelens.core.session import AnnotationSession
from cyclelens.core.session_state import SessionState, SessionStateMachine
from cyclelens.core.totals import Totals, aggregate, count_selection, format_totals

__all__ = [
    "DecorationStyle",
    "DecorationTable",
    "compose_decoration",
    "AnnotationOverlay",
    "EditResult",
    "SessionRegistry",
    "AnnotationSession",
    "SessionState",
    "SessionStateMachine",
    "Totals",
    "aggregate",
    "count_selection",
    "format_totals",
]
