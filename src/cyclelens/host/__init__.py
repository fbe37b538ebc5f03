"""Host editor substrate: protocols and an in-memory implementation."""

from cyclelens.host.base import (
    DecorationHandle,
    DecorationRequest,
    HostSubstrate,
    Signal,
    Subscription,
    TextBuffer,
)
from cyclelens.host.memory import DecorationLayer, MemoryBuffer, MemoryHost

__all__ = [
    "DecorationHandle",
    "DecorationRequest",
    "HostSubstrate",
    "Signal",
    "Subscription",
    "TextBuffer",
    "DecorationLayer",
    "MemoryBuffer",
    "MemoryHost",
]
