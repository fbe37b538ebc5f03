"""Cyclelens error hierarchy."""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCategory(StrEnum):
    """Category of error for classification and handling."""

    ANALYZER = "analyzer"
    OVERLAY = "overlay"
    SESSION = "session"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class CycleLensError(Exception):
    """Base error for all cyclelens exceptions."""

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory = ErrorCategory.INTERNAL,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.details: dict[str, Any] = details or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r}, category={self.category!r})"


class AnalyzerError(CycleLensError):
    """A line analyzer could not be built or produced unusable output."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message, category=ErrorCategory.ANALYZER, **kwargs)


class OverlayRangeError(CycleLensError, ValueError):
    """An edit addressed lines outside the overlay."""

    def __init__(self, start_line: int, end_line: int, length: int) -> None:
        super().__init__(
            f"Edit range [{start_line}, {end_line}] outside overlay of {length} lines",
            category=ErrorCategory.OVERLAY,
            details={"start_line": start_line, "end_line": end_line, "length": length},
        )
        self.start_line = start_line
        self.end_line = end_line
        self.length = length


class SessionDisposedError(CycleLensError):
    """Operation attempted on a session that has already been disposed."""

    def __init__(self, buffer_id: str) -> None:
        super().__init__(
            f"Session for buffer '{buffer_id}' is disposed",
            category=ErrorCategory.SESSION,
        )
        self.buffer_id = buffer_id


class InvalidTransitionError(CycleLensError):
    """Raised when a session state transition is not allowed."""

    def __init__(self, from_state: str, to_state: str) -> None:
        super().__init__(
            f"Invalid transition: {from_state} -> {to_state}",
            category=ErrorCategory.SESSION,
        )
        self.from_state = from_state
        self.to_state = to_state


class ConfigurationError(CycleLensError):
    """Invalid or missing configuration."""

    def __init__(self, message: str) -> None:
        super().__init__(message, category=ErrorCategory.CONFIGURATION)
