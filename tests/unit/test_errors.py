"""Tests for the error hierarchy."""

from __future__ import annotations

import pytest

from cyclelens.errors import (
    AnalyzerError,
    ConfigurationError,
    CycleLensError,
    ErrorCategory,
    InvalidTransitionError,
    OverlayRangeError,
    SessionDisposedError,
)


class TestCycleLensError:
    def test_defaults(self) -> None:
        err = CycleLensError("boom")
        assert str(err) == "boom"
        assert err.category == ErrorCategory.INTERNAL
        assert err.details == {}

    def test_details(self) -> None:
        err = CycleLensError("boom", details={"line": 3})
        assert err.details == {"line": 3}

    def test_repr(self) -> None:
        assert repr(AnalyzerError("bad table")) == (
            "AnalyzerError('bad table', category=<ErrorCategory.ANALYZER: 'analyzer'>)"
        )


class TestSubclasses:
    @pytest.mark.parametrize(
        ("err", "category"),
        [
            (AnalyzerError("x"), ErrorCategory.ANALYZER),
            (OverlayRangeError(3, 4, 2), ErrorCategory.OVERLAY),
            (SessionDisposedError("main.s"), ErrorCategory.SESSION),
            (InvalidTransitionError("hidden", "hidden"), ErrorCategory.SESSION),
            (ConfigurationError("x"), ErrorCategory.CONFIGURATION),
        ],
    )
    def test_categories(self, err: CycleLensError, category: ErrorCategory) -> None:
        assert isinstance(err, CycleLensError)
        assert err.category == category

    def test_overlay_range_error(self) -> None:
        err = OverlayRangeError(3, 4, 2)
        assert isinstance(err, ValueError)
        assert (err.start_line, err.end_line, err.length) == (3, 4, 2)
        assert err.details == {"start_line": 3, "end_line": 4, "length": 2}
        assert "[3, 4]" in str(err)

    def test_session_disposed_error(self) -> None:
        err = SessionDisposedError("main.s")
        assert err.buffer_id == "main.s"
        assert "main.s" in str(err)

    def test_invalid_transition_error(self) -> None:
        err = InvalidTransitionError("disposed", "visible")
        assert str(err) == "Invalid transition: disposed -> visible"
        assert (err.from_state, err.to_state) == ("disposed", "visible")
