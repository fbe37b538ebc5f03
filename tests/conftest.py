"""Global test fixtures for cyclelens."""

from __future__ import annotations

import pytest

from cyclelens.analyzer import GuardedAnalyzer
from cyclelens.host.memory import MemoryHost
from tests.helpers.fakes import FakeAnalyzer

SOURCE = "MOVE.L D0,D1\nBRA loop"


@pytest.fixture
def fake_analyzer() -> FakeAnalyzer:
    return FakeAnalyzer()


@pytest.fixture
def analyzer(fake_analyzer: FakeAnalyzer) -> GuardedAnalyzer:
    """Fake analyzer behind the same guard the application uses."""
    return GuardedAnalyzer(fake_analyzer, sanitize=False)


@pytest.fixture
def host() -> MemoryHost:
    return MemoryHost()


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> None:
    """Keep user config and environment out of every test."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    for name in ("CYCLELENS_ANALYZER", "CYCLELENS_COST_TABLE", "CYCLELENS_DEBUG"):
        monkeypatch.delenv(name, raising=False)
