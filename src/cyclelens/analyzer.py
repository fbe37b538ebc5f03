"""Line analyzer boundary.

The analyzer turns source text into one ``LineFacts`` per line. Real
analyzers are supplied from outside (``load_analyzer``); everything in
this module is about calling them safely.
"""

from __future__ import annotations

import importlib
import logging
import re
from typing import TYPE_CHECKING, Any, Protocol, Sequence, runtime_checkable

from cyclelens.errors import ConfigurationError
from cyclelens.types.facts import Level, LineFacts, Number

if TYPE_CHECKING:
    from cyclelens.config import CycleLensConfig

logger = logging.getLogger(__name__)

TimingValue = Number | tuple[Number, Number]

# Upper bounds (inclusive) for each level; anything above is VHIGH.
LEVEL_THRESHOLDS: tuple[tuple[Number, Level], ...] = (
    (12, Level.LOW),
    (30, Level.MED),
    (100, Level.HIGH),
)

_INLINE_ASM_NOISE = re.compile(r'(\\n|"|%%)')


@runtime_checkable
class LineAnalyzer(Protocol):
    """What the overlay needs from an analyzer."""

    def analyze(self, text: str) -> Sequence[LineFacts]: ...

    def format_timing(self, value: TimingValue) -> str: ...

    def timing_level(self, value: Number) -> Level: ...


def split_lines(text: str) -> list[str]:
    """Split on newlines; a trailing line without a terminator still counts."""
    return text.split("\n")


def count_lines(text: str) -> int:
    return text.count("\n") + 1


def sanitize_source(text: str) -> str:
    """Strip escaped newlines, quotes and ``%%`` left over from inline asm in C."""
    return _INLINE_ASM_NOISE.sub("", text)


def _format_number(value: Number) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def format_timing(value: TimingValue) -> str:
    """Default timing formatter: ``8`` or ``8–10`` for a range."""
    if isinstance(value, tuple):
        low, high = value
        return f"{_format_number(low)}–{_format_number(high)}"
    return _format_number(value)


def timing_level(value: Number) -> Level:
    for bound, level in LEVEL_THRESHOLDS:
        if value <= bound:
            return level
    return Level.VHIGH


class NullAnalyzer:
    """Reports nothing for every line."""

    def analyze(self, text: str) -> list[LineFacts]:
        return [LineFacts.empty()] * count_lines(text)

    def format_timing(self, value: TimingValue) -> str:
        return format_timing(value)

    def timing_level(self, value: Number) -> Level:
        return timing_level(value)


class GuardedAnalyzer:
    """Wraps an external analyzer so that it can never break a session.

    Guarantees one fact per input line. If the wrapped analyzer raises, the
    text is re-analyzed line by line and lines that still fail are reported
    as ``LineFacts.empty()``.
    """

    def __init__(self, inner: LineAnalyzer, *, sanitize: bool = True) -> None:
        self.inner = inner
        self.sanitize = sanitize

    def analyze(self, text: str) -> list[LineFacts]:
        if self.sanitize:
            text = sanitize_source(text)
        expected = count_lines(text)
        try:
            facts = list(self.inner.analyze(text))
        except Exception:
            logger.warning(
                "Analyzer failed on %d line(s), retrying line by line",
                expected,
                exc_info=True,
            )
            return [self._analyze_line(line) for line in split_lines(text)]

        if len(facts) != expected:
            logger.warning(
                "Analyzer returned %d fact(s) for %d line(s)", len(facts), expected
            )
            facts = facts[:expected]
            facts.extend([LineFacts.empty()] * (expected - len(facts)))
        return facts

    def _analyze_line(self, line: str) -> LineFacts:
        try:
            facts = list(self.inner.analyze(line))
        except Exception as exc:
            logger.debug("Analyzer failed on line %r: %s", line, exc)
            return LineFacts.empty()
        return facts[0] if facts else LineFacts.empty()

    def format_timing(self, value: TimingValue) -> str:
        try:
            return self.inner.format_timing(value)
        except Exception as exc:
            logger.debug("format_timing failed for %r: %s", value, exc)
            return format_timing(value)

    def timing_level(self, value: Number) -> Level:
        try:
            return self.inner.timing_level(value)
        except Exception as exc:
            logger.debug("timing_level failed for %r: %s", value, exc)
            return timing_level(value)


def load_analyzer(path: str) -> LineAnalyzer:
    """Resolve ``"package.module:attr"`` to an analyzer instance.

    ``attr`` may be an analyzer object, a class, or a zero-argument factory.
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(f"Analyzer must be given as 'module:attr', got {path!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import analyzer module {module_name!r}: {exc}") from exc
    try:
        target: Any = getattr(module, attr)
    except AttributeError as exc:
        raise ConfigurationError(f"Module {module_name!r} has no attribute {attr!r}") from exc

    if isinstance(target, type) or not isinstance(target, LineAnalyzer):
        if not callable(target):
            raise ConfigurationError(f"{path!r} does not provide a line analyzer")
        analyzer = target()
    else:
        analyzer = target
    if not isinstance(analyzer, LineAnalyzer):
        raise ConfigurationError(f"{path!r} does not provide a line analyzer")
    return analyzer


def build_analyzer(config: CycleLensConfig) -> GuardedAnalyzer:
    """Build the guarded analyzer described by ``config``."""
    inner: LineAnalyzer
    if config.analyzer:
        inner = load_analyzer(config.analyzer)
    elif config.cost_table:
        from cyclelens.cost_table import CostTableAnalyzer

        inner = CostTableAnalyzer.from_file(config.cost_table)
    else:
        inner = NullAnalyzer()
    logger.debug("Using analyzer %s", type(inner).__name__)
    return GuardedAnalyzer(inner, sanitize=config.sanitize_inline_asm)
