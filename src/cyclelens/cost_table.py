"""Lookup analyzer driven by a YAML cost table.

The table maps a mnemonic to its costs. A line is matched on its first
token after the label (a token in column 0, or one ending in ``:``),
first with its size suffix (``move.l``) and then without (``move``). No
operand parsing is done, so the table is only as precise as its entries::

    instructions:
      move.l: {bytes: 2, cycles: 4}
      bra:    {bytes: 2, cycles: [10, 8], labels: [taken, not taken]}
      dbf:    {bytes: 4, cycles: [10, 14], calculation: {base: 10, multiplier: 14}}
      ds.b:   {bss: 1}
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from cyclelens.analyzer import TimingValue, format_timing, split_lines, timing_level
from cyclelens.errors import AnalyzerError
from cyclelens.types.facts import CalculationDetail, Level, LineFacts, Number, Timing

_COMMENT_CHARS = (";",)


@dataclass(frozen=True, slots=True)
class CostEntry:
    """Costs for one mnemonic."""

    byte_cost: int = 0
    bss_byte_cost: int = 0
    timing: Timing | None = None


def _parse_number(value: Any, where: str) -> Number:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise AnalyzerError(f"{where}: expected a number, got {value!r}")
    return value


def _parse_entry(name: str, raw: Any) -> CostEntry:
    if not isinstance(raw, Mapping):
        raise AnalyzerError(f"Cost table entry {name!r} must be a mapping")

    byte_cost = int(_parse_number(raw.get("bytes", 0), f"{name}.bytes"))
    bss_byte_cost = int(_parse_number(raw.get("bss", 0), f"{name}.bss"))

    timing = None
    cycles = raw.get("cycles")
    if cycles is not None:
        values = cycles if isinstance(cycles, list) else [cycles]
        labels = raw.get("labels") or []
        calculation = None
        if calc := raw.get("calculation"):
            if not isinstance(calc, Mapping) or "base" not in calc:
                raise AnalyzerError(f"{name}.calculation needs at least a 'base'")
            calculation = CalculationDetail(
                base=_parse_number(calc["base"], f"{name}.calculation.base"),
                multiplier=calc.get("multiplier"),
                n=calc.get("n"),
                ea=calc.get("ea"),
            )
        try:
            timing = Timing(
                values=tuple(_parse_number(v, f"{name}.cycles") for v in values),
                labels=tuple(str(label) for label in labels),
                calculation=calculation,
            )
        except ValueError as exc:
            raise AnalyzerError(f"{name}: {exc}") from exc

    return CostEntry(byte_cost=byte_cost, bss_byte_cost=bss_byte_cost, timing=timing)


def _mnemonic(line: str) -> str | None:
    for char in _COMMENT_CHARS:
        line = line.split(char, 1)[0]
    if line.startswith("*"):
        return None
    tokens = line.split()
    # Anything starting in column 0 is a label, with or without a colon.
    if tokens and (not line[:1].isspace() or tokens[0].endswith(":")):
        tokens = tokens[1:]
    if not tokens:
        return None
    return tokens[0].lower()


class CostTableAnalyzer:
    """Annotates lines by looking their mnemonic up in a cost table."""

    def __init__(self, entries: Mapping[str, CostEntry]) -> None:
        self.entries = {name.lower(): entry for name, entry in entries.items()}

    @classmethod
    def from_mapping(cls, data: Any) -> CostTableAnalyzer:
        if not isinstance(data, Mapping):
            raise AnalyzerError("Cost table must be a mapping")
        instructions = data.get("instructions", {})
        if not isinstance(instructions, Mapping):
            raise AnalyzerError("'instructions' must be a mapping")
        return cls({str(name): _parse_entry(str(name), raw) for name, raw in instructions.items()})

    @classmethod
    def from_file(cls, path: str | Path) -> CostTableAnalyzer:
        try:
            data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise AnalyzerError(f"Cannot read cost table {path}: {exc}") from exc
        return cls.from_mapping(data or {})

    def lookup(self, mnemonic: str) -> CostEntry | None:
        entry = self.entries.get(mnemonic)
        if entry is None and "." in mnemonic:
            entry = self.entries.get(mnemonic.split(".", 1)[0])
        return entry

    def analyze(self, text: str) -> list[LineFacts]:
        return [self._analyze_line(line) for line in split_lines(text)]

    def _analyze_line(self, line: str) -> LineFacts:
        mnemonic = _mnemonic(line)
        entry = self.lookup(mnemonic) if mnemonic else None
        if entry is None:
            return LineFacts.empty()
        level = self.timing_level(entry.timing.primary) if entry.timing else None
        return LineFacts(
            byte_cost=entry.byte_cost,
            bss_byte_cost=entry.bss_byte_cost,
            timing=entry.timing,
            level=level,
        )

    def format_timing(self, value: TimingValue) -> str:
        return format_timing(value)

    def timing_level(self, value: Number) -> Level:
        return timing_level(value)
