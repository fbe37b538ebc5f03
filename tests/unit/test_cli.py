"""Tests for the command line entry point."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from cyclelens import __version__
from cyclelens.cli import main

TABLE = """\
instructions:
  move.l: {bytes: 2, cycles: 4}
  bra:    {bytes: 2, cycles: [10, 8], labels: [taken, not taken]}
  ds.l:   {bss: 4}
"""

SOURCE = "\tmove.l d0,d1\nloop:\tbra loop\nbuf:\tds.l 2\n"


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "m68k.yaml").write_text(TABLE)
    (tmp_path / "main.s").write_text(SOURCE)
    return tmp_path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestCli:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "--count" in result.output

    def test_count_range(self, runner: CliRunner, workspace: Path) -> None:
        result = runner.invoke(main, ["--cost-table", "m68k.yaml", "--count", "1:2", "main.s"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Bytes: 4 Cycles: 12–14"

    def test_count_single_line(self, runner: CliRunner, workspace: Path) -> None:
        result = runner.invoke(main, ["--cost-table", "m68k.yaml", "--count", "1", "main.s"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Bytes: 2 Cycles: 4"

    def test_count_includes_bss(self, runner: CliRunner, workspace: Path) -> None:
        result = runner.invoke(main, ["--cost-table", "m68k.yaml", "--count", "1:3", "main.s"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Bytes: 4 (4 bss) Cycles: 12–14"

    def test_count_past_end_of_file(self, runner: CliRunner, workspace: Path) -> None:
        result = runner.invoke(main, ["--cost-table", "m68k.yaml", "--count", "2:99", "main.s"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Bytes: 2 (4 bss) Cycles: 8–10"

    def test_cost_table_from_env(
        self, runner: CliRunner, workspace: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CYCLELENS_COST_TABLE", str(workspace / "m68k.yaml"))
        result = runner.invoke(main, ["--count", "1", "main.s"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Bytes: 2 Cycles: 4"

    def test_analyzer_option(self, runner: CliRunner, workspace: Path) -> None:
        (workspace / "fake.s").write_text("MOVE.L D0,D1\nDIVS D1,D0\n")
        result = runner.invoke(
            main, ["-a", "tests.helpers.fakes:FakeAnalyzer", "--count", "1:2", "fake.s"]
        )
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Bytes: 4 Cycles: 162"

    def test_without_analyzer_counts_nothing(self, runner: CliRunner, workspace: Path) -> None:
        result = runner.invoke(main, ["--count", "1:2", "main.s"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Bytes: 0 Cycles: 0"

    @pytest.mark.parametrize("value", ["3:1", "0:2", "a:b", "1:x"])
    def test_bad_range(self, runner: CliRunner, workspace: Path, value: str) -> None:
        result = runner.invoke(main, ["--count", value, "main.s"])
        assert result.exit_code == 2
        assert "Invalid value" in result.output

    def test_count_needs_file(self, runner: CliRunner, workspace: Path) -> None:
        result = runner.invoke(main, ["--count", "1:2"])
        assert result.exit_code == 2
        assert "--count needs a file" in result.output

    def test_bad_analyzer(self, runner: CliRunner, workspace: Path) -> None:
        result = runner.invoke(main, ["-a", "no_such_module_for_cyclelens:Analyzer", "main.s"])
        assert result.exit_code == 1
        assert "Cannot import analyzer module" in result.output

    def test_missing_cost_table(self, runner: CliRunner, workspace: Path) -> None:
        result = runner.invoke(main, ["--cost-table", "missing.yaml", "--count", "1", "main.s"])
        assert result.exit_code == 1
        assert "Cannot read cost table" in result.output

    def test_missing_file(self, runner: CliRunner, workspace: Path) -> None:
        result = runner.invoke(main, ["--count", "1", "nope.s"])
        assert result.exit_code == 2
