"""CLI entry point using Click."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from cyclelens import __version__
from cyclelens.analyzer import build_analyzer
from cyclelens.config import load_config
from cyclelens.core.totals import count_selection, format_totals
from cyclelens.errors import CycleLensError
from cyclelens.utilities.logger import get_logger, setup_logging


def _parse_line_range(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> tuple[int, int] | None:
    """Parse ``START:END`` (or a single line) as 1-based inclusive line numbers."""
    if value is None:
        return None
    start_text, _, end_text = value.partition(":")
    try:
        start = int(start_text)
        end = int(end_text) if end_text else start
    except ValueError:
        raise click.BadParameter("expected START:END line numbers") from None
    if start < 1 or end < start:
        raise click.BadParameter("line numbers start at 1 and END must not precede START")
    return start, end


@click.command()
@click.argument("files", nargs=-1, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--analyzer", "-a", default=None, help="Line analyzer as module:attr")
@click.option("--cost-table", default=None, type=click.Path(dir_okay=False),
              help="YAML cost table used when no analyzer is given")
@click.option("--no-sanitize", is_flag=True, help="Do not strip inline-asm quoting before analysis")
@click.option("--count", "line_range", default=None, callback=_parse_line_range,
              help="Print totals for lines START:END of the first file and exit")
@click.option("--hidden", is_flag=True, help="Open without annotations (toggle with F2)")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--version", is_flag=True, help="Show version and exit")
def main(
    files: tuple[Path, ...],
    analyzer: str | None,
    cost_table: str | None,
    no_sanitize: bool,
    line_range: tuple[int, int] | None,
    hidden: bool,
    debug: bool,
    version: bool,
) -> None:
    """cyclelens - byte and cycle counts alongside your assembly source.

    Opens FILES in a terminal editor with live per-line annotations, or
    prints selection totals with --count.
    """
    if version:
        click.echo(f"cyclelens {__version__}")
        return

    cli_args: dict[str, Any] = {}
    if analyzer:
        cli_args["analyzer"] = analyzer
    if cost_table:
        cli_args["cost_table"] = cost_table
    if no_sanitize:
        cli_args["sanitize_inline_asm"] = False
    if debug:
        cli_args["debug"] = True

    config = load_config(cli_args=cli_args)
    setup_logging(debug=config.debug, json_output=config.json_logs)
    log = get_logger("cyclelens.cli")
    log.debug("config loaded", analyzer=config.analyzer, cost_table=config.cost_table)

    try:
        line_analyzer = build_analyzer(config)
    except CycleLensError as exc:
        raise click.ClickException(str(exc)) from exc

    if line_range is not None:
        if not files:
            raise click.UsageError("--count needs a file")
        start, end = line_range
        lines = files[0].read_text(encoding="utf-8").split("\n")
        selected = "\n".join(lines[start - 1 : end])
        totals = count_selection(selected, line_analyzer)
        click.echo(format_totals(totals, line_analyzer))
        return

    from cyclelens.tui.app import CycleLensApp, Document

    documents = [Document(path.name, path.read_text(encoding="utf-8")) for path in files]
    if not documents:
        documents = [Document("untitled", "")]

    app = CycleLensApp(
        documents,
        line_analyzer,
        style=config.decoration_style(),
        gutter_width=config.gutter_width,
        annotate=not hidden,
    )
    app.run()
    log.debug("editor closed")


if __name__ == "__main__":
    main()
