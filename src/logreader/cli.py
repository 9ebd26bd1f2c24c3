"""logreader CLI — entry point.

Commands:
    logreader parse  <file>   Parse and display access-log records
    logreader stats  <file>   Count records by a field
    logreader check  <file>   Report lines that don't match the format
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterator

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import settings
from .errors import FormatError, MatchError
from .parsers.apache import ApacheParser
from .parsers.formats import LogEntry, fields_for
from .reader import ApacheReader, iter_lines

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

# ── Helpers ─────────────────────────────────────────────────────────────────


def _status_colour(status: Any) -> str:
    if not isinstance(status, int) or status < 0:
        return "white"
    if status >= 500:
        return "red"
    if status >= 400:
        return "yellow"
    if status >= 300:
        return "cyan"
    return "green"


def _entry_line(entry: dict[str, Any]) -> str:
    """Return one coloured summary line for a record."""
    ts = entry.get("time") or ""
    ips = ",".join(entry.get("ips") or [])
    if "method" in entry:
        request = f"{entry['method']} {entry.get('path', '')}"
    else:
        request = str(entry.get("bad_request", ""))
    status = entry.get("status", "-")
    colour = _status_colour(status)
    return (
        f"[dim]{ts}[/dim] {escape(ips)} {escape(request)} "
        f"→ [{colour}]{status}[/{colour}] ({entry.get('size', '-')} B)"
    )


def _resolve_parser(fmt: str | None) -> ApacheParser:
    try:
        return ApacheParser(fmt or settings.default_format)
    except FormatError as exc:
        raise click.BadParameter(str(exc), param_hint="'--format'") from exc


def _records(
    file: Path, parser: ApacheParser, strict: bool, workers: int
) -> Iterator[LogEntry]:
    """Yield records from file, in parallel when workers != 1."""
    skip_invalid = not strict
    if workers != 1:
        from .perf.parallel_parser import parse_file_parallel

        n = workers if workers > 0 else settings.max_workers
        try:
            entries = parse_file_parallel(
                str(file), format=parser.format, workers=n, skip_invalid=skip_invalid
            )
        except MatchError as exc:
            raise click.ClickException(f"{file}: {exc}") from exc
        yield from entries
        return

    reader = ApacheReader(file, parser.format, skip_invalid=skip_invalid)
    try:
        yield from reader
    except MatchError as exc:
        raise click.ClickException(f"{file}:{reader.lines_read}: {exc}") from exc
    if reader.rejected:
        err_console.print(
            f"[yellow]Skipped {reader.rejected} line(s) that did not match the format[/yellow]"
        )


def _format_option(f: Any) -> Any:
    return click.option(
        "--format", "-f", "fmt", default=None,
        help="'common', 'combined' or an Apache format string "
             "(default: LOGREADER_DEFAULT_FORMAT or combined).",
    )(f)


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="1.0.0", prog_name="logreader")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """logreader — fast Apache access-log parsing."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


# ── parse ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_format_option
@click.option(
    "--output", "-o", "output_fmt", default="table",
    type=click.Choice(["table", "stream", "json"], case_sensitive=False),
    help="Output format.",
    show_default=True,
)
@click.option("--limit", "-n", default=0, type=int, help="Max entries to display (0 = all).")
@click.option("--fields", default="", help="Comma-separated fields to include in the output.")
@click.option("--strict", is_flag=True, help="Abort on the first line that doesn't match the format.")
@click.option("--workers", "-w", default=1, type=int, help="Parallel workers (0 = LOGREADER_MAX_WORKERS).")
def parse(
    file: Path,
    fmt: str | None,
    output_fmt: str,
    limit: int,
    fields: str,
    strict: bool,
    workers: int,
) -> None:
    """Parse an access log and display its records.

    \b
    Examples:
      logreader parse access.log
      logreader parse access.log --format common --output json
      logreader parse access.log -f '%h %l %u %t "%r" %>s %b %D' --limit 20
      logreader parse huge.log --workers 0 --output json
    """
    parser = _resolve_parser(fmt)
    strict = strict or not settings.skip_invalid
    selected_fields = [f.strip() for f in fields.split(",") if f.strip()]
    entries_iter = _records(file, parser, strict, workers)

    if output_fmt == "json":
        count = 0
        for entry in entries_iter:
            if limit and count >= limit:
                break
            out = {k: entry[k] for k in selected_fields if k in entry} if selected_fields else entry
            click.echo(json.dumps(out, default=str))
            count += 1
        err_console.print(f"[dim]Parsed {count} entries from {file}[/dim]")
        return

    if output_fmt == "table":
        from .visualization.tables import print_entries_table

        collected: list[LogEntry] = []
        for entry in entries_iter:
            if limit and len(collected) >= limit:
                break
            collected.append(entry)

        if not collected:
            err_console.print("[yellow]No entries found.[/yellow]")
            return

        # Apache access log: skip the long free-text columns by default
        cols = selected_fields or [
            k for k in fields_for(parser.format)
            if k not in ("referer", "user-agent", "protocol")
        ]
        print_entries_table(collected, fields=cols, title=file.name, max_rows=len(collected), console=console)
        console.print(f"[dim]{len(collected)} entries from {file.name}[/dim]")
        return

    # stream (coloured one-line summaries)
    count = 0
    for entry in entries_iter:
        if limit and count >= limit:
            break
        console.print(_entry_line(entry))
        count += 1

    console.print(f"\n[dim]Parsed {count} entries from {file.name}[/dim]")


# ── stats ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--by", "-b", default="status", help="Field to count by.", show_default=True)
@click.option("--top", "-t", default=10, type=int, help="Show top N values.", show_default=True)
@_format_option
@click.option("--strict", is_flag=True, help="Abort on the first line that doesn't match the format.")
@click.option("--workers", "-w", default=1, type=int, help="Parallel workers (0 = LOGREADER_MAX_WORKERS).")
def stats(
    file: Path,
    by: str,
    top: int,
    fmt: str | None,
    strict: bool,
    workers: int,
) -> None:
    """Count records by a field value.

    \b
    Examples:
      logreader stats access.log
      logreader stats access.log --by ips --top 5
      logreader stats access.log --by user-agent
    """
    from .aggregators.counter import Counter
    from .visualization.tables import print_counter_table

    parser = _resolve_parser(fmt)
    strict = strict or not settings.skip_invalid
    counter = Counter(field=by)
    total = 0
    for entry in _records(file, parser, strict, workers):
        counter.add(entry)
        total += 1

    console.print(f"\n[bold]File:[/bold] {file.name}  [bold]Total entries:[/bold] {total}")
    print_counter_table(
        counter.top(top),
        title=f"Top {top} by '{by}'",
        value_col=by.title(),
        count_col="Count",
        console=console,
    )


# ── check ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_format_option
@click.option("--limit", "-n", default=20, type=int, help="Max rejected lines to list (0 = all).", show_default=True)
def check(file: Path, fmt: str | None, limit: int) -> None:
    """Report lines that don't match the format; exit 1 if there are any.

    \b
    Examples:
      logreader check access.log
      logreader check access.log --format common --limit 0
    """
    parser = _resolve_parser(fmt)
    checked = 0
    rejected: list[tuple[int, str]] = []

    for lineno, _raw, line in iter_lines(file):
        checked += 1
        try:
            parser.parse_line(line)
        except MatchError as exc:
            logger.debug("Line %d rejected: %s", lineno, exc)
            rejected.append((lineno, str(exc)))

    if not rejected:
        console.print(f"[green]All {checked} lines of {file.name} match the format.[/green]")
        return

    shown = rejected[:limit] if limit else rejected
    tbl = Table(title=f"Rejected lines in {file.name}", box=box.ROUNDED)
    tbl.add_column("Line", justify="right", style="cyan")
    tbl.add_column("Error", overflow="fold")
    for lineno, message in shown:
        tbl.add_row(str(lineno), escape(message))
    console.print(tbl)
    console.print(f"[red]{len(rejected)} of {checked} lines rejected[/red]")
    sys.exit(1)


if __name__ == "__main__":
    main()
