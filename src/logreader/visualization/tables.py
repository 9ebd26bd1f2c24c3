"""Rich-powered table rendering for parsed access-log records."""
from __future__ import annotations

from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

_console = Console()


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return escape(", ".join(str(v) for v in value))
    return escape(str(value))


def print_entries_table(
    entries: list[dict[str, Any]],
    fields: list[str] | None = None,
    title: str = "Log Entries",
    max_rows: int = 100,
    console: Console | None = None,
) -> None:
    """Render records as a Rich table.

    Args:
        entries:   List of parsed records.
        fields:    Columns to display. Defaults to all keys found in the
                   first entry.
        title:     Table title shown in the header.
        max_rows:  Hard cap — large streams are truncated with a notice.
        console:   Console to print to (default: stdout).
    """
    out = console or _console
    if not entries:
        out.print("[yellow]No entries to display.[/yellow]")
        return

    cols = fields or list(entries[0].keys())
    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    for col in cols:
        table.add_column(col, overflow="fold", max_width=60)

    shown = entries[:max_rows]
    for entry in shown:
        status = entry.get("status")
        style = ""
        if isinstance(status, int):
            style = "red" if status >= 500 else "yellow" if status >= 400 else ""
        table.add_row(*[_cell(entry.get(c)) for c in cols], style=style)

    out.print(table)
    if len(entries) > max_rows:
        out.print(
            f"[dim]... and {len(entries) - max_rows} more rows (use --limit to adjust)[/dim]"
        )


def print_counter_table(
    counts: list[tuple[str, int]],
    title: str = "Top values",
    value_col: str = "Value",
    count_col: str = "Count",
    console: Console | None = None,
) -> None:
    """Render a Counter.top() result as a Rich table."""
    out = console or _console
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("#", style="dim", width=4)
    table.add_column(value_col)
    table.add_column(count_col, justify="right", style="cyan")

    for rank, (value, count) in enumerate(counts, start=1):
        table.add_row(str(rank), escape(value), str(count))

    out.print(table)
