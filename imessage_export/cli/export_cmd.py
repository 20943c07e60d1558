"""CLI command for exporting threads as plain-text transcripts."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import List, Optional

import click
from rich.markup import escape

from imessage_export.cli.common import DATETIME, console, open_or_exit
from imessage_export.config import ExportConfig, resolve_output_dir
from imessage_export.export.transcript import write_transcript
from imessage_export.sources.base import Thread
from imessage_export.sources.imessage import ChatDatabase, QueryError

logger = logging.getLogger(__name__)


def _select_threads(
    threads: List[Thread],
    thread_id: Optional[int],
    export_all: bool,
) -> List[Thread]:
    if export_all:
        return threads
    selected = [t for t in threads if t.id == thread_id]
    if not selected:
        console.print(f"[red]Thread with ID {thread_id} not found[/red]")
        sys.exit(1)
    return selected


def _export_threads(
    db: ChatDatabase,
    config: ExportConfig,
    threads: List[Thread],
    start: Optional[datetime],
    end: Optional[datetime],
) -> int:
    """Export each thread; returns the number of transcripts written."""
    written = 0
    for thread in threads:
        console.print(f"Exporting: {thread.title}...", markup=False, highlight=False)

        messages = db.fetch_messages(thread.id, start=start, end=end)
        if not messages:
            console.print("  [dim]No messages found in date range[/dim]")
            continue

        path = write_transcript(
            thread, messages, config.output_dir, include_guid=config.include_guid,
        )
        console.print(
            f"  [green]✓[/green] Exported {len(messages)} messages to {escape(str(path))}",
            highlight=False,
            soft_wrap=True,
        )
        written += 1
    return written


@click.command("export")
@click.option("--thread", "thread_id", type=int, default=None, help="Export a specific thread by ID")
@click.option("--all", "export_all", is_flag=True, help="Export all threads")
@click.option("--start", type=DATETIME, default=None,
              help="Start date/time, inclusive (local timezone)")
@click.option("--end", type=DATETIME, default=None,
              help="End date/time, inclusive (local timezone)")
@click.option("--output", "output", default=None,
              help="Output directory (default: current directory)")
@click.option("--include-guid", is_flag=True, help="Include thread and message GUIDs")
@click.pass_obj
def export(
    config: ExportConfig,
    thread_id: Optional[int],
    export_all: bool,
    start: Optional[datetime],
    end: Optional[datetime],
    output: Optional[str],
    include_guid: bool,
):
    """Export one thread or all threads as plain-text transcripts.

    \b
    Date/time formats (interpreted in your local timezone):
        MM/dd/yyyy h:mma      08/22/2025 12:00PM
        MM/dd/yyyy HH:mm      08/22/2025 14:30
        yyyy-MM-dd HH:mm      2025-08-22 14:30
        yyyy-MM-dd h:mma      2025-08-22 2:30PM
        yyyy-MM-dd            2025-08-22 (00:00:00)
        MM/dd/yyyy            08/22/2025 (00:00:00)

    \b
    Examples:
        imessage-export export --thread 5 --start 2024-01-01 --end 2024-12-31 --output ~/Desktop
        imessage-export export --thread 5 --start "08/22/2025 12:00PM" --end "08/25/2025 2:00PM"
        imessage-export export --all --output ~/Documents/MessageExports
    """
    if thread_id is None and not export_all:
        raise click.UsageError("Pass --thread <id> or --all.")
    if thread_id is not None and export_all:
        raise click.UsageError("--thread and --all are mutually exclusive.")
    if start and end and start > end:
        raise click.UsageError("--start must not be after --end.")

    config.output_dir = resolve_output_dir(output)
    config.include_guid = include_guid

    with open_or_exit(config) as db:
        try:
            threads = _select_threads(db.list_threads(), thread_id, export_all)
            config.output_dir.mkdir(parents=True, exist_ok=True)
            written = _export_threads(db, config, threads, start, end)
        except QueryError as exc:
            console.print(f"[red]{escape(str(exc))}[/red]")
            sys.exit(1)
        except OSError as exc:
            console.print(f"[red]Export failed:[/red] {escape(str(exc))}", highlight=False)
            sys.exit(1)

    logger.debug("Wrote %d of %d transcripts to %s", written, len(threads), config.output_dir)
    console.print("\n[bold]Export complete![/bold]")
