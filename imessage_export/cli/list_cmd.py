"""CLI command for listing conversation threads."""

from __future__ import annotations

import logging
import sys

import click
from rich.markup import escape

from imessage_export.cli.common import console, open_or_exit
from imessage_export.config import ExportConfig
from imessage_export.sources.imessage import QueryError

logger = logging.getLogger(__name__)


@click.command("list")
@click.option("--include-guid", is_flag=True, help="Show thread GUIDs (for debugging)")
@click.pass_obj
def list_threads(config: ExportConfig, include_guid: bool):
    """List all conversation threads, newest first.

    \b
    Examples:
        imessage-export list
        imessage-export --db ~/Desktop/chat.db list --include-guid
    """
    config.include_guid = include_guid

    with open_or_exit(config) as db:
        try:
            threads = db.list_threads()
        except QueryError as exc:
            console.print(f"[red]{escape(str(exc))}[/red]")
            sys.exit(1)
        logger.debug("Listed %d threads from %s", len(threads), db.path)

    console.print("\n[bold]=== Conversation Threads ===[/bold]\n")
    for thread in threads:
        console.print(f"ID: {thread.id}", highlight=False)
        console.print(f"Title: {thread.title}", markup=False, highlight=False)
        if config.include_guid:
            console.print(f"GUID: {thread.guid}", markup=False, highlight=False)
        console.print("---")

    console.print(f"\nTotal: {len(threads)} threads", highlight=False)
