"""Helpers shared by the CLI commands."""

from __future__ import annotations

import logging
import sys
from datetime import datetime

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from imessage_export.config import ExportConfig, parse_datetime
from imessage_export.sources.imessage import ChatDatabase, OpenError, open_chat_db

console = Console()


class DateTimeParam(click.ParamType):
    """Click type accepting any of the supported date/time formats."""

    name = "datetime"

    def convert(self, value, param, ctx) -> datetime:
        if isinstance(value, datetime):
            return value
        parsed = parse_datetime(value)
        if parsed is None:
            self.fail(
                f"{value!r} is not a recognized date/time "
                "(try 2025-08-22, 2025-08-22 14:30 or 08/22/2025 2:30PM)",
                param,
                ctx,
            )
        return parsed


DATETIME = DateTimeParam()


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def open_or_exit(config: ExportConfig) -> ChatDatabase:
    """Open chat.db or print a Full Disk Access hint and exit."""
    try:
        return open_chat_db(config.db_path)
    except OpenError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        console.print(f"Cannot read {escape(str(config.db_path))}", highlight=False, soft_wrap=True)
        console.print("Make sure Terminal (or this app) has Full Disk Access:")
        console.print("[dim]System Settings > Privacy & Security > Full Disk Access[/dim]")
        sys.exit(1)
