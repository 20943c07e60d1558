"""iMessage Export CLI — export macOS Messages threads as plain-text transcripts."""

from typing import Optional

import click

from imessage_export.cli.common import setup_logging
from imessage_export.cli.export_cmd import export
from imessage_export.cli.list_cmd import list_threads
from imessage_export.config import ExportConfig, resolve_db_path, resolve_output_dir


@click.group()
@click.option("--db", "db_path", default=None,
              help="Path to chat.db (default: $IMESSAGE_EXPORT_DB or ~/Library/Messages/chat.db)")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, db_path: Optional[str], verbose: bool):
    """iMessage Export — read-only export of Messages conversations.

    \b
    Examples:
        imessage-export list
        imessage-export export --thread 5 --start 2024-01-01 --end 2024-12-31
        imessage-export export --all --output ~/Documents/MessageExports
    """
    setup_logging(verbose)
    ctx.obj = ExportConfig(
        db_path=resolve_db_path(db_path),
        output_dir=resolve_output_dir(None),
    )


cli.add_command(list_threads)
cli.add_command(export)


if __name__ == "__main__":
    cli()
