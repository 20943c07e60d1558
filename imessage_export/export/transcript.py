"""Render threads as plain-text transcripts and write them to disk."""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime, tzinfo
from pathlib import Path
from typing import List, Optional

from imessage_export.sources.base import Message, Thread

logger = logging.getLogger(__name__)

MAX_TITLE_CHARS = 50
RULE_WIDTH = 40


def safe_filename(thread: Thread) -> str:
    """Filename for a thread's transcript, e.g. ``Messages_Team_42.txt``."""
    title = thread.title.replace("/", "-").replace(":", "-")[:MAX_TITLE_CHARS]
    return f"Messages_{title}_{thread.id}.txt"


def format_timestamp(ts: datetime, tz: Optional[tzinfo] = None) -> str:
    """Medium date, short time: ``Aug 22, 2025 at 2:30 PM``."""
    local = ts.astimezone(tz)
    hour = local.hour % 12 or 12
    return f"{local:%b} {local.day}, {local.year} at {hour}:{local:%M} {local:%p}"


def render_transcript(
    thread: Thread,
    messages: List[Message],
    include_guid: bool = False,
    tz: Optional[tzinfo] = None,
) -> str:
    """Format a thread and its messages in the order given."""
    lines = [f"=== {thread.title} ==="]
    if include_guid:
        lines.append(f"Thread GUID: {thread.guid}")
    lines.append(f"Messages: {len(messages)}")
    lines.append("=" * RULE_WIDTH)
    lines.append("")

    for msg in messages:
        lines.append(f"[{format_timestamp(msg.timestamp, tz)}] {msg.sender_display}:")
        lines.append(msg.display_text)
        if include_guid:
            lines.append(f"  (GUID: {msg.guid})")
        lines.append("")

    return "\n".join(lines) + "\n"


def write_transcript(
    thread: Thread,
    messages: List[Message],
    output_dir: Path,
    include_guid: bool = False,
) -> Path:
    """Write a thread's transcript atomically and return its path."""
    output_path = output_dir / safe_filename(thread)
    content = render_transcript(thread, messages, include_guid=include_guid)

    fd, tmp_name = tempfile.mkstemp(dir=output_dir, prefix=".transcript-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        os.replace(tmp_name, output_path)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.debug("Wrote %d messages to %s", len(messages), output_path)
    return output_path
