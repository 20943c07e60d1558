"""Export configuration and date/time argument parsing."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / "Library" / "Messages" / "chat.db"
DB_PATH_ENV_VAR = "IMESSAGE_EXPORT_DB"

# Tried in order; user input is wall-clock time in the local timezone.
DATETIME_FORMATS = [
    "%m/%d/%Y %I:%M%p",   # 08/22/2025 12:00PM
    "%m/%d/%Y %I:%M %p",  # 08/22/2025 12:00 PM
    "%m/%d/%Y %H:%M",     # 08/22/2025 14:30
    "%Y-%m-%d %H:%M",     # 2025-08-22 14:30
    "%Y-%m-%d %I:%M%p",   # 2025-08-22 2:30PM
    "%Y-%m-%d %I:%M %p",  # 2025-08-22 2:30 PM
    "%Y-%m-%d",           # 2025-08-22
    "%m/%d/%Y",           # 08/22/2025
]


@dataclass
class ExportConfig:
    """Settings for one CLI invocation."""

    db_path: Path
    output_dir: Path
    include_guid: bool = False


def resolve_db_path(cli_arg: Optional[str]) -> Path:
    """Resolve the chat.db path from CLI arg, env var, or default.

    Priority:
    1. --db CLI argument
    2. IMESSAGE_EXPORT_DB environment variable
    3. ~/Library/Messages/chat.db
    """
    if cli_arg:
        return Path(cli_arg).expanduser()

    env_path = os.environ.get(DB_PATH_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    return DEFAULT_DB_PATH


def resolve_output_dir(cli_arg: Optional[str]) -> Path:
    if cli_arg:
        return Path(cli_arg).expanduser()
    return Path.cwd()


def parse_datetime(value: str, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Parse a user-supplied date/time in one of DATETIME_FORMATS.

    Returns an aware datetime in ``tz`` (local timezone by default), or
    None if no format matches. Date-only input means midnight.
    """
    text = " ".join(value.split())
    for fmt in DATETIME_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        if tz is not None:
            return parsed.replace(tzinfo=tz)
        return parsed.astimezone()

    logger.debug("No date format matched %r", value)
    return None
