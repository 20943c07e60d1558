"""iMessage reader — read-only access to macOS Messages chat.db.

Handles:
- Immutable read-only connections (Messages.app may hold the file open
  with its own WAL, so we must never write or checkpoint)
- Thread enumeration with group chat participant resolution
- Per-thread message retrieval with optional date bounds
- attributedBody decoding (typedstream format) for messages where text is NULL
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from typedstream.stream import TypedStreamReader

from imessage_export.sources.apple_time import apple_to_datetime, datetime_to_apple
from imessage_export.sources.base import Message, Thread

logger = logging.getLogger(__name__)

_THREADS_QUERY = """
    SELECT
        c.ROWID,
        c.guid,
        c.display_name,
        GROUP_CONCAT(h.id, ', ') AS participants
    FROM chat c
    LEFT JOIN chat_handle_join chj ON c.ROWID = chj.chat_id
    LEFT JOIN handle h ON chj.handle_id = h.ROWID
    GROUP BY c.ROWID
    ORDER BY c.ROWID DESC
"""

_MESSAGES_QUERY = """
    SELECT
        m.ROWID,
        m.guid,
        m.text,
        m.attributedBody,
        m.date,
        m.is_from_me,
        h.id AS sender
    FROM message m
    JOIN chat_message_join cmj ON m.ROWID = cmj.message_id
    LEFT JOIN handle h ON m.handle_id = h.ROWID
    WHERE cmj.chat_id = ?
"""


class ChatDatabaseError(Exception):
    """Base error for chat.db access."""

    prefix = "Database error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class OpenError(ChatDatabaseError):
    """chat.db could not be opened read-only."""

    prefix = "Failed to open database"


class QueryError(ChatDatabaseError):
    """A query against chat.db could not be prepared or executed."""

    prefix = "Query failed"


@dataclass(frozen=True)
class MessageQuery:
    """Parameters for one message fetch; bounds are raw nanosecond dates."""

    thread_id: int
    start: Optional[int] = None
    end: Optional[int] = None

    def to_sql(self) -> Tuple[str, Tuple[int, ...]]:
        sql = _MESSAGES_QUERY
        params: Tuple[int, ...] = (self.thread_id,)
        if self.start is not None:
            sql += "  AND m.date >= ?\n"
            params += (self.start,)
        if self.end is not None:
            sql += "  AND m.date <= ?\n"
            params += (self.end,)
        sql += "ORDER BY m.date ASC"
        return sql, params


def _row_val(row, key, default=""):
    try:
        val = row[key]
        return val if val is not None else default
    except (IndexError, KeyError):
        return default


def _decode_attributed_body(blob: Optional[bytes]) -> Optional[str]:
    """Extract plain text from an attributedBody typedstream blob."""
    if not blob:
        return None
    try:
        for event in TypedStreamReader.from_data(blob):
            if isinstance(event, bytes):
                return event.decode("utf-8", errors="replace")
    except Exception as exc:
        logger.debug("attributedBody decode failed: %s", exc)
    return None


def _decode_date(row) -> datetime:
    raw = _row_val(row, "date", 0)
    try:
        return apple_to_datetime(raw)
    except OverflowError as exc:
        raise QueryError(f"message {row['ROWID']} has out-of-range date {raw}") from exc


def _split_participants(joined: str) -> List[str]:
    return [part.strip() for part in joined.split(",") if part.strip()]


class ChatDatabase:
    """An open, read-only, immutable connection to chat.db.

    Use as a context manager so the connection is closed on every exit
    path:

        with open_chat_db(path) as db:
            for thread in db.list_threads():
                ...
    """

    def __init__(self, conn: sqlite3.Connection, path: Path):
        self._conn: Optional[sqlite3.Connection] = conn
        self.path = path

    @property
    def closed(self) -> bool:
        return self._conn is None

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "ChatDatabase":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _fetchall(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        if self._conn is None:
            raise QueryError("database connection is closed")
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise QueryError(str(exc)) from exc

    def list_threads(self) -> List[Thread]:
        """All threads with their participants, highest ROWID first."""
        threads = []
        for row in self._fetchall(_THREADS_QUERY):
            threads.append(Thread(
                id=row["ROWID"],
                guid=_row_val(row, "guid"),
                display_name=_row_val(row, "display_name", None),
                participants=_split_participants(_row_val(row, "participants")),
            ))
        return threads

    def fetch_messages(
        self,
        thread_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Message]:
        """Messages of one thread in chronological order.

        ``start`` and ``end`` are inclusive and independent. An unknown
        thread or an empty range yields an empty list.
        """
        query = MessageQuery(
            thread_id=thread_id,
            start=datetime_to_apple(start) if start is not None else None,
            end=datetime_to_apple(end) if end is not None else None,
        )
        sql, params = query.to_sql()

        messages = []
        for row in self._fetchall(sql, params):
            text = _row_val(row, "text", None)
            if not text:
                text = _decode_attributed_body(_row_val(row, "attributedBody", None))
            is_from_me = bool(_row_val(row, "is_from_me", 0))
            messages.append(Message(
                id=row["ROWID"],
                guid=_row_val(row, "guid"),
                text=text,
                timestamp=_decode_date(row),
                is_from_me=is_from_me,
                sender=None if is_from_me else _row_val(row, "sender", None),
            ))
        return messages


def open_chat_db(path: Union[str, Path]) -> ChatDatabase:
    """Open chat.db read-only and immutable.

    Raises OpenError if the file cannot be opened. The schema is not
    checked here; a mismatch surfaces as QueryError on the first query.
    """
    db_path = Path(path).expanduser()
    uri = f"{db_path.resolve().as_uri()}?mode=ro&immutable=1"
    try:
        conn = sqlite3.connect(uri, uri=True)
    except sqlite3.Error as exc:
        raise OpenError(str(exc)) from exc
    conn.row_factory = sqlite3.Row
    return ChatDatabase(conn, db_path)
