"""Shared fixtures: a small chat.db with the Messages schema subset."""
import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

APPLE_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)

SCHEMA = """
CREATE TABLE handle (ROWID INTEGER PRIMARY KEY, id TEXT NOT NULL);
CREATE TABLE chat (ROWID INTEGER PRIMARY KEY, guid TEXT NOT NULL, display_name TEXT);
CREATE TABLE chat_handle_join (chat_id INTEGER, handle_id INTEGER);
CREATE TABLE message (
    ROWID INTEGER PRIMARY KEY,
    guid TEXT NOT NULL,
    text TEXT,
    attributedBody BLOB,
    handle_id INTEGER DEFAULT 0,
    date INTEGER,
    is_from_me INTEGER DEFAULT 0
);
CREATE TABLE chat_message_join (chat_id INTEGER, message_id INTEGER);
"""


def ns(dt):
    """Nanoseconds since 2001-01-01 for an aware datetime."""
    delta = dt - APPLE_EPOCH
    return (delta.days * 86400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1000


# Three messages in the "Team" chat, one minute apart.
T1 = datetime(2025, 8, 22, 12, 0, tzinfo=timezone.utc)
T2 = T1 + timedelta(minutes=1)
T3 = T1 + timedelta(minutes=2)

HANDLES = [(1, "+15551234567"), (2, "bob@example.com")]
CHATS = [
    (1, "iMessage;-;+15551234567", None),
    (2, "iMessage;+;chat100", "Team"),
    (3, "iMessage;-;empty", ""),
]
CHAT_HANDLES = [(1, 1), (2, 1), (2, 2)]
MESSAGES = [
    # rowid, guid, text, attributedBody, handle_id, date, is_from_me
    (10, "msg-10", "hey there", None, 1, ns(T1 - timedelta(days=1)), 0),
    (20, "msg-20", "third", None, 2, ns(T3), 0),
    (21, "msg-21", "first", None, 1, ns(T1), 0),
    (22, "msg-22", "second", None, 0, ns(T2), 1),
    (23, "msg-23", None, None, 2, ns(T3 + timedelta(minutes=1)), 0),
]
CHAT_MESSAGES = [(1, 10), (2, 20), (2, 21), (2, 22), (2, 23)]


def build_chat_db(path, messages=MESSAGES, chat_messages=CHAT_MESSAGES, chats=CHATS):
    conn = sqlite3.connect(path)
    conn.executescript(SCHEMA)
    conn.executemany("INSERT INTO handle VALUES (?, ?)", HANDLES)
    conn.executemany("INSERT INTO chat VALUES (?, ?, ?)", chats)
    conn.executemany("INSERT INTO chat_handle_join VALUES (?, ?)", CHAT_HANDLES)
    conn.executemany("INSERT INTO message VALUES (?, ?, ?, ?, ?, ?, ?)", messages)
    conn.executemany("INSERT INTO chat_message_join VALUES (?, ?)", chat_messages)
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def chat_db_path(tmp_path):
    return build_chat_db(tmp_path / "chat.db")

# NSAttributedString typedstream whose only string is "hello".
ATTRIBUTED_HELLO = (
    b"\x04\x0bstreamtyped\x81\xe8\x03\x84\x01@\x84\x84\x84\x12NSAttributedString\x00"
    b"\x84\x84\x08NSObject\x00\x85\x92\x84\x84\x84\x08NSString\x01\x94\x84\x01+\x05hello\x86"
    b"\x84\x02iI\x01\x05\x92\x84\x84\x84\x0cNSDictionary\x00\x94\x84\x01i\x00\x86\x86"
)
