from imessage_export.sources.base import Message, Thread
from imessage_export.sources.apple_time import apple_to_datetime, datetime_to_apple
from imessage_export.sources.imessage import (
    ChatDatabase,
    ChatDatabaseError,
    OpenError,
    QueryError,
    open_chat_db,
)

__all__ = [
    "Message",
    "Thread",
    "apple_to_datetime",
    "datetime_to_apple",
    "ChatDatabase",
    "ChatDatabaseError",
    "OpenError",
    "QueryError",
    "open_chat_db",
]
