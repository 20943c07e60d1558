"""Thread and message snapshots read from the Messages store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

PARTICIPANT_SEPARATOR = ", "


@dataclass(frozen=True)
class Thread:
    """A conversation (one row of the ``chat`` table).

    Participants are handle identifiers (phone numbers or emails) in the
    order the store reports them.
    """

    id: int
    guid: str
    display_name: Optional[str] = None
    participants: List[str] = field(default_factory=list)

    @property
    def title(self) -> str:
        if self.display_name:
            return self.display_name
        return PARTICIPANT_SEPARATOR.join(self.participants)


@dataclass(frozen=True)
class Message:
    """A single message belonging to one thread."""

    id: int
    guid: str
    text: Optional[str]
    timestamp: datetime
    is_from_me: bool = False
    sender: Optional[str] = None

    @property
    def display_text(self) -> str:
        return self.text or ""

    @property
    def sender_display(self) -> str:
        if self.is_from_me:
            return "Me"
        return self.sender or "Unknown"
