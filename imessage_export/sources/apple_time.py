"""Conversion between Messages timestamps and calendar time.

chat.db stores ``message.date`` relative to Apple's reference date
(2001-01-01 UTC). Older macOS versions wrote whole seconds; newer ones
write nanoseconds, with nothing in the schema saying which. We tell them
apart by magnitude: seconds-since-2001 for any realistic date stay far
below 10^12, nanosecond values are far above it.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

APPLE_EPOCH_OFFSET = 978307200  # seconds from 1970-01-01 to 2001-01-01
APPLE_EPOCH = datetime.fromtimestamp(APPLE_EPOCH_OFFSET, tz=timezone.utc)

NANOSECOND_THRESHOLD = 1_000_000_000_000
NANOS_PER_SECOND = 1_000_000_000
_NANOS_PER_MICRO = 1_000


def uses_nanoseconds(raw: int) -> bool:
    """True if a raw ``message.date`` value is in nanoseconds."""
    return raw >= NANOSECOND_THRESHOLD


def apple_to_datetime(raw: int) -> datetime:
    """Decode a raw ``message.date`` value into an aware UTC datetime.

    Nanosecond values are floored to microseconds, the finest resolution
    ``datetime`` can hold.
    """
    if uses_nanoseconds(raw):
        return APPLE_EPOCH + timedelta(microseconds=raw // _NANOS_PER_MICRO)
    return APPLE_EPOCH + timedelta(seconds=raw)


def datetime_to_apple(dt: datetime) -> int:
    """Encode a datetime as nanoseconds since the Apple reference date.

    Always produces nanoseconds, so the result is only meaningful as a
    query bound against a store that uses nanosecond dates. Naive
    datetimes are taken as local time.
    """
    if dt.tzinfo is None:
        dt = dt.astimezone()
    delta = dt - APPLE_EPOCH
    whole_seconds = delta.days * 86400 + delta.seconds
    return whole_seconds * NANOS_PER_SECOND + delta.microseconds * _NANOS_PER_MICRO
