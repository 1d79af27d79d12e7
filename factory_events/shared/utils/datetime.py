"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

import math
from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Use this instead of:
        - datetime.now() - naive, uses local timezone
        - datetime.utcnow() - naive, deprecated in Python 3.12

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository/persistence boundaries to normalize datetimes
    (SQLite hands back naive values for DateTime(timezone=True) columns).

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume it's UTC and attach timezone
        return dt.replace(tzinfo=UTC)

    # Aware datetime - convert to UTC
    return dt.astimezone(UTC)


def parse_instant(value: object) -> datetime | None:
    """
    Parse an ISO-8601 string, epoch milliseconds or datetime into a UTC-aware datetime.

    A trailing 'Z' is accepted; naive values are read as UTC, the same way
    frontends usually send them. Numbers (int or float, not bool) are
    milliseconds since the Unix epoch. Anything else returns None, as do
    instants that fall outside the representable datetime range once
    converted to UTC.

    Args:
        value: Raw value from a client payload

    Returns:
        UTC-aware datetime, or None when the value is not a valid instant
    """
    try:
        if isinstance(value, datetime):
            return ensure_utc(value)
        if isinstance(value, bool):
            return None
        if isinstance(value, int | float):
            if not math.isfinite(value):
                return None
            return datetime.fromtimestamp(value / 1000, UTC)
        if not isinstance(value, str):
            return None
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return ensure_utc(datetime.fromisoformat(text))
    except (ValueError, OverflowError, OSError):
        return None


def to_iso(dt: datetime) -> str:
    """
    Canonical ISO-8601 form of an instant: UTC, microsecond precision, 'Z' suffix.

    Two spellings of the same instant ('...T10:00:00Z', '...T12:00:00+02:00')
    produce the same string.
    """
    utc = ensure_utc(dt) or dt
    return utc.replace(tzinfo=None).isoformat(timespec="microseconds") + "Z"
