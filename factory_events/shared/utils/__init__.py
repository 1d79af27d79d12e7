"""Shared utilities: datetime and clock."""

from factory_events.shared.utils.clock import MonotonicClock
from factory_events.shared.utils.datetime import (
    ensure_utc,
    parse_instant,
    to_iso,
    utc_now,
)

__all__ = [
    "MonotonicClock",
    "utc_now",
    "ensure_utc",
    "parse_instant",
    "to_iso",
]
