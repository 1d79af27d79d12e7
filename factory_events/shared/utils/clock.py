"""Server clock used to stamp receivedTime on ingested events."""

import threading
from collections.abc import Callable
from datetime import datetime, timedelta

from factory_events.shared.utils.datetime import ensure_utc, utc_now

_TICK = timedelta(microseconds=1)


class MonotonicClock:
    """Strictly increasing UTC clock for one process.

    Each call to now() returns a value greater than every value returned
    before it, even when the wall clock has not advanced (coarse timer) or
    has stepped backward (NTP adjustment). The step is one microsecond, the
    finest resolution both SQLite and PostgreSQL store.

    Thread-safe; shared by all ingestion calls in the process.
    """

    def __init__(self, source: Callable[[], datetime] = utc_now) -> None:
        self._source = source
        self._last: datetime | None = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        """Return the next UTC instant."""
        with self._lock:
            raw = self._source()
            current = ensure_utc(raw) or raw
            if self._last is not None and current <= self._last:
                current = self._last + _TICK
            self._last = current
            return current
