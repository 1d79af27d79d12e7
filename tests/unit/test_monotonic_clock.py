"""Tests for MonotonicClock and the UTC datetime helpers."""

from datetime import UTC, datetime, timedelta, timezone

from factory_events.shared.utils.clock import MonotonicClock
from factory_events.shared.utils.datetime import ensure_utc, parse_instant, to_iso

T0 = datetime(2026, 1, 15, 10, 0, 0, tzinfo=UTC)


def test_clock_strictly_increasing_when_source_frozen() -> None:
    """A wall clock that does not advance still yields increasing stamps."""
    clock = MonotonicClock(source=lambda: T0)
    stamps = [clock.now() for _ in range(5)]
    assert stamps[0] == T0
    assert all(b > a for a, b in zip(stamps, stamps[1:]))
    assert stamps[-1] - stamps[0] == timedelta(microseconds=4)


def test_clock_survives_backward_step() -> None:
    """A wall clock stepping backward does not move the stamps backward."""
    values = iter([T0, T0 - timedelta(seconds=5), T0 + timedelta(seconds=1)])
    clock = MonotonicClock(source=lambda: next(values))
    first, second, third = clock.now(), clock.now(), clock.now()
    assert second == first + timedelta(microseconds=1)
    assert third == T0 + timedelta(seconds=1)


def test_clock_returns_utc() -> None:
    plus_two = timezone(timedelta(hours=2))
    clock = MonotonicClock(source=lambda: datetime(2026, 1, 15, 12, 0, tzinfo=plus_two))
    assert clock.now() == T0
    assert clock.now().utcoffset() == timedelta(0)


def test_default_clock_tracks_wall_time() -> None:
    before = datetime.now(UTC)
    stamp = MonotonicClock().now()
    assert stamp >= before
    assert stamp.tzinfo is not None


def test_ensure_utc_naive_and_aware() -> None:
    assert ensure_utc(None) is None
    assert ensure_utc(datetime(2026, 1, 15, 10, 0)) == T0
    plus_two = timezone(timedelta(hours=2))
    assert ensure_utc(datetime(2026, 1, 15, 12, 0, tzinfo=plus_two)) == T0


def test_parse_instant_accepts_z_and_offsets() -> None:
    assert parse_instant("2026-01-15T10:00:00Z") == T0
    assert parse_instant("2026-01-15T10:00:00.000Z") == T0
    assert parse_instant("2026-01-15T11:00:00+01:00") == T0
    assert parse_instant("2026-01-15T10:00:00") == T0
    assert parse_instant(T0) == T0


def test_parse_instant_rejects_garbage() -> None:
    assert parse_instant("yesterday") is None
    assert parse_instant("") is None
    assert parse_instant(None) is None
    assert parse_instant(True) is None
    assert parse_instant(float("inf")) is None


def test_parse_instant_reads_numbers_as_epoch_millis() -> None:
    assert parse_instant(int(T0.timestamp() * 1000)) == T0
    assert parse_instant(0) == datetime(1970, 1, 1, tzinfo=UTC)


def test_parse_instant_out_of_range_offsets_are_invalid() -> None:
    assert parse_instant("0001-01-01T00:00:00+01:00") is None
    assert parse_instant("9999-12-31T23:59:59-01:00") is None
    assert parse_instant(1e20) is None
    assert parse_instant("0001-01-01T00:00:00Z") == datetime(1, 1, 1, tzinfo=UTC)


def test_to_iso_canonical_form() -> None:
    assert to_iso(T0) == "2026-01-15T10:00:00.000000Z"
    plus_two = timezone(timedelta(hours=2))
    assert to_iso(datetime(2026, 1, 15, 12, 0, tzinfo=plus_two)) == to_iso(T0)
    assert to_iso(datetime(1, 1, 1, tzinfo=UTC)) == "0001-01-01T00:00:00.000000Z"
