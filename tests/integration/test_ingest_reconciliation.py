"""End-to-end reconciliation and aggregation against a per-test SQLite database.

Each batch runs in its own session and transaction, as it does behind the
HTTP endpoint.
"""

import asyncio
from datetime import timedelta, timezone
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from factory_events.application.dtos.batch import BatchResult
from factory_events.application.dtos.event import EventToPersist
from factory_events.application.services.event_validator import EventValidator
from factory_events.application.services.hash_service import HashService
from factory_events.application.use_cases.analytics import AnalyticsService
from factory_events.application.use_cases.events import EventIngestionService
from factory_events.domain.enums import MachineHealth
from factory_events.domain.exceptions import EventStoreException
from factory_events.infrastructure.persistence.database import transactional_session
from factory_events.infrastructure.persistence.repositories import EventRepository
from factory_events.shared.utils.clock import MonotonicClock
from factory_events.shared.utils.datetime import to_iso, utc_now

# Event times sit safely in the past so the future-horizon rule never interferes.
T0 = utc_now().replace(minute=0, second=0, microsecond=0) - timedelta(hours=3)


def _raw(event_id: str, minutes: float = 0, **overrides: Any) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "eventId": event_id,
        "eventTime": to_iso(T0 + timedelta(minutes=minutes)),
        "machineId": "M-001",
        "lineId": "LINE-A",
        "factoryId": "F01",
        "durationMs": 4000,
        "defectCount": 0,
    }
    raw.update(overrides)
    return raw


class FailingRepository(EventRepository):
    """Real repository whose Nth insert hits a storage fault."""

    def __init__(self, db: AsyncSession, fail_on_insert: int) -> None:
        super().__init__(db)
        self.fail_on_insert = fail_on_insert
        self.inserts = 0

    async def insert_event(self, event: EventToPersist) -> bool:
        self.inserts += 1
        if self.inserts == self.fail_on_insert:
            raise EventStoreException("insert_event", "disk I/O error")
        return await super().insert_event(event)


@pytest.fixture
def clock() -> MonotonicClock:
    return MonotonicClock()


@pytest.fixture
def ingest(session_factory: async_sessionmaker[AsyncSession], clock: MonotonicClock):
    """Run one batch in its own transaction, like one HTTP request."""

    async def _ingest(batch: list[Any]) -> BatchResult:
        async with transactional_session(session_factory) as session:
            svc = EventIngestionService(
                event_repo=EventRepository(session),
                validator=EventValidator(timedelta(minutes=15)),
                hash_service=HashService(),
                clock=clock,
            )
            return await svc.process_batch(batch)

    return _ingest


async def _stored(session_factory, event_id: str):
    async with session_factory() as session:
        return await EventRepository(session).get_by_event_id(event_id)


async def _count(session_factory) -> int:
    async with session_factory() as session:
        return await EventRepository(session).count_events()


async def test_resend_is_idempotent(ingest, session_factory) -> None:
    first = await ingest([_raw("E-1")])
    second = await ingest([_raw("E-1")])

    assert (first.accepted, first.deduped) == (1, 0)
    assert (second.accepted, second.deduped, second.updated) == (0, 1, 0)
    assert await _count(session_factory) == 1


async def test_resend_with_other_offset_spelling_is_deduped(ingest) -> None:
    await ingest([_raw("E-1")])
    same_instant = T0.astimezone(timezone(timedelta(hours=2))).isoformat()

    result = await ingest([_raw("E-1", eventTime=same_instant)])

    assert result.deduped == 1


async def test_later_differing_payload_wins(ingest, session_factory) -> None:
    await ingest([_raw("E-1", defectCount=1)])
    before = await _stored(session_factory, "E-1")

    result = await ingest([_raw("E-1", defectCount=4, lineId="LINE-B")])

    assert (result.updated, result.deduped, result.accepted) == (1, 0, 0)
    after = await _stored(session_factory, "E-1")
    assert after.defect_count == 4
    assert after.line_id == "LINE-B"
    assert after.received_time > before.received_time
    assert after.payload_hash != before.payload_hash


async def test_same_event_twice_in_one_batch(ingest, session_factory) -> None:
    result = await ingest([_raw("E-1", defectCount=1), _raw("E-1", defectCount=2)])

    assert (result.accepted, result.updated) == (1, 1)
    assert (await _stored(session_factory, "E-1")).defect_count == 2


async def test_mixed_batch_counts(ingest) -> None:
    await ingest([_raw("E-1"), _raw("E-2")])

    result = await ingest(
        [
            _raw("E-1"),
            _raw("E-2", defectCount=7),
            _raw("E-3"),
            _raw("E-4", durationMs=-100),
            _raw("E-5", eventTime=to_iso(utc_now() + timedelta(minutes=20))),
        ]
    )

    assert (result.accepted, result.deduped, result.updated, result.rejected) == (1, 1, 1, 2)
    assert [(r.event_id, r.reason.value) for r in result.rejections] == [
        ("E-4", "INVALID_DURATION"),
        ("E-5", "FUTURE_EVENT_TIME"),
    ]


async def test_unstorable_records_are_rejected_without_losing_the_batch(
    ingest, session_factory
) -> None:
    result = await ingest(
        [
            _raw("ok-1"),
            _raw("E-early", eventTime="0001-01-01T00:00:00+01:00"),
            _raw("E-late", eventTime="9999-12-31T23:59:59-01:00"),
            _raw("E-huge", defectCount=2**63),
            _raw("E-float", defectCount=1e20),
        ]
    )

    assert (result.accepted, result.rejected) == (1, 4)
    assert [(r.event_id, r.reason.value) for r in result.rejections] == [
        ("E-early", "INVALID_EVENT_TIME_FORMAT"),
        ("E-late", "INVALID_EVENT_TIME_FORMAT"),
        ("E-huge", "MISSING_DEFECT_COUNT"),
        ("E-float", "MISSING_DEFECT_COUNT"),
    ]
    assert await _count(session_factory) == 1


async def test_large_defect_count_is_stored(ingest, session_factory) -> None:
    result = await ingest([_raw("E-1", defectCount=3_000_000_000)])

    assert result.accepted == 1
    assert (await _stored(session_factory, "E-1")).defect_count == 3_000_000_000


async def test_epoch_millis_event_time_dedupes_against_iso(ingest) -> None:
    first = await ingest([_raw("E-1", eventTime=int(T0.timestamp() * 1000))])
    second = await ingest([_raw("E-1")])

    assert first.accepted == 1
    assert second.deduped == 1


async def test_storage_fault_rolls_back_whole_batch(session_factory, clock) -> None:
    with pytest.raises(EventStoreException):
        async with transactional_session(session_factory) as session:
            svc = EventIngestionService(
                event_repo=FailingRepository(session, fail_on_insert=3),
                validator=EventValidator(timedelta(minutes=15)),
                hash_service=HashService(),
                clock=clock,
            )
            await svc.process_batch([_raw(f"E-{i}") for i in range(5)])

    assert await _count(session_factory) == 0


async def test_concurrent_batches_of_distinct_events(ingest, session_factory) -> None:
    batches = [[_raw(f"E-{b}-{i}", minutes=i % 60) for i in range(100)] for b in range(10)]

    results = await asyncio.gather(*(ingest(batch) for batch in batches))

    assert sum(r.accepted for r in results) == 1000
    assert sum(r.deduped + r.updated + r.rejected for r in results) == 0
    assert await _count(session_factory) == 1000


async def test_concurrent_batches_of_the_same_events(ingest, session_factory) -> None:
    batch = [_raw(f"E-{i}") for i in range(100)]

    results = await asyncio.gather(*(ingest(list(batch)) for _ in range(10)))

    assert sum(r.accepted for r in results) == 100
    assert sum(r.deduped for r in results) == 900
    assert await _count(session_factory) == 100


async def test_machine_stats_after_ingest(ingest, session_factory) -> None:
    await ingest(
        [
            _raw("E-1", minutes=0, defectCount=5),
            _raw("E-2", minutes=10, defectCount=-1),
            _raw("E-3", minutes=20, defectCount=3),
            _raw("E-4", minutes=60, defectCount=9),
        ]
    )

    async with session_factory() as session:
        stats = await AnalyticsService(EventRepository(session)).get_machine_stats(
            "M-001", T0, T0 + timedelta(hours=1)
        )

    assert (stats.events_count, stats.defects_count) == (3, 8)
    assert stats.avg_defect_rate == 8.0
    assert stats.status is MachineHealth.WARNING


async def test_stats_read_does_not_wait_for_open_batch(ingest, session_factory, clock) -> None:
    await ingest([_raw("E-1", defectCount=2)])

    async with transactional_session(session_factory) as writer:
        svc = EventIngestionService(
            event_repo=EventRepository(writer),
            validator=EventValidator(timedelta(minutes=15)),
            hash_service=HashService(),
            clock=clock,
        )
        await svc.process_batch([_raw("E-2", defectCount=5)])

        async with session_factory() as reader:
            stats = await asyncio.wait_for(
                AnalyticsService(EventRepository(reader)).get_machine_stats(
                    "M-001", T0, T0 + timedelta(hours=1)
                ),
                timeout=5,
            )

    # Only the committed batch is visible to the reader.
    assert (stats.events_count, stats.defects_count) == (1, 2)
    assert await _count(session_factory) == 2


async def test_stats_reflect_update(ingest, session_factory) -> None:
    await ingest([_raw("E-1", defectCount=1)])
    await ingest([_raw("E-1", defectCount=-1)])

    async with session_factory() as session:
        stats = await AnalyticsService(EventRepository(session)).get_machine_stats(
            "M-001", T0, T0 + timedelta(hours=1)
        )

    assert (stats.events_count, stats.defects_count) == (1, 0)
    assert stats.status is MachineHealth.HEALTHY


async def test_top_defect_lines_after_ingest(ingest, session_factory) -> None:
    await ingest(
        [
            _raw("E-1", lineId="LINE-A", defectCount=10),
            _raw("E-2", lineId="LINE-A", defectCount=8),
            _raw("E-3", lineId="LINE-B", defectCount=5),
            _raw("E-4", lineId=None, defectCount=40),
            _raw("E-5", factoryId="F02", lineId="LINE-X", defectCount=99),
        ]
    )

    async with session_factory() as session:
        lines = await AnalyticsService(EventRepository(session)).get_top_defect_lines(
            "F01", T0, T0 + timedelta(hours=1), 10
        )

    assert [(x.line_id, x.event_count, x.total_defects, x.defects_percent) for x in lines] == [
        ("LINE-A", 2, 18, 900.0),
        ("LINE-B", 1, 5, 500.0),
    ]
