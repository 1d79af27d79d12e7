"""Event repository. Unique on event_id; compare-and-set replace. Returns application DTOs.

All methods run inside the caller's session and transaction. Datetimes are
normalized to UTC on the way in and on the way out (SQLite stores them
without an offset).
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy import case, delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from factory_events.application.dtos.analytics import LineDefectTotals, MachineTotals
from factory_events.application.dtos.event import (
    EventResult,
    EventToPersist,
    StoredFingerprint,
)
from factory_events.domain.exceptions import EventStoreException
from factory_events.infrastructure.persistence.models.event import Event
from factory_events.shared.telemetry.logging import get_logger
from factory_events.shared.utils.datetime import ensure_utc

logger = get_logger(__name__)

# Postgres SQLSTATE for unique_violation.
_PG_UNIQUE_VIOLATION = "23505"

# Defects that count toward totals; the unknown sentinel (-1) contributes 0.
_KNOWN_DEFECTS = case((Event.defect_count >= 0, Event.defect_count), else_=0)


def _is_unique_violation(exc: IntegrityError) -> bool:
    """True when the IntegrityError comes from a unique constraint, on either backend."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == _PG_UNIQUE_VIOLATION:
        return True
    message = str(orig)
    return "UNIQUE constraint failed" in message or "duplicate key value" in message


def _event_to_result(e: Event) -> EventResult:
    """Map ORM Event to application EventResult."""
    return EventResult(
        event_id=e.event_id,
        event_time=ensure_utc(e.event_time),
        received_time=ensure_utc(e.received_time),
        machine_id=e.machine_id,
        line_id=e.line_id,
        factory_id=e.factory_id,
        duration_ms=e.duration_ms,
        defect_count=e.defect_count,
        payload_hash=e.payload_hash,
    )


def _row_values(event: EventToPersist) -> dict:
    return {
        "event_id": event.event_id,
        "event_time": ensure_utc(event.event_time),
        "received_time": ensure_utc(event.received_time),
        "machine_id": event.machine_id,
        "line_id": event.line_id,
        "factory_id": event.factory_id,
        "duration_ms": event.duration_ms,
        "defect_count": event.defect_count,
        "payload_hash": event.payload_hash,
    }


@asynccontextmanager
async def _store_errors(operation: str) -> AsyncIterator[None]:
    """Translate driver failures into EventStoreException."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Event store %s failed: %s", operation, e)
        raise EventStoreException(operation, str(e)) from e


class EventRepository:
    """SQL event store (IEventRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_fingerprint(self, event_id: str) -> StoredFingerprint | None:
        async with _store_errors("get_fingerprint"):
            result = await self.db.execute(
                select(Event.payload_hash, Event.received_time).where(
                    Event.event_id == event_id
                )
            )
            row = result.first()
        if row is None:
            return None
        return StoredFingerprint(
            payload_hash=row.payload_hash, received_time=ensure_utc(row.received_time)
        )

    async def insert_event(self, event: EventToPersist) -> bool:
        """Insert inside a savepoint so a losing race leaves the batch transaction usable."""
        try:
            async with self.db.begin_nested():
                await self.db.execute(insert(Event).values(**_row_values(event)))
        except IntegrityError as e:
            if _is_unique_violation(e):
                return False
            logger.error("Insert of event %s failed: %s", event.event_id, e)
            raise EventStoreException("insert_event", str(e)) from e
        except SQLAlchemyError as e:
            logger.error("Insert of event %s failed: %s", event.event_id, e)
            raise EventStoreException("insert_event", str(e)) from e
        return True

    async def replace_event(self, event: EventToPersist) -> bool:
        """Overwrite the stored row only if its received_time is strictly older."""
        received_time = ensure_utc(event.received_time)
        async with _store_errors("replace_event"):
            result = await self.db.execute(
                update(Event)
                .where(
                    Event.event_id == event.event_id,
                    Event.received_time < received_time,
                )
                .values(**_row_values(event))
                .execution_options(synchronize_session=False)
            )
        return result.rowcount > 0

    async def get_by_event_id(self, event_id: str) -> EventResult | None:
        async with _store_errors("get_by_event_id"):
            result = await self.db.execute(
                select(Event).where(Event.event_id == event_id)
            )
            row = result.scalar_one_or_none()
        return _event_to_result(row) if row else None

    async def get_machine_totals(
        self, machine_id: str, start: datetime, end: datetime
    ) -> MachineTotals:
        async with _store_errors("get_machine_totals"):
            result = await self.db.execute(
                select(
                    func.count(Event.id),
                    func.coalesce(func.sum(_KNOWN_DEFECTS), 0),
                ).where(
                    Event.machine_id == machine_id,
                    Event.event_time >= ensure_utc(start),
                    Event.event_time < ensure_utc(end),
                )
            )
            events_count, defects_count = result.one()
        return MachineTotals(
            events_count=int(events_count or 0), defects_count=int(defects_count or 0)
        )

    async def get_line_defect_totals(
        self, factory_id: str, start: datetime, end: datetime, limit: int
    ) -> list[LineDefectTotals]:
        total_defects = func.coalesce(func.sum(_KNOWN_DEFECTS), 0).label("total_defects")
        event_count = func.count(Event.id).label("event_count")
        async with _store_errors("get_line_defect_totals"):
            result = await self.db.execute(
                select(Event.line_id, event_count, total_defects)
                .where(
                    Event.factory_id == factory_id,
                    Event.line_id.is_not(None),
                    Event.event_time >= ensure_utc(start),
                    Event.event_time < ensure_utc(end),
                )
                .group_by(Event.line_id)
                .order_by(total_defects.desc(), Event.line_id.asc())
                .limit(limit)
            )
            rows = result.all()
        return [
            LineDefectTotals(
                line_id=row.line_id,
                event_count=int(row.event_count),
                total_defects=int(row.total_defects),
            )
            for row in rows
        ]

    async def count_events(self) -> int:
        async with _store_errors("count_events"):
            result = await self.db.execute(select(func.count(Event.id)))
            return int(result.scalar_one())

    async def delete_all(self) -> int:
        async with _store_errors("delete_all"):
            result = await self.db.execute(delete(Event))
        return result.rowcount or 0
