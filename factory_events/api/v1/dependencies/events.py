"""Event ingestion dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from factory_events.application.services.event_validator import EventValidator
from factory_events.application.services.hash_service import HashService
from factory_events.application.use_cases.events import EventIngestionService
from factory_events.core.config import get_settings
from factory_events.infrastructure.persistence.database import get_db, get_db_transactional
from factory_events.infrastructure.persistence.repositories import EventRepository
from factory_events.shared.utils.clock import MonotonicClock

# One clock per process so receivedTime stamps never repeat across requests.
_clock = MonotonicClock()


def get_clock() -> MonotonicClock:
    """Process-wide server clock."""
    return _clock


def get_event_validator() -> EventValidator:
    """Validator with the configured future-event horizon."""
    return EventValidator(get_settings().future_event_horizon)


async def get_event_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EventRepository:
    """Event repository on a read session."""
    return EventRepository(db)


async def get_event_ingestion_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    validator: Annotated[EventValidator, Depends(get_event_validator)],
    clock: Annotated[MonotonicClock, Depends(get_clock)],
) -> EventIngestionService:
    """Build EventIngestionService on one transaction for the whole batch."""
    return EventIngestionService(
        event_repo=EventRepository(db),
        validator=validator,
        hash_service=HashService(),
        clock=clock,
    )
