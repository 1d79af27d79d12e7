"""Analytics dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from factory_events.application.use_cases.analytics import AnalyticsService
from factory_events.infrastructure.persistence.database import get_db
from factory_events.infrastructure.persistence.repositories import EventRepository


async def get_analytics_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AnalyticsService:
    """Build AnalyticsService (read-only session)."""
    return AnalyticsService(EventRepository(db))
