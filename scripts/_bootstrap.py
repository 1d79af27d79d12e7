"""Shared setup for the maintenance scripts: .env loading and service wiring.

Run scripts as modules from the project root (python -m scripts.<name>)
so factory_events and this module are importable.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession

from factory_events.application.services.event_validator import EventValidator
from factory_events.application.services.hash_service import HashService
from factory_events.application.use_cases.events import EventIngestionService
from factory_events.core.config import get_settings
from factory_events.infrastructure.persistence.repositories import EventRepository
from factory_events.shared.utils.clock import MonotonicClock


def project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_* when run as script."""
    load_dotenv(project_root() / ".env", override=True)
    get_settings.cache_clear()


def build_ingestion_service(
    session: AsyncSession, clock: MonotonicClock
) -> EventIngestionService:
    """EventIngestionService bound to one session (one transaction per batch)."""
    return EventIngestionService(
        event_repo=EventRepository(session),
        validator=EventValidator(get_settings().future_event_horizon),
        hash_service=HashService(),
        clock=clock,
    )
