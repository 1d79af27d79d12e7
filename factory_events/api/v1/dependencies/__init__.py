"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions and application use cases.
Routes depend only on these dependencies, not on infrastructure directly.
"""

from factory_events.api.v1.dependencies.analytics import get_analytics_service
from factory_events.api.v1.dependencies.events import (
    get_clock,
    get_event_ingestion_service,
    get_event_repo,
    get_event_validator,
)

__all__ = [
    "get_analytics_service",
    "get_clock",
    "get_event_ingestion_service",
    "get_event_repo",
    "get_event_validator",
]
