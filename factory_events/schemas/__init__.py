"""API request/response schemas (pydantic)."""

from factory_events.schemas.analytics import DefectLineResponse, MachineStatsResponse
from factory_events.schemas.event import BatchIngestResponse, EventResponse, RejectionItem
from factory_events.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

__all__ = [
    "BatchIngestResponse",
    "DefectLineResponse",
    "EventResponse",
    "HealthResponse",
    "MachineStatsResponse",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "RejectionItem",
]
