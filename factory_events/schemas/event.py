"""Event API schemas.

The batch endpoint takes raw JSON (records are validated one by one by the
ingestion service, not by pydantic); these models describe what goes out.
"""

from typing import Any

from pydantic import AwareDatetime, Field

from factory_events.domain.enums import RejectionReason
from factory_events.schemas._base import CamelModel


class RejectionItem(CamelModel):
    """One rejected record: the eventId as sent (may be null) and why."""

    event_id: Any = None
    reason: RejectionReason


class BatchIngestResponse(CamelModel):
    """Outcome counts for POST /events/batch."""

    accepted: int = 0
    deduped: int = 0
    updated: int = 0
    rejected: int = 0
    rejections: list[RejectionItem] = Field(default_factory=list)
    processing_time_ms: int = Field(
        default=0, description="Wall-clock time spent processing the batch"
    )


class EventResponse(CamelModel):
    """Stored event (GET /events/{event_id})."""

    event_id: str
    event_time: AwareDatetime
    received_time: AwareDatetime
    machine_id: str
    line_id: str | None = None
    factory_id: str | None = None
    duration_ms: int
    defect_count: int
    payload_hash: str
