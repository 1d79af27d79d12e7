"""Event API: batch ingestion and point lookup. Thin routes delegating to EventIngestionService."""

import logging
import time
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends

from factory_events.api.v1.dependencies import get_event_ingestion_service, get_event_repo
from factory_events.application.use_cases.events import EventIngestionService
from factory_events.domain.exceptions import ResourceNotFoundException, ValidationException
from factory_events.infrastructure.persistence.repositories import EventRepository
from factory_events.schemas.event import BatchIngestResponse, EventResponse, RejectionItem

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/batch", response_model=BatchIngestResponse)
async def ingest_batch(
    body: Annotated[Any, Body(description="JSON array of raw machine events")],
    service: Annotated[EventIngestionService, Depends(get_event_ingestion_service)],
) -> BatchIngestResponse:
    """Ingest a batch of events.

    Each record is accepted, deduped, updated or rejected; rejected records
    do not fail the batch. A storage failure rolls back the whole batch (503).
    """
    if not isinstance(body, list):
        raise ValidationException("Request body must be an array of events", field="body")

    started = time.perf_counter()
    result = await service.process_batch(body)
    elapsed_ms = int((time.perf_counter() - started) * 1000)

    return BatchIngestResponse(
        accepted=result.accepted,
        deduped=result.deduped,
        updated=result.updated,
        rejected=result.rejected,
        rejections=[
            RejectionItem(event_id=r.event_id, reason=r.reason) for r in result.rejections
        ],
        processing_time_ms=elapsed_ms,
    )


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: str,
    event_repo: Annotated[EventRepository, Depends(get_event_repo)],
) -> EventResponse:
    """Return the stored version of an event (after dedup and updates)."""
    event = await event_repo.get_by_event_id(event_id)
    if not event:
        raise ResourceNotFoundException("event", event_id)
    return EventResponse.model_validate(event)
