"""Batch ingestion use case: validate, fingerprint and reconcile each event against the store.

Every record of a batch ends in exactly one of four outcomes (accepted,
deduped, updated, rejected). Outcomes are values, not exceptions, so one bad
record never stops the rest of the batch. The caller runs process_batch
inside one transaction; only a storage fault escapes, and then the caller's
transaction rolls the whole batch back.

Conflict resolution is last-writer-wins on the server-stamped receivedTime:
- unknown eventId: insert (accepted); losing a concurrent insert of the same
  eventId counts as deduped;
- same fingerprint: deduped, no write;
- different fingerprint: replace when the incoming receivedTime is strictly
  newer (updated), otherwise deduped. Ties keep the stored record.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from factory_events.application.dtos.batch import BatchResult, ReconciledRecord
from factory_events.application.dtos.event import EventToPersist, StoredFingerprint
from factory_events.domain.enums import RecordOutcome
from factory_events.shared.telemetry.logging import get_logger
from factory_events.shared.telemetry.tracing import add_span_attributes, traced

if TYPE_CHECKING:
    from factory_events.application.interfaces.repositories import IEventRepository
    from factory_events.application.interfaces.services import (
        IClock,
        IEventValidator,
        IPayloadHasher,
    )

logger = get_logger(__name__)


def _raw_event_id(raw: Any) -> Any:
    """eventId as the client sent it, for the rejection list."""
    return raw.get("eventId") if isinstance(raw, dict) else None


class EventIngestionService:
    """Processes event batches with deduplication and last-writer-wins updates."""

    def __init__(
        self,
        event_repo: "IEventRepository",
        validator: "IEventValidator",
        hash_service: "IPayloadHasher",
        clock: "IClock",
    ) -> None:
        self.event_repo = event_repo
        self.validator = validator
        self.hash_service = hash_service
        self.clock = clock

    @traced("events.process_batch")
    async def process_batch(self, events: Sequence[Any]) -> BatchResult:
        """Reconcile every record of the batch and return the outcome counts.

        Must be called inside a transaction spanning the whole batch. Raises
        EventStoreException on storage failure; partial results are discarded
        with the rolled-back transaction.
        """
        result = BatchResult()
        for raw in events:
            result.add(await self.reconcile(raw))

        add_span_attributes(
            batch_size=result.total,
            accepted=result.accepted,
            deduped=result.deduped,
            updated=result.updated,
            rejected=result.rejected,
        )
        logger.info(
            "Batch processed: %d records (accepted=%d, deduped=%d, updated=%d, rejected=%d)",
            result.total,
            result.accepted,
            result.deduped,
            result.updated,
            result.rejected,
        )
        return result

    async def reconcile(self, raw: Any) -> ReconciledRecord:
        """Run one raw record through validate → normalize → fingerprint → compare."""
        validation = self.validator.validate(raw, self.clock.now())
        if validation.reason is not None or validation.event is None:
            event_id = _raw_event_id(raw)
            logger.debug("Rejected event %r: %s", event_id, validation.reason)
            return ReconciledRecord.rejected(event_id, validation.reason)

        # Stamped after validation; the clock never repeats a value.
        event = validation.event.normalize(self.clock.now())
        payload_hash = self.hash_service.compute_payload_hash(event)
        incoming = EventToPersist.from_normalized(event, payload_hash)

        existing = await self.event_repo.get_fingerprint(event.event_id)
        if existing is None:
            return await self._insert_new(incoming)
        if existing.payload_hash == payload_hash:
            return ReconciledRecord(RecordOutcome.DEDUPED, event.event_id)
        return await self._replace_if_newer(incoming, existing)

    async def _insert_new(self, incoming: EventToPersist) -> ReconciledRecord:
        if await self.event_repo.insert_event(incoming):
            return ReconciledRecord(RecordOutcome.ACCEPTED, incoming.event_id)
        # Unique-constraint race: another batch created this eventId after our lookup.
        logger.debug(
            "Event %s inserted concurrently by another batch; counted as duplicate",
            incoming.event_id,
        )
        return ReconciledRecord(RecordOutcome.DEDUPED, incoming.event_id)

    async def _replace_if_newer(
        self, incoming: EventToPersist, existing: StoredFingerprint
    ) -> ReconciledRecord:
        if incoming.received_time <= existing.received_time:
            logger.debug(
                "Stale payload for event %s discarded (received %s <= stored %s)",
                incoming.event_id,
                incoming.received_time.isoformat(),
                existing.received_time.isoformat(),
            )
            return ReconciledRecord(RecordOutcome.DEDUPED, incoming.event_id)
        if await self.event_repo.replace_event(incoming):
            return ReconciledRecord(RecordOutcome.UPDATED, incoming.event_id)
        # A concurrent batch already stored a newer receivedTime.
        logger.debug(
            "Update of event %s superseded by a concurrent batch", incoming.event_id
        )
        return ReconciledRecord(RecordOutcome.DEDUPED, incoming.event_id)
