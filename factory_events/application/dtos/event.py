"""DTOs for event ingestion (no dependency on ORM or presentation schemas)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class NormalizedEvent:
    """A validated event with its server-stamped receivedTime.

    Optional ids are None, never empty strings, so equal content always
    fingerprints equally.
    """

    event_id: str
    event_time: datetime
    received_time: datetime
    machine_id: str
    line_id: str | None
    factory_id: str | None
    duration_ms: int
    defect_count: int


@dataclass(frozen=True)
class EventToPersist:
    """Event row ready for insert or full replace (payload hash already computed)."""

    event_id: str
    event_time: datetime
    received_time: datetime
    machine_id: str
    line_id: str | None
    factory_id: str | None
    duration_ms: int
    defect_count: int
    payload_hash: str

    @classmethod
    def from_normalized(cls, event: NormalizedEvent, payload_hash: str) -> "EventToPersist":
        return cls(
            event_id=event.event_id,
            event_time=event.event_time,
            received_time=event.received_time,
            machine_id=event.machine_id,
            line_id=event.line_id,
            factory_id=event.factory_id,
            duration_ms=event.duration_ms,
            defect_count=event.defect_count,
            payload_hash=payload_hash,
        )


@dataclass(frozen=True)
class StoredFingerprint:
    """Point-lookup result: just enough of a stored event to reconcile against."""

    payload_hash: str
    received_time: datetime


@dataclass(frozen=True)
class EventResult:
    """Stored event read-model."""

    event_id: str
    event_time: datetime
    received_time: datetime
    machine_id: str
    line_id: str | None
    factory_id: str | None
    duration_ms: int
    defect_count: int
    payload_hash: str
