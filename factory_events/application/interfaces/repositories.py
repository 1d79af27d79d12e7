"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.

The event store contract the ingestion use case relies on:
- every method runs inside the caller's transaction (one per batch);
- event_id is unique; a losing concurrent insert is reported, not raised;
- replace is a compare-and-set on received_time.
Any other storage failure raises EventStoreException.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from factory_events.application.dtos.analytics import LineDefectTotals, MachineTotals
    from factory_events.application.dtos.event import (
        EventResult,
        EventToPersist,
        StoredFingerprint,
    )


# Event repository interface
class IEventRepository(Protocol):
    """Protocol for the event store (DIP)."""

    async def get_fingerprint(self, event_id: str) -> StoredFingerprint | None:
        """Return payload hash and received time of the stored event, or None."""

    async def insert_event(self, event: EventToPersist) -> bool:
        """Insert a new event. Return False when a concurrent transaction already created event_id."""

    async def replace_event(self, event: EventToPersist) -> bool:
        """Overwrite all fields of the stored event if its received_time is older than event.received_time.

        Return False when the stored received_time is already >= the incoming one.
        """

    async def get_by_event_id(self, event_id: str) -> EventResult | None:
        """Return the full stored event, or None."""

    async def get_machine_totals(
        self, machine_id: str, start: datetime, end: datetime
    ) -> MachineTotals:
        """Count events and sum known defects for machine with start <= event_time < end."""

    async def get_line_defect_totals(
        self, factory_id: str, start: datetime, end: datetime, limit: int
    ) -> list[LineDefectTotals]:
        """Per-line counts for factory in [start, end), lines with null line_id excluded.

        Ordered by total_defects descending then line_id ascending, at most limit rows.
        """

    async def count_events(self) -> int:
        """Return the number of stored events."""

    async def delete_all(self) -> int:
        """Remove every stored event (reset tooling). Return rows deleted."""
