"""DTOs for batch ingestion results."""

from dataclasses import dataclass, field
from typing import Any

from factory_events.domain.enums import RecordOutcome, RejectionReason


@dataclass(frozen=True)
class Rejection:
    """One rejected record. event_id is echoed as received (may be missing or not a string)."""

    event_id: Any
    reason: RejectionReason


@dataclass(frozen=True)
class ReconciledRecord:
    """Tagged outcome of reconciling one raw record.

    reason is set only when outcome is REJECTED.
    """

    outcome: RecordOutcome
    event_id: Any
    reason: RejectionReason | None = None

    @classmethod
    def rejected(cls, event_id: Any, reason: RejectionReason) -> "ReconciledRecord":
        return cls(RecordOutcome.REJECTED, event_id, reason)


@dataclass
class BatchResult:
    """Counts of each outcome across a batch, plus the rejection list."""

    accepted: int = 0
    deduped: int = 0
    updated: int = 0
    rejected: int = 0
    rejections: list[Rejection] = field(default_factory=list)

    def add(self, record: ReconciledRecord) -> None:
        """Tally one record's outcome."""
        if record.outcome is RecordOutcome.ACCEPTED:
            self.accepted += 1
        elif record.outcome is RecordOutcome.DEDUPED:
            self.deduped += 1
        elif record.outcome is RecordOutcome.UPDATED:
            self.updated += 1
        else:
            self.rejected += 1
            if record.reason is not None:
                self.rejections.append(Rejection(record.event_id, record.reason))

    @property
    def total(self) -> int:
        return self.accepted + self.deduped + self.updated + self.rejected
