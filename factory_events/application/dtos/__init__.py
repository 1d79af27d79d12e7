"""Application DTOs (no dependency on ORM or presentation schemas)."""

from factory_events.application.dtos.analytics import (
    DefectLineStats,
    LineDefectTotals,
    MachineStats,
    MachineTotals,
)
from factory_events.application.dtos.batch import BatchResult, ReconciledRecord, Rejection
from factory_events.application.dtos.event import (
    EventResult,
    EventToPersist,
    NormalizedEvent,
    StoredFingerprint,
)

__all__ = [
    "BatchResult",
    "DefectLineStats",
    "EventResult",
    "EventToPersist",
    "LineDefectTotals",
    "MachineStats",
    "MachineTotals",
    "NormalizedEvent",
    "ReconciledRecord",
    "Rejection",
    "StoredFingerprint",
]
