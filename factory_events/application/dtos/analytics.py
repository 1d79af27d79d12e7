"""DTOs for machine and production-line analytics (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime

from factory_events.domain.enums import MachineHealth


@dataclass(frozen=True)
class MachineTotals:
    """Raw counts for one machine over a window, as the store aggregates them."""

    events_count: int
    defects_count: int


@dataclass(frozen=True)
class MachineStats:
    """Per-machine stats over the half-open window [start, end)."""

    machine_id: str
    start: datetime
    end: datetime
    events_count: int
    defects_count: int
    avg_defect_rate: float
    status: MachineHealth


@dataclass(frozen=True)
class LineDefectTotals:
    """Raw counts for one production line, as the store aggregates them."""

    line_id: str
    event_count: int
    total_defects: int


@dataclass(frozen=True)
class DefectLineStats:
    """One row of the top-defect-lines ranking."""

    line_id: str
    event_count: int
    total_defects: int
    defects_percent: float
