"""Analytics API schemas: machine stats and the top defect lines ranking."""

from pydantic import AwareDatetime, Field

from factory_events.domain.enums import MachineHealth
from factory_events.schemas._base import CamelModel


class MachineStatsResponse(CamelModel):
    """Stats for one machine over [start, end)."""

    machine_id: str
    start: AwareDatetime
    end: AwareDatetime
    events_count: int
    defects_count: int = Field(..., description="Known defects only; -1 counts are excluded")
    avg_defect_rate: float = Field(..., description="Defects per hour over the window")
    status: MachineHealth


class DefectLineResponse(CamelModel):
    """One production line in the top defect lines ranking."""

    line_id: str
    event_count: int
    total_defects: int
    defects_percent: float = Field(..., description="Defects per 100 events")
