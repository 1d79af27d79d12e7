"""Stats API: per-machine defect stats and the top defect lines of a factory."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from factory_events.api.v1.dependencies import get_analytics_service
from factory_events.application.use_cases.analytics import AnalyticsService
from factory_events.core.config import get_settings
from factory_events.schemas.analytics import DefectLineResponse, MachineStatsResponse

router = APIRouter()


@router.get("", response_model=MachineStatsResponse)
async def get_machine_stats(
    service: Annotated[AnalyticsService, Depends(get_analytics_service)],
    machine_id: Annotated[str, Query(alias="machineId", min_length=1)],
    start: Annotated[datetime, Query(description="Window start (inclusive), ISO-8601")],
    end: Annotated[datetime, Query(description="Window end (exclusive), ISO-8601")],
) -> MachineStatsResponse:
    """Event count, known defects, defects per hour and health status for one machine."""
    stats = await service.get_machine_stats(machine_id, start, end)
    return MachineStatsResponse.model_validate(stats)


@router.get("/top-defect-lines", response_model=list[DefectLineResponse])
async def get_top_defect_lines(
    service: Annotated[AnalyticsService, Depends(get_analytics_service)],
    factory_id: Annotated[str, Query(alias="factoryId", min_length=1)],
    from_: Annotated[datetime, Query(alias="from", description="Window start (inclusive)")],
    to: Annotated[datetime, Query(description="Window end (exclusive)")],
    limit: Annotated[int | None, Query(ge=1, description="Max lines returned")] = None,
) -> list[DefectLineResponse]:
    """Production lines ranked by total defects (ties by line id)."""
    if limit is None:
        limit = get_settings().top_defect_lines_default_limit
    lines = await service.get_top_defect_lines(factory_id, from_, to, limit)
    return [DefectLineResponse.model_validate(line) for line in lines]
