"""Analytics use cases: per-machine stats and the top defect lines ranking.

Read-only. The store does the counting; rates, percentages and health
status are derived here so every backend reports the same numbers.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from factory_events.application.dtos.analytics import DefectLineStats, MachineStats
from factory_events.core.constants import RATE_DECIMALS, WARNING_DEFECT_RATE
from factory_events.domain.enums import MachineHealth
from factory_events.domain.exceptions import ValidationException
from factory_events.shared.telemetry.logging import get_logger
from factory_events.shared.telemetry.tracing import add_span_attributes, traced
from factory_events.shared.utils.datetime import ensure_utc

if TYPE_CHECKING:
    from factory_events.application.interfaces.repositories import IEventRepository

logger = get_logger(__name__)

_SECONDS_PER_HOUR = 3600.0


def defect_rate_per_hour(defects: int, start: datetime, end: datetime) -> float:
    """Defects divided by window length in hours; 0.0 for an empty or inverted window."""
    window_hours = (end - start).total_seconds() / _SECONDS_PER_HOUR
    if window_hours <= 0:
        return 0.0
    return defects / window_hours


def machine_health(rate: float) -> MachineHealth:
    """Healthy strictly below the warning threshold, Warning at or above it."""
    return MachineHealth.HEALTHY if rate < WARNING_DEFECT_RATE else MachineHealth.WARNING


def defects_percent(total_defects: int, event_count: int) -> float:
    """Defects per 100 events, rounded; 0.0 when there are no events."""
    if event_count <= 0:
        return 0.0
    return round(total_defects * 100 / event_count, RATE_DECIMALS)


class AnalyticsService:
    """Aggregation queries over stored events."""

    def __init__(self, event_repo: "IEventRepository") -> None:
        self.event_repo = event_repo

    @traced("analytics.machine_stats")
    async def get_machine_stats(
        self, machine_id: str, start: datetime, end: datetime
    ) -> MachineStats:
        """Stats for one machine over [start, end).

        Unknown defect counts (-1) contribute to events_count but not to
        defects_count. Status is decided on the unrounded rate.
        """
        start_utc = ensure_utc(start) or start
        end_utc = ensure_utc(end) or end
        totals = await self.event_repo.get_machine_totals(machine_id, start_utc, end_utc)

        rate = defect_rate_per_hour(totals.defects_count, start_utc, end_utc)
        status = machine_health(rate)
        add_span_attributes(events_count=totals.events_count, status=status.value)
        logger.debug(
            "Machine %s: %d events, %d defects, %.4f defects/h (%s)",
            machine_id,
            totals.events_count,
            totals.defects_count,
            rate,
            status.value,
        )
        return MachineStats(
            machine_id=machine_id,
            start=start_utc,
            end=end_utc,
            events_count=totals.events_count,
            defects_count=totals.defects_count,
            avg_defect_rate=round(rate, RATE_DECIMALS),
            status=status,
        )

    @traced("analytics.top_defect_lines")
    async def get_top_defect_lines(
        self, factory_id: str, start: datetime, end: datetime, limit: int
    ) -> list[DefectLineStats]:
        """Lines of a factory ranked by total defects, ties broken by line id.

        Raises:
            ValidationException: If limit is less than 1.
        """
        if limit < 1:
            raise ValidationException("limit must be at least 1", field="limit")

        rows = await self.event_repo.get_line_defect_totals(
            factory_id, ensure_utc(start) or start, ensure_utc(end) or end, limit
        )
        return [
            DefectLineStats(
                line_id=row.line_id,
                event_count=row.event_count,
                total_defects=row.total_defects,
                defects_percent=defects_percent(row.total_defects, row.event_count),
            )
            for row in rows
        ]
