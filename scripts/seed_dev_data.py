"""Seed a demo data set into the configured event store and print the resulting stats.

Ingests two batches relative to the current time: the first with new
events, a resent duplicate and a few invalid records; the second with a
corrected payload for one event (an update) and the same duplicate again.

Usage:
    python -m scripts.seed_dev_data [factory_id]

Default factory: F-DEMO. Uses DATABASE_URL from the environment or .env;
tables are created if missing.
"""

from __future__ import annotations

import asyncio
import sys
from datetime import datetime, timedelta
from typing import Any

from scripts._bootstrap import build_ingestion_service, load_env

from factory_events.application.use_cases.analytics import AnalyticsService
from factory_events.infrastructure.persistence.database import (
    dispose_engine,
    init_models,
    transactional_session,
)
from factory_events.infrastructure.persistence.repositories import EventRepository
from factory_events.shared.utils.clock import MonotonicClock
from factory_events.shared.utils.datetime import to_iso, utc_now

MACHINES = ("M-001", "M-002", "M-003")
LINES = ("LINE-A", "LINE-B", "LINE-C")


def _event(
    event_id: str,
    event_time: datetime,
    machine_id: str,
    line_id: str,
    factory_id: str,
    defect_count: int,
    duration_ms: int = 4000,
) -> dict[str, Any]:
    return {
        "eventId": event_id,
        "eventTime": to_iso(event_time),
        "machineId": machine_id,
        "lineId": line_id,
        "factoryId": factory_id,
        "durationMs": duration_ms,
        "defectCount": defect_count,
    }


def build_batches(factory_id: str, now: datetime) -> tuple[list[Any], list[Any]]:
    """Two demo batches: initial load, then a correction plus a resend."""
    base = now - timedelta(minutes=50)
    first: list[Any] = []
    for i in range(30):
        machine = MACHINES[i % len(MACHINES)]
        line = LINES[i % len(LINES)]
        # Every seventh event could not count defects.
        defects = -1 if i % 7 == 6 else (i * 3) % 5
        first.append(
            _event(f"E-DEMO-{i:03d}", base + timedelta(minutes=i), machine, line, factory_id, defects)
        )
    first.append(dict(first[0]))
    first.extend(
        [
            {"eventTime": to_iso(now), "machineId": "M-001", "durationMs": 10, "defectCount": 0},
            _event("E-DEMO-BAD-DURATION", now, "M-001", "LINE-A", factory_id, 0, duration_ms=-100),
            _event("E-DEMO-FUTURE", now + timedelta(hours=2), "M-001", "LINE-A", factory_id, 0),
        ]
    )

    corrected = dict(first[1])
    corrected["defectCount"] = corrected["defectCount"] + 4
    second: list[Any] = [corrected, dict(first[0])]
    return first, second


async def run(factory_id: str) -> None:
    await init_models()
    clock = MonotonicClock()
    now = utc_now()
    batches = build_batches(factory_id, now)

    for number, batch in enumerate(batches, start=1):
        async with transactional_session() as session:
            result = await build_ingestion_service(session, clock).process_batch(batch)
        print(
            f"Batch {number}: accepted={result.accepted} deduped={result.deduped} "
            f"updated={result.updated} rejected={result.rejected}"
        )
        for rejection in result.rejections:
            print(f"  rejected {rejection.event_id!r}: {rejection.reason.value}")

    start = now - timedelta(hours=1)
    async with transactional_session() as session:
        analytics = AnalyticsService(EventRepository(session))
        for machine in MACHINES:
            stats = await analytics.get_machine_stats(machine, start, now)
            print(
                f"{machine}: events={stats.events_count} defects={stats.defects_count} "
                f"rate={stats.avg_defect_rate}/h status={stats.status.value}"
            )
        for line in await analytics.get_top_defect_lines(factory_id, start, now, 10):
            print(
                f"{line.line_id}: events={line.event_count} defects={line.total_defects} "
                f"({line.defects_percent}%)"
            )

    await dispose_engine()
    print("Seed completed.")


def main() -> None:
    load_env()
    factory_id = sys.argv[1] if len(sys.argv) > 1 else "F-DEMO"
    asyncio.run(run(factory_id))


if __name__ == "__main__":
    main()
