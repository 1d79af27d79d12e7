"""Benchmark batch ingestion against the configured event store.

Generates N events for one machine across ten lines and ingests them in
batches through EventIngestionService, one transaction per batch, then
reports the elapsed time. The reference target is 1000 events in a single
batch in under one second.

Usage:
    python -m scripts.benchmark_ingest [--events 1000] [--batch-size 1000] [--seed 42]

Event ids include a run stamp, so repeated runs do not dedupe each other.
"""

from __future__ import annotations

import argparse
import asyncio
import random
import time
from datetime import datetime, timedelta
from typing import Any

from scripts._bootstrap import build_ingestion_service, load_env

from factory_events.infrastructure.persistence.database import (
    dispose_engine,
    init_models,
    transactional_session,
)
from factory_events.shared.utils.clock import MonotonicClock
from factory_events.shared.utils.datetime import to_iso, utc_now

TARGET_SECONDS = 1.0


def generate_events(
    count: int, run_id: str, start: datetime, rng: random.Random
) -> list[dict[str, Any]]:
    """Events one second apart; roughly one in ten carries defects."""
    return [
        {
            "eventId": f"E-BENCH-{run_id}-{i}",
            "eventTime": to_iso(start + timedelta(seconds=i)),
            "machineId": "M-BENCH",
            "lineId": f"LINE-{i % 10}",
            "factoryId": "F-BENCH",
            "durationMs": rng.randint(100, 10_099),
            "defectCount": rng.randint(0, 4) if rng.random() > 0.9 else 0,
        }
        for i in range(count)
    ]


async def run(total: int, batch_size: int, seed: int) -> None:
    await init_models()
    rng = random.Random(seed)
    now = utc_now()
    run_id = now.strftime("%Y%m%d%H%M%S")
    events = generate_events(total, run_id, now - timedelta(seconds=total), rng)
    clock = MonotonicClock()

    accepted = 0
    started = time.perf_counter()
    for offset in range(0, len(events), batch_size):
        async with transactional_session() as session:
            result = await build_ingestion_service(session, clock).process_batch(
                events[offset : offset + batch_size]
            )
        accepted += result.accepted
    elapsed = time.perf_counter() - started
    await dispose_engine()

    print(f"Ingested {total} events in batches of {batch_size}: accepted={accepted}")
    print(f"Elapsed: {elapsed * 1000:.0f} ms ({total / elapsed:.0f} events/s)")
    if batch_size >= total:
        verdict = "PASS" if elapsed < TARGET_SECONDS else "SLOW"
        print(f"{verdict}: single batch target is {TARGET_SECONDS:.0f}s")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--events", type=int, default=1000)
    parser.add_argument("--batch-size", type=int, default=1000)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()
    if args.events < 1 or args.batch_size < 1:
        parser.error("--events and --batch-size must be positive")
    load_env()
    asyncio.run(run(args.events, args.batch_size, args.seed))


if __name__ == "__main__":
    main()
