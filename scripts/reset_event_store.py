"""Delete every stored event from the configured event store.

Usage:
    python -m scripts.reset_event_store --yes

Without --yes only the current row count is printed.
"""

from __future__ import annotations

import asyncio
import sys

from scripts._bootstrap import load_env

from factory_events.core.config import get_settings
from factory_events.infrastructure.persistence.database import (
    dispose_engine,
    init_models,
    transactional_session,
)
from factory_events.infrastructure.persistence.repositories import EventRepository


async def run(confirm: bool) -> None:
    await init_models()
    async with transactional_session() as session:
        repo = EventRepository(session)
        if not confirm:
            count = await repo.count_events()
            print(f"{count} events stored in {get_settings().database_url}")
            print("Re-run with --yes to delete them.")
        else:
            deleted = await repo.delete_all()
            print(f"Deleted {deleted} events.")
    await dispose_engine()


def main() -> None:
    load_env()
    asyncio.run(run("--yes" in sys.argv[1:]))


if __name__ == "__main__":
    main()
