"""Pytest configuration and fixtures for factory events.

Every test that touches storage gets its own SQLite file under tmp_path
(WAL, BEGIN IMMEDIATE for writes, like production), so concurrent sessions behave as
they would against a real store.
"""

from collections.abc import AsyncIterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from factory_events.core.config import get_settings
from factory_events.infrastructure.persistence import database
from factory_events.infrastructure.persistence.database import (
    create_engine_from_url,
    create_session_factory,
    init_models,
)


@pytest.fixture
def database_url(tmp_path) -> str:
    """URL of a fresh SQLite file for this test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'events.db'}"


@pytest.fixture
async def engine(database_url: str) -> AsyncIterator[AsyncEngine]:
    """Engine on the per-test database with the schema created."""
    test_engine = create_engine_from_url(database_url, sqlite_busy_timeout=30.0)
    await init_models(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Session for repository tests. Rolls back after test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def app(monkeypatch, database_url: str) -> AsyncIterator[FastAPI]:
    """Fresh app bound to the per-test database.

    ASGITransport does not run the lifespan, so the schema is created here.
    """
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("TELEMETRY_ENABLED", "false")
    get_settings.cache_clear()
    await database.dispose_engine()
    await database.init_models()

    from factory_events.main import create_app

    yield create_app()

    await database.dispose_engine()
    get_settings.cache_clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
