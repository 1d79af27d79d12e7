"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Two backends share one code path: SQLite (aiosqlite, the default) and
PostgreSQL (asyncpg). Schema is created from the ORM metadata at startup
(init_models); there are no migrations.

Engine and session factory are created lazily on first use (get_db /
get_db_transactional) so import does not trigger Settings validation.

SQLite runs in WAL mode. Write transactions (transactional_session) start
with BEGIN IMMEDIATE: concurrent batches queue on the write lock (up to the
busy timeout) instead of failing on lock upgrade halfway through a batch.
Read sessions start with a plain BEGIN and never wait for a writer.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from factory_events.core.config import get_settings

logger = logging.getLogger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None

# Connection execution option marking a write transaction.
WRITE_LOCK_OPTION = "factory_events_write_lock"


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def _on_sqlite_connect(dbapi_connection: Any, _connection_record: Any) -> None:
    """Hand transaction control to SQLAlchemy and enable WAL on each new connection."""
    # The driver's own implicit BEGIN would defer the write lock; _on_sqlite_begin emits BEGIN itself.
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()


def _on_sqlite_begin(conn: Any) -> None:
    if conn.get_execution_options().get(WRITE_LOCK_OPTION):
        conn.exec_driver_sql("BEGIN IMMEDIATE")
    else:
        conn.exec_driver_sql("BEGIN")


def create_engine_from_url(
    database_url: str,
    *,
    echo: bool = False,
    sqlite_busy_timeout: float = 30.0,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    command_timeout: int | None = None,
) -> AsyncEngine:
    """Create an async engine configured for the backend named by the URL.

    Used by the application (through _ensure_engine), by scripts and by tests.
    """
    if database_url.startswith("sqlite"):
        created = create_async_engine(
            database_url,
            echo=echo,
            connect_args={"timeout": sqlite_busy_timeout},
        )
        event.listen(created.sync_engine, "connect", _on_sqlite_connect)
        event.listen(created.sync_engine, "begin", _on_sqlite_begin)
        return created

    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=pool_size if pool_size is not None else 20,
        max_overflow=max_overflow if max_overflow is not None else 30,
        pool_recycle=3600,
        connect_args={
            "command_timeout": command_timeout if command_timeout is not None else 60
        },
    )


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory with the settings every unit of work here expects."""
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    engine = create_engine_from_url(
        settings.database_url,
        echo=settings.database_echo,
        sqlite_busy_timeout=settings.sqlite_busy_timeout_seconds,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        command_timeout=settings.db_command_timeout,
    )
    AsyncSessionLocal = create_session_factory(engine)
    logger.info(
        "Database engine created (backend=%s)",
        "sqlite" if settings.is_sqlite else "postgres",
    )


def get_engine() -> AsyncEngine:
    """Return the application engine, creating it on first use."""
    _ensure_engine()
    assert engine is not None
    return engine


async def init_models(bind: AsyncEngine | None = None) -> None:
    """Create tables and indexes that do not exist yet."""
    # Registers the models on Base.metadata.
    from factory_events.infrastructure.persistence import models  # noqa: F401

    target = bind or get_engine()
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose the application engine and forget it (next use creates a new one)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None


async def ping() -> None:
    """Round-trip a trivial query; raises when the database is unreachable."""
    async with get_engine().connect() as conn:
        await conn.execute(text("SELECT 1"))


@asynccontextmanager
async def transactional_session(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncIterator[AsyncSession]:
    """One session, one write transaction: commit on success, roll back on exception.

    The connection is procured up front with WRITE_LOCK_OPTION so SQLite takes
    the write lock at BEGIN. Defaults to the application session factory.
    """
    if session_factory is None:
        _ensure_engine()
        session_factory = AsyncSessionLocal
    assert session_factory is not None
    async with session_factory() as session:
        async with session.begin():
            await session.connection(execution_options={WRITE_LOCK_OPTION: True})
            yield session


async def get_db():
    """Database session dependency for read operations.

    Does not commit; use get_db_transactional for writes.
    Yields a session and closes it on exit.
    """
    _ensure_engine()
    assert AsyncSessionLocal is not None
    async with AsyncSessionLocal() as session:
        yield session


async def get_db_transactional():
    """Database session dependency for write operations.

    Begins a transaction, commits on success, rolls back on exception.
    A whole ingestion batch runs inside this one transaction.
    """
    async with transactional_session() as session:
        yield session
