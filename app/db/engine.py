"""Async SQLAlchemy engines over SQLite files.

Each service owns one database file:

- open_store() opens the owning service's handle at startup: creates the
  parent directory, creates the service's table if missing, and returns a
  StoreHandle that the app keeps on app.state until shutdown.
- open_snapshot() opens someone else's file read-only for a single query
  and disposes the engine on exit.  The verification service uses it to
  read the issuance database without holding a handle on it.

SQLite commits are durable once commit() returns, so a response sent after
a commit cannot lose that row.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy import Table, event
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

logger = logging.getLogger(__name__)

# Seconds a writer waits on a locked database before failing.
BUSY_TIMEOUT_SECONDS = 5.0


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all table models."""


def sqlite_url(path: Path, *, read_only: bool = False) -> URL:
    if read_only:
        # URI filename so SQLite itself refuses writes and never creates
        # the file when it is missing.  as_uri() percent-encodes "#", "?"
        # and "%", which SQLite would otherwise read as URI syntax.
        return URL.create(
            "sqlite+aiosqlite",
            database=path.resolve().as_uri(),
            query={"mode": "ro", "uri": "true"},
        )
    return URL.create("sqlite+aiosqlite", database=str(path))


def _begin_immediate(engine: AsyncEngine) -> None:
    """Take the write lock when a transaction starts, not at its first write.

    With the driver's deferred BEGIN, two connections can each hold a read
    lock and then both need the write lock; SQLite fails one of them with
    "database is locked" without waiting.  BEGIN IMMEDIATE makes the second
    writer wait (up to BUSY_TIMEOUT_SECONDS) instead.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):  # type: ignore[no-untyped-def]
        conn.exec_driver_sql("BEGIN IMMEDIATE")


@dataclass(frozen=True)
class StoreHandle:
    """An open database owned by this process."""

    path: Path
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]

    async def dispose(self) -> None:
        await self.engine.dispose()


async def open_store(path: Path, tables: Sequence[Table]) -> StoreHandle:
    """Open (creating if needed) the database at *path* and its *tables*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_async_engine(
        sqlite_url(path),
        connect_args={"timeout": BUSY_TIMEOUT_SECONDS},
    )
    _begin_immediate(engine)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, tables=list(tables))
    except Exception:
        await engine.dispose()
        raise

    logger.info("Opened store %s (tables=%s)", path, [t.name for t in tables])
    return StoreHandle(
        path=path,
        engine=engine,
        session_factory=async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        ),
    )


@asynccontextmanager
async def lifespan_store(
    path: Path, tables: Sequence[Table]
) -> AsyncIterator[StoreHandle]:
    """Startup/shutdown hook around open_store()."""
    handle = await open_store(path, tables)
    try:
        yield handle
    finally:
        await handle.dispose()
        logger.info("Closed store %s", path)


@asynccontextmanager
async def open_snapshot(path: Path) -> AsyncIterator[AsyncConnection]:
    """Read-only connection to the SQLite file at *path*, closed on exit."""
    engine = create_async_engine(sqlite_url(path, read_only=True), poolclass=NullPool)
    try:
        async with engine.connect() as conn:
            yield conn
    finally:
        await engine.dispose()
