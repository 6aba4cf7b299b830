"""Async SQLAlchemy engine and session helpers."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from calorie_tracker.adapters.sqlalchemy_tables import Base, UserRow
from calorie_tracker.errors import TransactionFailure

_logger = logging.getLogger(__name__)


def create_engine(
    database_url: str,
    *,
    pool_size: int = 5,
    timeout_seconds: float = 10.0,
    echo: bool = False,
) -> AsyncEngine:
    """Create an async engine with bounded pool and statement timeouts."""
    options: dict[str, object] = {"echo": echo, "pool_pre_ping": True}
    if database_url.startswith("postgresql+asyncpg"):
        options.update(
            pool_size=pool_size,
            max_overflow=pool_size * 2,
            pool_timeout=timeout_seconds,
            pool_recycle=3600,
            connect_args={"command_timeout": timeout_seconds},
        )
    return create_async_engine(database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Return a session factory that keeps loaded rows usable after commit."""
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
        class_=AsyncSession,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables."""
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    _logger.info("Database schema ensured")


@asynccontextmanager
async def transaction(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Yield a session inside a transaction, translating driver errors."""
    try:
        async with session_factory() as session, session.begin():
            yield session
    except SQLAlchemyError as exc:
        _logger.exception("Store transaction rolled back")
        raise TransactionFailure(str(exc)) from exc


async def ensure_user(session: AsyncSession, user_id: UUID) -> None:
    """Insert a bare user row for an upstream-authenticated id when missing."""
    if await session.get(UserRow, user_id) is None:
        session.add(UserRow(id=user_id))
        await session.flush()
