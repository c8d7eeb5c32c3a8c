"""Database session management with the SQLAlchemy async engine."""

from __future__ import annotations

from contextlib import asynccontextmanager
from functools import lru_cache
import logging
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from chardb.core.settings import get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from chardb.core.settings import DatabaseSettings

logger = logging.getLogger(__name__)


def build_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create an async engine for ``settings``.

    SQLite engines get no pool sizing (aiosqlite uses a static pool).
    """
    if settings.is_sqlite:
        return create_async_engine(settings.dsn, echo=settings.echo)
    return create_async_engine(
        settings.dsn,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_pre_ping=settings.pool_pre_ping,
        echo=settings.echo,
    )


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Process-wide engine, created on first use."""
    return build_engine(get_db_settings())


@lru_cache(maxsize=1)
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    Yields:
        Database session that is automatically closed.

    Example:
        async with get_async_session() as session:
            principal = await load_principal(session, user_id)
    """
    async with get_sessionmaker()() as session:
        try:
            yield session
        finally:
            await session.close()


async def close_database() -> None:
    """Dispose of the engine, if one was ever created. Call during application shutdown."""
    if get_engine.cache_info().currsize:
        logger.info("Closing database connection")
        await get_engine().dispose()
    get_sessionmaker.cache_clear()
    get_engine.cache_clear()


__all__ = [
    "build_engine",
    "close_database",
    "get_async_session",
    "get_engine",
    "get_sessionmaker",
]
