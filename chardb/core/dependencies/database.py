"""Database dependencies for FastAPI route handlers.

Two session getters exist:

1. ``get_db_session()`` (this module): FastAPI dependency, one session per
   request, closed when the request completes.
2. ``get_async_session()`` (``chardb.infra.database``): plain async context
   manager for scripts and background work.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from chardb.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for database session.

    Example:
        @router.get("/species/{species_id}")
        async def get_species(session: DbSessionDep, species_id: str):
            ...
    """
    async with get_async_session() as session:
        yield session


DbSessionDep = Annotated[AsyncSession, Depends(get_db_session)]

__all__ = ["DbSessionDep", "get_db_session"]
