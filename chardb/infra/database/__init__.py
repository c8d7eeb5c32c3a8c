"""Database infrastructure: engine and session factory."""

from chardb.infra.database.session import (
    build_engine,
    close_database,
    get_async_session,
    get_engine,
    get_sessionmaker,
)

__all__ = [
    "build_engine",
    "close_database",
    "get_async_session",
    "get_engine",
    "get_sessionmaker",
]
