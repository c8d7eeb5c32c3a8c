"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the
process.

Usage:
    from chardb.core.settings import get_authz_settings

    settings = get_authz_settings()

Testing:
    Clear the cache to force a reload after changing the environment:
    get_authz_settings.cache_clear()

    Or build an instance directly:
    settings = AuthorizationSettings(owner_requires_own_permission=True)
"""

from __future__ import annotations

from functools import lru_cache

from .authz import AuthorizationSettings
from .database import DatabaseSettings
from .logs import LoggingSettings


@lru_cache(maxsize=1)
def get_authz_settings() -> AuthorizationSettings:
    """Get cached authorization engine settings."""
    return AuthorizationSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings."""
    return LoggingSettings()


def clear_all_caches() -> None:
    """Clear every settings cache (tests only)."""
    get_authz_settings.cache_clear()
    get_db_settings.cache_clear()
    get_logging_settings.cache_clear()
