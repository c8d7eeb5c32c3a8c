"""Pydantic Settings v2 configuration, split by concern.

Import settings via the cached loaders:
    from chardb.core.settings import get_authz_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .authz import AuthorizationSettings
from .database import DatabaseSettings
from .loader import clear_all_caches, get_authz_settings, get_db_settings, get_logging_settings
from .logs import LoggingSettings

__all__ = [
    "AuthorizationSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "clear_all_caches",
    "get_authz_settings",
    "get_db_settings",
    "get_logging_settings",
]
