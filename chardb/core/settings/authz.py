"""Authorization engine settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthorizationSettings(BaseSettings):
    """Tuning knobs for the access-control engine.

    Environment variables use AUTHZ_ prefix.
    Example: AUTHZ_OWNER_REQUIRES_OWN_PERMISSION=true
    """

    max_resolution_hops: int = Field(
        default=5,
        ge=1,
        le=10,
        description="Longest allowed entity-to-community lookup chain.",
    )

    owner_requires_own_permission: bool = Field(
        default=False,
        description=(
            "When true, owners of characters in a community also need an own-character "
            "edit permission there. When false, owners may always edit their characters."
        ),
    )

    log_denials: bool = Field(
        default=True,
        description="Log every denied operation at WARNING with the evaluated guards.",
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTHZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
