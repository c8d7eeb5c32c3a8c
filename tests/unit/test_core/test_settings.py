"""Tests for settings models and cached loaders."""

from pathlib import Path

from pydantic import ValidationError
import pytest

from chardb.core.settings import (
    AuthorizationSettings,
    DatabaseSettings,
    LoggingSettings,
    clear_all_caches,
    get_authz_settings,
)


@pytest.fixture(autouse=True)
def _fresh_settings():
    clear_all_caches()
    yield
    clear_all_caches()


class TestAuthorizationSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("AUTHZ_MAX_RESOLUTION_HOPS", raising=False)
        settings = AuthorizationSettings()

        assert settings.max_resolution_hops == 5
        assert settings.owner_requires_own_permission is False
        assert settings.log_denials is True

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTHZ_OWNER_REQUIRES_OWN_PERMISSION", "true")
        monkeypatch.setenv("AUTHZ_MAX_RESOLUTION_HOPS", "7")

        settings = get_authz_settings()

        assert settings.owner_requires_own_permission is True
        assert settings.max_resolution_hops == 7
        assert get_authz_settings() is settings

    @pytest.mark.parametrize("hops", [0, 11])
    def test_hop_bound_is_validated(self, hops: int) -> None:
        with pytest.raises(ValidationError):
            AuthorizationSettings(max_resolution_hops=hops)

    def test_frozen(self) -> None:
        settings = AuthorizationSettings()
        with pytest.raises(ValidationError):
            settings.log_denials = False  # type: ignore[misc]


class TestDatabaseSettings:
    def test_sync_urls_use_async_drivers(self) -> None:
        assert DatabaseSettings(dsn="postgresql://u:p@db/chardb").dsn == (
            "postgresql+psycopg://u:p@db/chardb"
        )
        sqlite = DatabaseSettings(dsn="sqlite:///chardb.db")
        assert sqlite.dsn == "sqlite+aiosqlite:///chardb.db"
        assert sqlite.is_sqlite

    def test_reads_database_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

        assert DatabaseSettings().dsn == "sqlite+aiosqlite:///:memory:"


class TestLoggingSettings:
    def test_level_is_normalized(self) -> None:
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_invalid_level(self) -> None:
        with pytest.raises(ValidationError):
            LoggingSettings(level="chatty")

    def test_to_logging_kwargs(self) -> None:
        settings = LoggingSettings(json_logs=False, file_path=Path("logs/chardb.jsonl"))

        kwargs = settings.to_logging_kwargs()

        assert kwargs["json_logs"] is False
        assert kwargs["file_path"] == "logs/chardb.jsonl"
        assert kwargs["log_level"] == settings.level
