# tests/config/test_loader.py
"""
Тесты для модуля загрузки конфигурации.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.config.loader import (
    AuthSettings,
    DatabaseSettings,
    LoggingSettings,
    Settings,
    SystemSettings,
    TrackingSettings,
    get_config_path,
    get_project_root,
    load_config_json,
)


OVERRIDABLE_ENV = (
    "ENVIRONMENT", "API_HOST", "API_PORT",
    "DB_HOST", "DB_PORT", "DB_NAME", "DB_USER",
)


@pytest.fixture
def clean_env(monkeypatch) -> None:
    """Убирает переопределения адресов из окружения."""
    for name in OVERRIDABLE_ENV:
        monkeypatch.delenv(name, raising=False)


class TestPaths:
    """Тесты определения путей."""

    def test_root_contains_src_and_config(self) -> None:
        root = get_project_root()
        assert isinstance(root, Path)
        assert (root / "src").exists()
        assert (root / "config").exists()

    def test_default_config_path(self, monkeypatch) -> None:
        monkeypatch.delenv("BUS_TRACKER_CONFIG", raising=False)
        path = get_config_path()
        assert path.name == "config.json"
        assert path.parent.name == "config"

    def test_config_path_from_env(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("BUS_TRACKER_CONFIG", str(tmp_path / "other.json"))
        assert get_config_path() == tmp_path / "other.json"


class TestLoadConfigJson:
    """Тесты для функции load_config_json."""

    def test_contains_required_keys(self) -> None:
        config = load_config_json()

        for key in ("PROJECT_NAME", "VERSION", "DB_NAME", "POLL_INTERVAL_SECONDS", "LOCATION_RETENTION_DAYS"):
            assert key in config, f"Отсутствует ключ: {key}"

    def test_raises_file_not_found(self, tmp_path: Path) -> None:
        with patch("src.config.loader.get_config_path", return_value=tmp_path / "nonexistent.json"):
            with pytest.raises(FileNotFoundError):
                load_config_json()


class TestSections:
    """Тесты секций настроек."""

    def test_system_defaults(self) -> None:
        settings = SystemSettings()
        assert settings.PROJECT_NAME == "bus_tracker"
        assert settings.DEBUG is False

    def test_logging_defaults(self) -> None:
        settings = LoggingSettings()
        assert settings.LOG_FORMAT == "colored"
        assert settings.LOG_TO_FILE is False

    def test_database_dsn(self) -> None:
        settings = DatabaseSettings(
            DB_HOST="db", DB_PORT=5433, DB_NAME="bus", DB_USER="u", DB_PASSWORD="p",
        )
        assert settings.dsn == "postgresql://u:p@db:5433/bus"

    def test_database_password_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("DB_PASSWORD", "from_env")
        assert DatabaseSettings(DB_PASSWORD="").DB_PASSWORD == "from_env"

    def test_jwt_secret_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("JWT_SECRET", "env-secret")
        assert AuthSettings(JWT_SECRET="").JWT_SECRET == "env-secret"

    def test_jwt_secret_dev_fallback(self, monkeypatch) -> None:
        monkeypatch.delenv("JWT_SECRET", raising=False)
        assert AuthSettings().JWT_SECRET == "dev-insecure-secret"

    def test_jwt_secret_default_reads_env(self, monkeypatch) -> None:
        """Значение по умолчанию тоже проходит через валидатор."""
        monkeypatch.setenv("JWT_SECRET", "env-secret")
        assert AuthSettings().JWT_SECRET == "env-secret"

    def test_database_password_default_reads_env(self, monkeypatch) -> None:
        monkeypatch.setenv("DB_PASSWORD", "from_env")
        settings = DatabaseSettings()
        assert settings.DB_PASSWORD == "from_env"
        assert ":from_env@" in settings.dsn

    def test_tracking_defaults(self) -> None:
        settings = TrackingSettings()
        assert settings.POLL_INTERVAL_SECONDS == 15
        assert settings.MAX_BATCH_SIZE == 500
        assert settings.LOCATION_RETENTION_DAYS == 30
        assert settings.HANDSHAKE_TIMEOUT_SECONDS == 10

    @pytest.mark.parametrize(
        "overrides",
        [
            {"POLL_INTERVAL_SECONDS": 0},
            {"MAX_BATCH_SIZE": 0},
            {"LOCATION_RETENTION_DAYS": 0},
            {"EXPIRY_BATCH_SIZE": -1},
            {"HANDSHAKE_TIMEOUT_SECONDS": 0},
        ],
    )
    def test_tracking_rejects_non_positive(self, overrides) -> None:
        with pytest.raises(ValidationError):
            TrackingSettings(**overrides)


class TestSettings:
    """Тесты для главного класса Settings."""

    def test_from_project_config(self, clean_env) -> None:
        settings = Settings.from_config_json()

        assert settings.database.DB_NAME == "bus_tracking"
        assert settings.tracking.POLL_INTERVAL_SECONDS == 15
        assert settings.auth.TOKEN_TTL_DAYS == 7

    def test_from_custom_file(self, clean_env, temp_config_file: Path) -> None:
        with patch("src.config.loader.get_config_path", return_value=temp_config_file):
            settings = Settings.from_config_json()

        assert settings.system.PROJECT_NAME == "bus_tracker_test"
        assert settings.deployment.API_PORT == 8100
        assert settings.database.DB_HOST == "db.test"
        assert settings.database.DB_PORT == 5433
        assert settings.logging.LOG_FORMAT == "json"
        assert settings.tracking.MAX_BATCH_SIZE == 50
        assert settings.tracking.EXPIRY_BATCH_SIZE == 100
        assert settings.auth.TOKEN_TTL_DAYS == 3

    def test_env_overrides_address(self, clean_env, monkeypatch, temp_config_file: Path) -> None:
        monkeypatch.setenv("DB_HOST", "postgres.internal")
        monkeypatch.setenv("API_PORT", "9000")

        with patch("src.config.loader.get_config_path", return_value=temp_config_file):
            settings = Settings.from_config_json()

        assert settings.database.DB_HOST == "postgres.internal"
        assert settings.deployment.API_PORT == 9000

    def test_filters_comment_keys(self, clean_env, temp_config_file: Path) -> None:
        config = json.loads(temp_config_file.read_text(encoding="utf-8"))
        config["_comment_test"] = "This is a comment"
        temp_config_file.write_text(json.dumps(config), encoding="utf-8")

        with patch("src.config.loader.get_config_path", return_value=temp_config_file):
            settings = Settings.from_config_json()

        assert settings.system.ENVIRONMENT == "test"
