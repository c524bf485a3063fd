# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional
from uuid import UUID, uuid4

import pytest
from unittest.mock import AsyncMock

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("JWT_SECRET", "test_jwt_secret")

from src.common.constants import UserRole
from src.core.tracking.models import LocationRecord, LocationUpdateIn
from src.core.users.models import AuthUser


T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Путь к файлу конфигурации."""
    return project_root / "config" / "config.json"


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "_comment_system": "Системные настройки",
        "PROJECT_NAME": "bus_tracker_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "LOG_LEVEL": "DEBUG",
        "ENVIRONMENT": "test",
        "API_HOST": "127.0.0.1",
        "API_PORT": 8100,
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_FORMAT": "json",
        "DB_HOST": "db.test",
        "DB_PORT": 5433,
        "DB_NAME": "bus_tracking_test",
        "DB_USER": "tester",
        "DB_PASSWORD": "",
        "DB_MIN_POOL_SIZE": 2,
        "DB_MAX_POOL_SIZE": 5,
        "DB_COMMAND_TIMEOUT": 30,
        "JWT_SECRET": "",
        "JWT_ALGORITHM": "HS256",
        "TOKEN_TTL_DAYS": 3,
        "POLL_INTERVAL_SECONDS": 5,
        "MAX_BATCH_SIZE": 50,
        "LOCATION_RETENTION_DAYS": 10,
        "EXPIRY_SWEEP_INTERVAL_SECONDS": 60,
        "EXPIRY_BATCH_SIZE": 100,
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2))
    return config_file


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

@pytest.fixture
def mock_db() -> AsyncMock:
    """Мок менеджера базы данных."""
    db = AsyncMock()
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.execute = AsyncMock(return_value="INSERT 0 1")
    db.fetchval = AsyncMock(return_value=None)
    db.health_check = AsyncMock(return_value=True)
    return db


# =============================================================================
# ФИКСТУРЫ ПОЛЬЗОВАТЕЛЕЙ
# =============================================================================

@pytest.fixture
def driver() -> AuthUser:
    return AuthUser(user_id=uuid4(), email="driver1@example.com", role=UserRole.DRIVER, name="John Driver")


@pytest.fixture
def other_driver() -> AuthUser:
    return AuthUser(user_id=uuid4(), email="driver2@example.com", role=UserRole.DRIVER, name="Bob Driver")


@pytest.fixture
def passenger() -> AuthUser:
    return AuthUser(user_id=uuid4(), email="user1@example.com", role=UserRole.USER, name="Jane User")


# =============================================================================
# IN-MEMORY ХРАНИЛИЩЕ ДЛЯ LIVE-TRACKING
# =============================================================================

class FakeTrackingStore:
    """
    Рейсы и точки в памяти.

    Реализует методы LocationRepository и is_ride_active проекции,
    которые нужны опросчику и приёму точек.
    """

    def __init__(self, now: datetime = T0) -> None:
        self.now = now
        self.rides: dict[UUID, dict[str, Any]] = {}
        self.records: list[LocationRecord] = []
        self._next_id = 1
        self.fail_reads = False

    # --- рейсы ---

    def add_ride(self, driver_id: UUID, status: str = "in_progress") -> UUID:
        ride_id = uuid4()
        self.rides[ride_id] = {"driver_id": driver_id, "status": status}
        return ride_id

    def end_ride(self, ride_id: UUID) -> None:
        self.rides[ride_id]["status"] = "ended"

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)

    def store(self, ride_id: UUID, latitude: float, longitude: float, **extra: Any) -> LocationRecord:
        record = LocationRecord(
            id=self._next_id,
            ride_id=ride_id,
            latitude=latitude,
            longitude=longitude,
            speed=extra.get("speed"),
            heading=extra.get("heading"),
            timestamp=extra.get("timestamp", self.now),
        )
        self._next_id += 1
        self.records.append(record)
        return record

    # --- интерфейс проекции ---

    async def is_ride_active(self, ride_id: UUID) -> bool:
        self._check()
        ride = self.rides.get(ride_id)
        return ride is not None and ride["status"] == "in_progress"

    # --- интерфейс LocationRepository ---

    async def find_active_owned_ride_ids(self, ride_ids, driver_id: UUID) -> set[UUID]:
        return {
            rid for rid in ride_ids
            if rid in self.rides
            and self.rides[rid]["driver_id"] == driver_id
            and self.rides[rid]["status"] == "in_progress"
        }

    async def insert_batch(self, driver_id: UUID, updates: list[LocationUpdateIn]) -> int:
        valid = await self.find_active_owned_ride_ids({u.ride_id for u in updates}, driver_id)
        count = 0
        for u in updates:
            if u.ride_id in valid:
                self.store(u.ride_id, u.latitude, u.longitude, speed=u.speed, heading=u.heading)
                count += 1
        return count

    async def current_timestamp(self) -> datetime:
        self._check()
        return self.now

    async def find_latest_since(self, ride_id: UUID, watermark: datetime) -> Optional[LocationRecord]:
        self._check()
        candidates = [r for r in self.records if r.ride_id == ride_id and r.timestamp > watermark]
        if not candidates:
            return None
        return max(candidates, key=lambda r: (r.timestamp, r.id))

    async def find_latest(self, ride_id: UUID) -> Optional[LocationRecord]:
        candidates = [r for r in self.records if r.ride_id == ride_id]
        return max(candidates, key=lambda r: (r.timestamp, r.id)) if candidates else None

    def _check(self) -> None:
        if self.fail_reads:
            raise ConnectionResetError("storage unavailable")


@pytest.fixture
def store() -> FakeTrackingStore:
    return FakeTrackingStore()
