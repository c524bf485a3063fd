# src/core/tracking/repository.py
"""
Репозиторий точек геолокации.

Таблица location_updates только дополняется; время точки ставит
PostgreSQL (NOW()), поэтому приём и опрос живут на одних часах.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence
from uuid import UUID

from asyncpg import Record

from src.core.tracking.models import LocationRecord, LocationUpdateIn
from src.infra.database import DatabaseManager


_LOCATION_COLUMNS = "id, ride_id, latitude, longitude, speed, heading, timestamp"


def _affected_rows(status: str) -> int:
    """Число строк из статуса команды ("INSERT 0 3", "DELETE 5")."""
    try:
        return int(status.split()[-1])
    except (AttributeError, IndexError, ValueError):
        return 0


class LocationRepository:
    """Репозиторий точек геолокации."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def find_active_owned_ride_ids(
        self,
        ride_ids: Iterable[UUID],
        driver_id: UUID,
    ) -> set[UUID]:
        """ID рейсов из набора, которые in_progress и принадлежат водителю."""
        rows = await self._db.fetch(
            """
            SELECT id
            FROM rides
            WHERE id = ANY($1::uuid[]) AND driver_id = $2 AND status = 'in_progress'
            """,
            list(ride_ids),
            driver_id,
        )
        return {row["id"] for row in rows}

    async def insert_batch(
        self,
        driver_id: UUID,
        updates: Sequence[LocationUpdateIn],
    ) -> int:
        """
        Сохраняет точки одним запросом и возвращает число вставленных строк.

        Строка вставляется, только если рейс на момент вставки in_progress
        и принадлежит водителю: завершённый между проверкой и записью
        рейс точку уже не получит. Порядок id повторяет порядок в пакете.
        """
        if not updates:
            return 0

        status = await self._db.execute(
            """
            INSERT INTO location_updates (ride_id, latitude, longitude, speed, heading)
            SELECT u.ride_id, u.latitude, u.longitude, u.speed, u.heading
            FROM unnest($1::uuid[], $2::float8[], $3::float8[], $4::float8[], $5::float8[])
                 WITH ORDINALITY AS u(ride_id, latitude, longitude, speed, heading, ord)
            JOIN rides r
              ON r.id = u.ride_id AND r.driver_id = $6 AND r.status = 'in_progress'
            ORDER BY u.ord
            """,
            [u.ride_id for u in updates],
            [u.latitude for u in updates],
            [u.longitude for u in updates],
            [u.speed for u in updates],
            [u.heading for u in updates],
            driver_id,
        )
        return _affected_rows(status)

    async def find_latest_since(
        self,
        ride_id: UUID,
        watermark: datetime,
    ) -> Optional[LocationRecord]:
        """Самая свежая точка рейса строго новее watermark."""
        row = await self._db.fetchrow(
            f"""
            SELECT {_LOCATION_COLUMNS}
            FROM location_updates
            WHERE ride_id = $1 AND timestamp > $2
            ORDER BY timestamp DESC, id DESC
            LIMIT 1
            """,
            ride_id,
            watermark,
        )
        return self._row_to_record(row) if row else None

    async def find_latest(self, ride_id: UUID) -> Optional[LocationRecord]:
        """Последняя известная точка рейса."""
        row = await self._db.fetchrow(
            f"""
            SELECT {_LOCATION_COLUMNS}
            FROM location_updates
            WHERE ride_id = $1
            ORDER BY timestamp DESC, id DESC
            LIMIT 1
            """,
            ride_id,
        )
        return self._row_to_record(row) if row else None

    async def current_timestamp(self) -> datetime:
        """Текущее время по часам БД."""
        return await self._db.fetchval("SELECT NOW()")

    async def delete_older_than(self, cutoff: datetime, batch_size: int) -> int:
        """Удаляет не более batch_size точек старше cutoff."""
        status = await self._db.execute(
            """
            DELETE FROM location_updates
            WHERE id IN (
                SELECT id
                FROM location_updates
                WHERE timestamp < $1
                ORDER BY timestamp
                LIMIT $2
            )
            """,
            cutoff,
            batch_size,
        )
        return _affected_rows(status)

    @staticmethod
    def _row_to_record(row: Record) -> LocationRecord:
        return LocationRecord(
            id=row["id"],
            ride_id=row["ride_id"],
            latitude=row["latitude"],
            longitude=row["longitude"],
            speed=row["speed"],
            heading=row["heading"],
            timestamp=row["timestamp"],
        )
