# src/core/rides/repository.py
"""
Репозиторий рейсов.

Инвариант "не более одного рейса in_progress на водителя" обеспечивает
частичный уникальный индекс uq_rides_active_driver.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from asyncpg import Record

from src.common.constants import RideStatus
from src.core.rides.models import Ride
from src.core.rides.state_machine import RideStateMachine
from src.infra.database import DatabaseManager


_RIDE_COLUMNS = "id, route_id, driver_id, status, started_at, ended_at"


class RideRepository:
    """Репозиторий рейсов."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def create_active(self, route_id: UUID, driver_id: UUID) -> Ride:
        """
        Создаёт рейс сразу в статусе in_progress.

        Raises:
            asyncpg.UniqueViolationError: у водителя уже есть активный рейс
        """
        RideStateMachine.ensure_transition(RideStatus.PENDING, RideStatus.IN_PROGRESS)
        row = await self._db.fetchrow(
            f"""
            INSERT INTO rides (route_id, driver_id, status, started_at)
            VALUES ($1, $2, $3, NOW())
            RETURNING {_RIDE_COLUMNS}
            """,
            route_id,
            driver_id,
            RideStatus.IN_PROGRESS.value,
        )
        return self._row_to_ride(row)

    async def find_active_by_driver(self, driver_id: UUID) -> Optional[Ride]:
        """Единственный рейс in_progress водителя с названием маршрута."""
        row = await self._db.fetchrow(
            """
            SELECT r.id, r.route_id, r.driver_id, r.status, r.started_at, r.ended_at,
                   rt.name AS route_name
            FROM rides r
            JOIN routes rt ON rt.id = r.route_id
            WHERE r.driver_id = $1 AND r.status = 'in_progress'
            """,
            driver_id,
        )
        return self._row_to_ride(row) if row else None

    async def transition(
        self,
        ride_id: UUID,
        driver_id: UUID,
        current_status: RideStatus,
        new_status: RideStatus,
    ) -> Optional[Ride]:
        """
        Условный переход статуса одним UPDATE.

        Returns:
            Обновлённый рейс или None, если рейса водителя в статусе
            current_status нет
        """
        RideStateMachine.ensure_transition(current_status, new_status)

        ended_at_sql = "NOW()" if new_status == RideStatus.ENDED else "ended_at"
        started_at_sql = "NOW()" if new_status == RideStatus.IN_PROGRESS else "started_at"
        row = await self._db.fetchrow(
            f"""
            UPDATE rides
            SET status = $4,
                started_at = {started_at_sql},
                ended_at = {ended_at_sql},
                updated_at = NOW()
            WHERE id = $1 AND driver_id = $2 AND status = $3
            RETURNING {_RIDE_COLUMNS}
            """,
            ride_id,
            driver_id,
            current_status.value,
            new_status.value,
        )
        return self._row_to_ride(row) if row else None

    async def end_active(self, ride_id: UUID, driver_id: UUID) -> Optional[Ride]:
        """Завершает рейс водителя, если он in_progress."""
        return await self.transition(ride_id, driver_id, RideStatus.IN_PROGRESS, RideStatus.ENDED)

    @staticmethod
    def _row_to_ride(row: Record) -> Ride:
        return Ride(
            id=row["id"],
            route_id=row["route_id"],
            driver_id=row["driver_id"],
            status=RideStatus(row["status"]),
            started_at=row["started_at"],
            ended_at=row["ended_at"],
            route_name=row["route_name"] if "route_name" in row.keys() else None,
        )
