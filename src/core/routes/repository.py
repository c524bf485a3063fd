# src/core/routes/repository.py
"""
Репозиторий маршрутов.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from asyncpg import Record

from src.core.routes.models import Route, RouteCreateDTO
from src.infra.database import DatabaseManager


_ROUTE_COLUMNS = (
    "id, driver_id, name, description, start_location, end_location, "
    "estimated_duration_minutes, created_at"
)


class RouteRepository:
    """Репозиторий маршрутов."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def create(self, driver_id: UUID, dto: RouteCreateDTO) -> Route:
        """Создаёт маршрут водителя."""
        row = await self._db.fetchrow(
            f"""
            INSERT INTO routes (
                driver_id, name, description, start_location, end_location,
                estimated_duration_minutes
            )
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {_ROUTE_COLUMNS}
            """,
            driver_id,
            dto.name,
            dto.description,
            dto.start_location,
            dto.end_location,
            dto.estimated_duration_minutes,
        )
        return self._row_to_route(row)

    async def list_by_driver(self, driver_id: UUID) -> List[Route]:
        """Маршруты водителя, новые первыми."""
        rows = await self._db.fetch(
            f"""
            SELECT {_ROUTE_COLUMNS}
            FROM routes
            WHERE driver_id = $1
            ORDER BY created_at DESC
            """,
            driver_id,
        )
        return [self._row_to_route(row) for row in rows]

    async def get_owned(self, route_id: UUID, driver_id: UUID) -> Optional[Route]:
        """Маршрут, если он существует и принадлежит водителю."""
        row = await self._db.fetchrow(
            f"SELECT {_ROUTE_COLUMNS} FROM routes WHERE id = $1 AND driver_id = $2",
            route_id,
            driver_id,
        )
        return self._row_to_route(row) if row else None

    @staticmethod
    def _row_to_route(row: Record) -> Route:
        return Route(
            id=row["id"],
            driver_id=row["driver_id"],
            name=row["name"],
            description=row["description"],
            start_location=row["start_location"],
            end_location=row["end_location"],
            estimated_duration_minutes=row["estimated_duration_minutes"],
            created_at=row["created_at"],
        )
