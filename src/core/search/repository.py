# src/core/search/repository.py
"""
Запросы чтения для поиска: маршруты + активные рейсы + водители.
"""

from __future__ import annotations

from typing import Any, List, Optional
from uuid import UUID

from asyncpg import Record

from src.core.search.models import SearchFilters
from src.infra.database import DatabaseManager


def escape_like(value: str) -> str:
    """Экранирует спецсимволы LIKE (\\, %, _)."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_pattern(value: str) -> str:
    """Шаблон ILIKE для поиска подстроки."""
    return f"%{escape_like(value)}%"


class SearchRepository:
    """Репозиторий чтения для пассажирского поиска."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def find_routes_with_active_rides(self, filters: SearchFilters) -> List[Record]:
        """
        Строки (маршрут, активный рейс) по фильтрам.
        Упорядочены по названию маршрута, рейсы маршрута новые первыми.
        """
        conditions = ["rides.status = 'in_progress'"]
        params: list[Any] = []

        if filters.query:
            params.append(contains_pattern(filters.query))
            n = len(params)
            conditions.append(
                f"(routes.name ILIKE ${n} ESCAPE '\\' OR routes.description ILIKE ${n} ESCAPE '\\')"
            )
        if filters.start_location:
            params.append(contains_pattern(filters.start_location))
            conditions.append(f"routes.start_location ILIKE ${len(params)} ESCAPE '\\'")
        if filters.end_location:
            params.append(contains_pattern(filters.end_location))
            conditions.append(f"routes.end_location ILIKE ${len(params)} ESCAPE '\\'")

        query = f"""
            SELECT
                routes.id AS route_id,
                routes.name AS route_name,
                routes.description AS route_description,
                routes.start_location,
                routes.end_location,
                routes.estimated_duration_minutes,
                users.name AS driver_name,
                rides.id AS ride_id,
                rides.started_at
            FROM routes
            JOIN users ON users.id = routes.driver_id
            JOIN rides ON rides.route_id = routes.id
            WHERE {" AND ".join(conditions)}
            ORDER BY routes.name, routes.id, rides.started_at DESC
        """
        return await self._db.fetch(query, *params)

    async def find_active_ride_details(self, ride_id: UUID) -> Optional[Record]:
        """Рейс in_progress с маршрутом и именем водителя."""
        return await self._db.fetchrow(
            """
            SELECT
                rides.id,
                rides.route_id,
                routes.name AS route_name,
                users.name AS driver_name,
                routes.start_location,
                routes.end_location,
                rides.started_at,
                routes.estimated_duration_minutes
            FROM rides
            JOIN routes ON routes.id = rides.route_id
            JOIN users ON users.id = rides.driver_id
            WHERE rides.id = $1 AND rides.status = 'in_progress'
            """,
            ride_id,
        )

    async def is_ride_active(self, ride_id: UUID) -> bool:
        return bool(
            await self._db.fetchval(
                "SELECT EXISTS (SELECT 1 FROM rides WHERE id = $1 AND status = 'in_progress')",
                ride_id,
            )
        )
