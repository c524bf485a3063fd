# src/core/search/service.py
"""
Проекция для пассажиров: поиск маршрутов с активными рейсами и детали рейса.
Только чтение.
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from src.common.errors import NotFound
from src.core.search.models import (
    ActiveRideRef,
    LastLocation,
    RideDetails,
    RouteWithActiveRides,
    SearchFilters,
)
from src.core.search.repository import SearchRepository
from src.core.tracking.repository import LocationRepository


class RouteSearchProjection:
    """Поиск маршрутов и проверки статуса рейса."""

    def __init__(self, search_repo: SearchRepository, location_repo: LocationRepository) -> None:
        self._search_repo = search_repo
        self._location_repo = location_repo

    async def search(self, filters: SearchFilters) -> List[RouteWithActiveRides]:
        """
        Маршруты, у которых есть хотя бы один рейс in_progress.

        Фильтры регистронезависимые (подстрока) и объединяются через AND;
        query ищется в названии или описании.
        """
        rows = await self._search_repo.find_routes_with_active_rides(filters)

        routes: dict[UUID, RouteWithActiveRides] = {}
        for row in rows:
            route = routes.get(row["route_id"])
            if route is None:
                route = RouteWithActiveRides(
                    id=row["route_id"],
                    name=row["route_name"],
                    description=row["route_description"],
                    start_location=row["start_location"],
                    end_location=row["end_location"],
                    estimated_duration_minutes=row["estimated_duration_minutes"],
                    driver_name=row["driver_name"],
                )
                routes[route.id] = route
            route.active_rides.append(ActiveRideRef(id=row["ride_id"], started_at=row["started_at"]))

        return list(routes.values())

    async def get_ride_details(self, ride_id: UUID) -> RideDetails:
        """
        Детали активного рейса с последней точкой.

        Raises:
            NotFound: рейс не найден или не in_progress
        """
        row = await self._search_repo.find_active_ride_details(ride_id)
        if row is None:
            raise NotFound("Рейс не найден или неактивен")

        last = await self._location_repo.find_latest(ride_id)
        last_location = None
        if last is not None:
            last_location = LastLocation(
                latitude=last.latitude,
                longitude=last.longitude,
                speed=last.speed,
                heading=last.heading,
                timestamp=last.timestamp,
            )

        return RideDetails(
            id=row["id"],
            route_id=row["route_id"],
            route_name=row["route_name"],
            driver_name=row["driver_name"],
            start_location=row["start_location"],
            end_location=row["end_location"],
            started_at=row["started_at"],
            estimated_duration_minutes=row["estimated_duration_minutes"],
            last_location=last_location,
        )

    async def is_ride_active(self, ride_id: UUID) -> bool:
        """Рейс существует и in_progress."""
        return await self._search_repo.is_ride_active(ride_id)
