# src/core/rides/service.py
"""
Реестр рейсов: старт, завершение и активный рейс водителя.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

import asyncpg

from src.common.constants import TypeMsg
from src.common.errors import Conflict, NotFound
from src.common.logger import log_info
from src.core.rides.models import Ride
from src.core.rides.repository import RideRepository
from src.core.routes.repository import RouteRepository
from src.core.users.models import AuthUser
from src.core.users.service import ensure_driver


ACTIVE_RIDE_EXISTS = "У водителя уже есть активный рейс"


class RideRegistry:
    """
    Управляет жизненным циклом рейсов.

    Два параллельных start_ride одного водителя: один успешен,
    второй получает Conflict от уникального индекса.
    """

    def __init__(self, ride_repo: RideRepository, route_repo: RouteRepository) -> None:
        self._ride_repo = ride_repo
        self._route_repo = route_repo

    async def start_ride(self, caller: AuthUser, route_id: UUID) -> Ride:
        """
        Начинает рейс по маршруту водителя.

        Raises:
            PermissionDenied: вызывающий не водитель
            NotFound: маршрут не найден или чужой
            Conflict: у водителя уже есть активный рейс
        """
        ensure_driver(caller, "начинать рейсы")

        route = await self._route_repo.get_owned(route_id, caller.user_id)
        if route is None:
            raise NotFound("Маршрут не найден или не принадлежит водителю")

        if await self._ride_repo.find_active_by_driver(caller.user_id) is not None:
            raise Conflict(ACTIVE_RIDE_EXISTS)

        try:
            ride = await self._ride_repo.create_active(route.id, caller.user_id)
        except asyncpg.UniqueViolationError as e:
            raise Conflict(ACTIVE_RIDE_EXISTS) from e

        ride.route_name = route.name
        await log_info(
            f"Водитель {caller.user_id} начал рейс {ride.id} по маршруту {route.id}",
            type_msg=TypeMsg.INFO,
        )
        return ride

    async def end_ride(self, caller: AuthUser, ride_id: UUID) -> Ride:
        """
        Завершает активный рейс водителя.

        Raises:
            PermissionDenied: вызывающий не водитель
            NotFound: нет активного рейса с таким ID у водителя
        """
        ensure_driver(caller, "завершать рейсы")

        ride = await self._ride_repo.end_active(ride_id, caller.user_id)
        if ride is None:
            raise NotFound("Активный рейс не найден")

        await log_info(f"Водитель {caller.user_id} завершил рейс {ride.id}", type_msg=TypeMsg.INFO)
        return ride

    async def get_active_ride(self, caller: AuthUser) -> Optional[Ride]:
        """Активный рейс водителя или None."""
        ensure_driver(caller, "просматривать активный рейс")
        return await self._ride_repo.find_active_by_driver(caller.user_id)
