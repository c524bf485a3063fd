# src/core/routes/service.py
"""
Сервис маршрутов водителя.
"""

from __future__ import annotations

from typing import List

from src.common.constants import TypeMsg
from src.common.logger import log_info
from src.core.routes.models import Route, RouteCreateDTO
from src.core.routes.repository import RouteRepository
from src.core.users.models import AuthUser
from src.core.users.service import ensure_driver


class RouteService:
    """Создание и просмотр маршрутов."""

    def __init__(self, route_repo: RouteRepository) -> None:
        self._route_repo = route_repo

    async def create_route(self, caller: AuthUser, dto: RouteCreateDTO) -> Route:
        """
        Создаёт маршрут от имени водителя.

        Raises:
            PermissionDenied: вызывающий не водитель
        """
        ensure_driver(caller, "создавать маршруты")

        route = await self._route_repo.create(caller.user_id, dto)
        await log_info(
            f"Водитель {caller.user_id} создал маршрут {route.id} ({route.name})",
            type_msg=TypeMsg.INFO,
        )
        return route

    async def list_routes(self, caller: AuthUser) -> List[Route]:
        """Маршруты водителя, новые первыми."""
        ensure_driver(caller, "просматривать свои маршруты")
        return await self._route_repo.list_by_driver(caller.user_id)
