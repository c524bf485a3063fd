# src/services/api/dependencies.py
"""
Контейнер зависимостей API и FastAPI-провайдеры.

Контейнер создаётся в lifespan и хранится в app.state.container;
глобальных экземпляров нет.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from starlette.requests import HTTPConnection

from src.common.constants import TypeMsg
from src.common.logger import log_info, setup_logging
from src.config import Settings
from src.config.loader import get_project_root
from src.core.rides import RideRegistry, RideRepository
from src.core.routes import RouteRepository, RouteService
from src.core.search import RouteSearchProjection, SearchRepository
from src.core.tracking import LocationIngestor, LocationRepository, StreamSessionManager
from src.core.users import AuthService, UserRepository
from src.infra.database import DatabaseManager
from src.worker.expiry import ExpirySweeper


@dataclass
class Container:
    """Сервисы одного процесса API."""

    settings: Settings
    db: DatabaseManager
    auth: AuthService
    routes: RouteService
    rides: RideRegistry
    ingestor: LocationIngestor
    projection: RouteSearchProjection
    sessions: StreamSessionManager
    sweeper: Optional[ExpirySweeper] = None

    @classmethod
    def build(cls, settings: Settings, db: Optional[DatabaseManager] = None) -> "Container":
        """Собирает граф зависимостей поверх одного DatabaseManager."""
        db = db or DatabaseManager.from_settings(settings.database)

        user_repo = UserRepository(db)
        route_repo = RouteRepository(db)
        ride_repo = RideRepository(db)
        location_repo = LocationRepository(db)
        projection = RouteSearchProjection(SearchRepository(db), location_repo)

        return cls(
            settings=settings,
            db=db,
            auth=AuthService.from_settings(user_repo, settings.auth),
            routes=RouteService(route_repo),
            rides=RideRegistry(ride_repo, route_repo),
            ingestor=LocationIngestor(location_repo, settings.tracking.MAX_BATCH_SIZE),
            projection=projection,
            sessions=StreamSessionManager(
                location_repo,
                projection,
                poll_interval=settings.tracking.POLL_INTERVAL_SECONDS,
            ),
            sweeper=ExpirySweeper.from_settings(location_repo, settings.tracking),
        )

    async def startup(self) -> None:
        """Подключает БД, применяет схему и запускает очистку."""
        setup_logging()
        await self.db.connect()
        await self.db.apply_schema(get_project_root() / "migrations" / "init.sql")
        if self.sweeper is not None:
            await self.sweeper.start()
        await log_info("API готов к работе", type_msg=TypeMsg.INFO)

    async def shutdown(self) -> None:
        """Закрывает сессии, останавливает очистку и пул."""
        await self.sessions.close_all()
        if self.sweeper is not None:
            await self.sweeper.stop()
        await self.db.disconnect()


def get_container(connection: HTTPConnection) -> Container:
    """Контейнер текущего приложения (HTTP и WebSocket)."""
    return connection.app.state.container


def get_auth_service(container: Container = Depends(get_container)) -> AuthService:
    return container.auth


def get_route_service(container: Container = Depends(get_container)) -> RouteService:
    return container.routes


def get_ride_registry(container: Container = Depends(get_container)) -> RideRegistry:
    return container.rides


def get_ingestor(container: Container = Depends(get_container)) -> LocationIngestor:
    return container.ingestor


def get_projection(container: Container = Depends(get_container)) -> RouteSearchProjection:
    return container.projection


def get_session_manager(container: Container = Depends(get_container)) -> StreamSessionManager:
    return container.sessions
