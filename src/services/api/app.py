# src/services/api/app.py
"""
FastAPI приложение Bus Tracker.

REST endpoints:
- /auth/*            регистрация, вход, текущий пользователь
- /driver/*          маршруты и рейсы водителя
- /location/update   приём геолокации
- /user/*            поиск маршрутов и детали рейса
- GET /health        проверка здоровья
- GET /stats         статистика сессий live-tracking

WebSocket endpoints:
- /location/stream   live-tracking рейса
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Optional

import asyncpg
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.common.errors import BusTrackerError, Internal, InvalidArgument
from src.common.logger import log_error
from src.config import Settings, settings as default_settings
from src.core.tracking import StreamSessionManager
from src.services.api.dependencies import Container, get_session_manager
from src.services.api.routes import auth_router, driver_router, location_router, user_router
from src.shared.models.common import ErrorResponse, HealthStatus


SERVICE_NAME = "bus_tracker_api"


def _error_response(error: BusTrackerError, details: Optional[dict[str, Any]] = None) -> JSONResponse:
    body = ErrorResponse(error_code=error.error_code, message=error.message, details=details)
    return JSONResponse(status_code=error.status_code, content=body.model_dump(exclude_none=True))


async def handle_domain_error(request: Request, exc: BusTrackerError) -> JSONResponse:
    return _error_response(exc)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Нарушение схемы запроса отдаётся тем же конвертом, что и InvalidArgument."""
    errors = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return _error_response(InvalidArgument("Некорректный запрос"), details={"errors": errors})


async def handle_storage_error(request: Request, exc: asyncpg.PostgresError) -> JSONResponse:
    await log_error(
        f"Ошибка хранилища при {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )
    return _error_response(Internal("Внутренняя ошибка хранилища"))


def create_app(
    container: Optional[Container] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Создаёт приложение.

    Args:
        container: Готовый контейнер (тесты); иначе собирается в lifespan
        app_settings: Настройки; по умолчанию из config.json
    """
    app_settings = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Жизненный цикл приложения."""
        if getattr(app.state, "container", None) is None:
            app.state.container = Container.build(app_settings)

        await app.state.container.startup()
        try:
            yield
        finally:
            await app.state.container.shutdown()

    app = FastAPI(
        title="Bus Tracker API",
        description="Отслеживание автобусов в реальном времени: рейсы, геолокация и live-tracking.",
        version=app_settings.system.VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.container = container

    app.add_exception_handler(BusTrackerError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(asyncpg.PostgresError, handle_storage_error)

    app.include_router(auth_router)
    app.include_router(driver_router)
    app.include_router(location_router)
    app.include_router(user_router)

    @app.get("/health", response_model=HealthStatus, tags=["Health"])
    async def health_check(request: Request) -> HealthStatus:
        """Проверка здоровья сервиса и PostgreSQL."""
        db_ok = await request.app.state.container.db.health_check()
        return HealthStatus(
            service=SERVICE_NAME,
            status="healthy" if db_ok else "degraded",
            version=app_settings.system.VERSION,
            dependencies={"postgres": "healthy" if db_ok else "unhealthy"},
        )

    @app.get("/stats", tags=["Stats"])
    async def get_stats(
        sessions: StreamSessionManager = Depends(get_session_manager),
    ) -> dict[str, Any]:
        """Статистика сессий live-tracking."""
        return sessions.get_stats()

    return app
