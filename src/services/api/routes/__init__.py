# src/services/api/routes/__init__.py
from src.services.api.routes.auth import router as auth_router
from src.services.api.routes.driver import router as driver_router
from src.services.api.routes.location import router as location_router
from src.services.api.routes.user import router as user_router

__all__ = ["auth_router", "driver_router", "location_router", "user_router"]
