# src/core/routes/__init__.py
from src.core.routes.models import Route, RouteCreateDTO
from src.core.routes.repository import RouteRepository
from src.core.routes.service import RouteService

__all__ = ["Route", "RouteCreateDTO", "RouteRepository", "RouteService"]
