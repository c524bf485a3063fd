# src/core/__init__.py
"""
Доменный слой (Core Domain).
Бизнес-логика рейсов и live-tracking; доступ к БД только через репозитории.
"""

from src.core.users import AuthService, UserRepository
from src.core.routes import RouteService, RouteRepository
from src.core.rides import RideRegistry, RideRepository
from src.core.tracking import LocationIngestor, LocationRepository, StreamSessionManager
from src.core.search import RouteSearchProjection, SearchRepository

__all__ = [
    "AuthService",
    "UserRepository",
    "RouteService",
    "RouteRepository",
    "RideRegistry",
    "RideRepository",
    "LocationIngestor",
    "LocationRepository",
    "StreamSessionManager",
    "RouteSearchProjection",
    "SearchRepository",
]
