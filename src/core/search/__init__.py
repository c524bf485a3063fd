# src/core/search/__init__.py
from src.core.search.models import (
    ActiveRideRef,
    LastLocation,
    RideDetails,
    RouteWithActiveRides,
    SearchFilters,
    SearchRoutesResponse,
)
from src.core.search.repository import SearchRepository, contains_pattern, escape_like
from src.core.search.service import RouteSearchProjection

__all__ = [
    "SearchFilters",
    "ActiveRideRef",
    "RouteWithActiveRides",
    "SearchRoutesResponse",
    "LastLocation",
    "RideDetails",
    "SearchRepository",
    "RouteSearchProjection",
    "escape_like",
    "contains_pattern",
]
