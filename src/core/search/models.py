# src/core/search/models.py
"""
Модели поиска маршрутов и деталей рейса для пассажиров.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from src.shared.models.common import CamelModel


class SearchFilters(CamelModel):
    """Фильтры поиска. Пустые строки считаются отсутствующими."""

    query: Optional[str] = Field(None, max_length=200)
    start_location: Optional[str] = Field(None, max_length=200)
    end_location: Optional[str] = Field(None, max_length=200)

    @field_validator("query", "start_location", "end_location")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class ActiveRideRef(CamelModel):
    id: UUID
    started_at: Optional[datetime] = None


class RouteWithActiveRides(CamelModel):
    """Маршрут с активными рейсами (новые первыми)."""

    id: UUID
    name: str
    description: Optional[str] = None
    start_location: str
    end_location: str
    estimated_duration_minutes: Optional[int] = None
    driver_name: str
    active_rides: List[ActiveRideRef] = Field(default_factory=list)


class SearchRoutesResponse(CamelModel):
    routes: List[RouteWithActiveRides] = Field(default_factory=list)


class LastLocation(CamelModel):
    latitude: float
    longitude: float
    speed: Optional[float] = None
    heading: Optional[float] = None
    timestamp: datetime


class RideDetails(CamelModel):
    """Детали активного рейса для пассажира."""

    id: UUID
    route_id: UUID
    route_name: str
    driver_name: str
    start_location: str
    end_location: str
    started_at: Optional[datetime] = None
    estimated_duration_minutes: Optional[int] = None
    last_location: Optional[LastLocation] = None
