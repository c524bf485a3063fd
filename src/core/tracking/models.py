# src/core/tracking/models.py
"""
Модели геолокации рейса.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.shared.models.common import CamelModel


LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)
HEADING_RANGE = (0.0, 360.0)


class LocationUpdateIn(CamelModel):
    """Одна точка от водителя. Время присваивает сервер."""

    ride_id: UUID = Field(..., description="ID рейса")
    latitude: float = Field(..., ge=-90, le=90, allow_inf_nan=False, description="Широта")
    longitude: float = Field(..., ge=-180, le=180, allow_inf_nan=False, description="Долгота")
    speed: Optional[float] = Field(None, ge=0, allow_inf_nan=False, description="Скорость")
    heading: Optional[float] = Field(None, ge=0, le=360, allow_inf_nan=False, description="Курс (градусы)")


class LocationBatchIn(CamelModel):
    """Пакет точек от водителя."""

    updates: List[LocationUpdateIn] = Field(default_factory=list)


class LocationRecord(BaseModel):
    """Сохранённая точка (строка location_updates)."""

    id: int
    ride_id: UUID
    latitude: float
    longitude: float
    speed: Optional[float] = None
    heading: Optional[float] = None
    timestamp: datetime

    class Config:
        from_attributes = True


class LocationStreamMessage(CamelModel):
    """Сообщение live-tracking для пассажира."""

    ride_id: UUID
    latitude: float
    longitude: float
    speed: Optional[float] = None
    heading: Optional[float] = None
    timestamp: datetime

    @classmethod
    def from_record(cls, record: LocationRecord) -> "LocationStreamMessage":
        return cls(
            ride_id=record.ride_id,
            latitude=record.latitude,
            longitude=record.longitude,
            speed=record.speed,
            heading=record.heading,
            timestamp=record.timestamp,
        )

    def to_wire(self) -> dict:
        """JSON-совместимый словарь в camelCase без пустых полей."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class StreamHandshake(CamelModel):
    """Первое сообщение клиента в /location/stream."""

    ride_id: UUID
