# src/core/rides/models.py
"""
Модели рейсов.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from src.common.constants import RideStatus
from src.shared.models.common import CamelModel


class Ride(CamelModel):
    """Рейс водителя по маршруту."""

    id: UUID = Field(..., description="ID рейса")
    route_id: UUID = Field(..., description="ID маршрута")
    driver_id: UUID = Field(..., description="ID водителя")
    status: RideStatus = Field(..., description="Статус рейса")
    started_at: Optional[datetime] = Field(None, description="Время начала")
    ended_at: Optional[datetime] = Field(None, description="Время завершения")
    route_name: Optional[str] = Field(None, description="Название маршрута")


class StartRideRequest(CamelModel):
    route_id: UUID


class EndRideRequest(CamelModel):
    ride_id: UUID


class ActiveRideResponse(CamelModel):
    """Активный рейс водителя, если он есть."""

    ride: Optional[Ride] = None
