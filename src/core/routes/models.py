# src/core/routes/models.py
"""
Модели маршрутов.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from src.shared.models.common import CamelModel


class Route(CamelModel):
    """Маршрут, принадлежащий одному водителю."""

    id: UUID = Field(..., description="ID маршрута")
    driver_id: UUID = Field(..., description="ID водителя-владельца")
    name: str = Field(..., description="Название маршрута")
    description: Optional[str] = Field(None, description="Описание")
    start_location: str = Field(..., description="Начальная точка")
    end_location: str = Field(..., description="Конечная точка")
    estimated_duration_minutes: Optional[int] = Field(None, description="Оценка длительности (мин)")
    created_at: Optional[datetime] = Field(None, description="Дата создания")


class RouteCreateDTO(CamelModel):
    """Данные для создания маршрута."""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    start_location: str = Field(..., min_length=1, max_length=200)
    end_location: str = Field(..., min_length=1, max_length=200)
    estimated_duration_minutes: Optional[int] = Field(None, gt=0, le=24 * 60)

    @field_validator("name", "start_location", "end_location")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Поле не может быть пустым")
        return v
