# src/core/users/models.py
"""
Модели данных пользователей и аутентификации.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.common.constants import UserRole
from src.shared.models.common import CamelModel


class User(BaseModel):
    """Учётная запись (строка таблицы users)."""

    id: UUID = Field(..., description="ID пользователя")
    email: str = Field(..., description="Email (уникален)")
    password_hash: str = Field(..., description="bcrypt-хэш пароля")
    name: str = Field(..., description="Отображаемое имя")
    role: UserRole = Field(..., description="Роль пользователя")
    phone: Optional[str] = Field(None, description="Номер телефона")
    created_at: Optional[datetime] = Field(None, description="Дата регистрации")

    class Config:
        from_attributes = True


class AuthUser(BaseModel):
    """Данные вызывающего, извлечённые из токена."""

    user_id: UUID
    email: str
    role: UserRole
    name: str

    @property
    def is_driver(self) -> bool:
        """Является ли пользователь водителем."""
        return self.role == UserRole.DRIVER


class SignupRequest(CamelModel):
    """Регистрация."""

    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=6, max_length=72)
    name: str = Field(..., min_length=1, max_length=100)
    role: UserRole
    phone: Optional[str] = Field(None, max_length=32)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v:
            raise ValueError("Некорректный email")
        return v


class LoginRequest(CamelModel):
    """Вход по email и паролю."""

    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=72)


class UserInfo(CamelModel):
    """Публичные данные пользователя."""

    id: UUID
    email: str
    name: str
    role: UserRole


class AuthResponse(CamelModel):
    """Токен и данные пользователя."""

    token: str
    user: UserInfo
