# src/core/users/__init__.py
"""
Модуль пользователей: модели, репозиторий и аутентификация.
"""

from src.core.users.models import (
    AuthResponse,
    AuthUser,
    LoginRequest,
    SignupRequest,
    User,
    UserInfo,
)
from src.core.users.repository import UserRepository
from src.core.users.service import AuthService, ensure_driver, hash_password, verify_password

__all__ = [
    "User",
    "AuthUser",
    "UserInfo",
    "SignupRequest",
    "LoginRequest",
    "AuthResponse",
    "UserRepository",
    "AuthService",
    "hash_password",
    "verify_password",
    "ensure_driver",
]
