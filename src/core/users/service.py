# src/core/users/service.py
"""
Сервис аутентификации.
Регистрация, вход и проверка JWT (HS256, python-jose).
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from uuid import UUID

import asyncpg
import bcrypt
from jose import jwt
from jose.exceptions import JWTError

from src.common.constants import TypeMsg, UserRole
from src.common.errors import Conflict, PermissionDenied, Unauthenticated
from src.common.logger import log_info
from src.core.users.models import AuthResponse, AuthUser, User, UserInfo
from src.core.users.repository import UserRepository


INVALID_CREDENTIALS = "Неверный email или пароль"


def hash_password(password: str) -> str:
    """Возвращает bcrypt-хэш пароля."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Сверяет пароль с bcrypt-хэшем."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Повреждённый хэш в БД
        return False


class AuthService:
    """
    Сервис аутентификации.

    Токен содержит claims userID, email, name, role и exp.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        secret: str,
        algorithm: str = "HS256",
        token_ttl_days: int = 7,
    ) -> None:
        """
        Args:
            user_repo: Репозиторий пользователей
            secret: Секрет подписи JWT
            algorithm: Алгоритм подписи
            token_ttl_days: Срок жизни токена (дни)
        """
        self._user_repo = user_repo
        self._secret = secret
        self._algorithm = algorithm
        self._token_ttl = timedelta(days=token_ttl_days)

    @classmethod
    def from_settings(cls, user_repo: UserRepository, auth_settings: Any) -> "AuthService":
        """Создаёт сервис из секции AuthSettings."""
        return cls(
            user_repo,
            secret=auth_settings.JWT_SECRET,
            algorithm=auth_settings.JWT_ALGORITHM,
            token_ttl_days=auth_settings.TOKEN_TTL_DAYS,
        )

    # =========================================================================
    # ТОКЕНЫ
    # =========================================================================

    def issue_token(self, user: User, now: Optional[datetime] = None) -> str:
        """Выпускает подписанный токен для пользователя."""
        now = now or datetime.now(timezone.utc)
        claims = {
            "userID": str(user.id),
            "email": user.email,
            "name": user.name,
            "role": user.role.value,
            "exp": int((now + self._token_ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify_token(self, token: Optional[str]) -> AuthUser:
        """
        Проверяет токен и возвращает данные вызывающего.

        Raises:
            Unauthenticated: токен отсутствует, подделан или истёк
        """
        if not token:
            raise Unauthenticated("Требуется токен авторизации")

        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            raise Unauthenticated("Недействительный токен") from e

        try:
            return AuthUser(
                user_id=UUID(payload["userID"]),
                email=payload["email"],
                role=UserRole(payload["role"]),
                name=payload["name"],
            )
        except (KeyError, ValueError, TypeError) as e:
            raise Unauthenticated("Недействительный токен") from e

    # =========================================================================
    # РЕГИСТРАЦИЯ И ВХОД
    # =========================================================================

    async def signup(
        self,
        email: str,
        password: str,
        name: str,
        role: UserRole,
        phone: Optional[str] = None,
    ) -> AuthResponse:
        """
        Регистрирует пользователя и сразу выпускает токен.

        Raises:
            Conflict: email уже зарегистрирован
        """
        existing = await self._user_repo.get_by_email(email)
        if existing is not None:
            raise Conflict("Пользователь с таким email уже существует")

        password_hash = await asyncio.to_thread(hash_password, password)

        try:
            user = await self._user_repo.create(
                email=email,
                password_hash=password_hash,
                name=name,
                role=role,
                phone=phone,
            )
        except asyncpg.UniqueViolationError as e:
            # Параллельная регистрация с тем же email
            raise Conflict("Пользователь с таким email уже существует") from e

        await log_info(
            f"Зарегистрирован пользователь {user.id} ({user.role})",
            type_msg=TypeMsg.INFO,
        )
        return self._auth_response(user)

    async def login(self, email: str, password: str) -> AuthResponse:
        """
        Вход по email и паролю.

        Raises:
            Unauthenticated: неизвестный email или неверный пароль
        """
        user = await self._user_repo.get_by_email(email)
        if user is None:
            raise Unauthenticated(INVALID_CREDENTIALS)

        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            raise Unauthenticated(INVALID_CREDENTIALS)

        return self._auth_response(user)

    @staticmethod
    def me(caller: AuthUser) -> UserInfo:
        """Данные вызывающего из токена."""
        return UserInfo(id=caller.user_id, email=caller.email, name=caller.name, role=caller.role)

    def _auth_response(self, user: User) -> AuthResponse:
        return AuthResponse(
            token=self.issue_token(user),
            user=UserInfo(id=user.id, email=user.email, name=user.name, role=user.role),
        )


def ensure_driver(caller: AuthUser, action: str) -> None:
    """
    Проверяет, что вызывающий является водителем.

    Raises:
        PermissionDenied: роль не driver
    """
    if not caller.is_driver:
        raise PermissionDenied(f"Только водители могут {action}")
