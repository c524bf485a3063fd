# src/core/users/repository.py
"""
Репозиторий пользователей.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from asyncpg import Record

from src.common.constants import UserRole
from src.core.users.models import User
from src.infra.database import DatabaseManager


_USER_COLUMNS = "id, email, password_hash, name, role, phone, created_at"


class UserRepository:
    """Репозиторий пользователей."""

    def __init__(self, db: DatabaseManager) -> None:
        """
        Args:
            db: Менеджер базы данных (Dependency Injection)
        """
        self._db = db

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Получает пользователя по ID."""
        row = await self._db.fetchrow(
            f"SELECT {_USER_COLUMNS} FROM users WHERE id = $1",
            user_id,
        )
        return self._row_to_user(row) if row else None

    async def get_by_email(self, email: str) -> Optional[User]:
        """Получает пользователя по email (без учёта регистра)."""
        row = await self._db.fetchrow(
            f"SELECT {_USER_COLUMNS} FROM users WHERE LOWER(email) = LOWER($1)",
            email,
        )
        return self._row_to_user(row) if row else None

    async def create(
        self,
        email: str,
        password_hash: str,
        name: str,
        role: UserRole,
        phone: Optional[str] = None,
    ) -> User:
        """
        Создаёт пользователя.

        Raises:
            asyncpg.UniqueViolationError: email уже занят
        """
        row = await self._db.fetchrow(
            f"""
            INSERT INTO users (email, password_hash, name, role, phone)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {_USER_COLUMNS}
            """,
            email,
            password_hash,
            name,
            role.value,
            phone,
        )
        return self._row_to_user(row)

    @staticmethod
    def _row_to_user(row: Record) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            name=row["name"],
            role=UserRole(row["role"]),
            phone=row["phone"],
            created_at=row["created_at"],
        )
