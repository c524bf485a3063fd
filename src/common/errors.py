# src/common/errors.py
"""
Иерархия ошибок предметной области.

Каждая ошибка несёт HTTP-статус и машинный код, чтобы транспортный слой
отображал их единообразно.
"""

from __future__ import annotations


class BusTrackerError(Exception):
    """Базовая ошибка сервиса."""

    status_code: int = 500
    error_code: str = "internal"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.error_code


class Unauthenticated(BusTrackerError):
    """Отсутствует или невалиден токен."""

    status_code = 401
    error_code = "unauthenticated"


class PermissionDenied(BusTrackerError):
    """Роль не позволяет выполнить операцию."""

    status_code = 403
    error_code = "permission_denied"


class NotFound(BusTrackerError):
    """Объект не найден или не принадлежит вызывающему."""

    status_code = 404
    error_code = "not_found"


class Conflict(BusTrackerError):
    """Объект уже существует (например, активный рейс водителя)."""

    status_code = 409
    error_code = "already_exists"


class InvalidArgument(BusTrackerError):
    """Некорректные входные данные."""

    status_code = 400
    error_code = "invalid_argument"


class Internal(BusTrackerError):
    """Сбой хранилища на пути, который должен был завершиться успешно."""

    status_code = 500
    error_code = "internal"
