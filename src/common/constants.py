# src/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class UserRole(str, Enum):
    """Роли пользователей."""
    DRIVER = "driver"
    USER = "user"

    def __str__(self) -> str:
        return self.value


class RideStatus(str, Enum):
    """Статусы рейса."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    ENDED = "ended"

    def __str__(self) -> str:
        return self.value


class StreamState(str, Enum):
    """Состояния сессии live-tracking."""
    INIT = "init"
    ACTIVE = "active"
    CLOSED = "closed"

    def __str__(self) -> str:
        return self.value
