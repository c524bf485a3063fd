# src/infra/__init__.py
"""
Инфраструктурный слой.
Работа с PostgreSQL.
"""

from src.infra.database import DatabaseManager, retry_on_connection_error

__all__ = [
    "DatabaseManager",
    "retry_on_connection_error",
]
