# src/services/__init__.py
"""
Сервисы приложения.

- api: FastAPI-приложение (REST + WebSocket live-tracking)
"""

__all__: list[str] = []
