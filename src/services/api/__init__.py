# src/services/api/__init__.py
"""
HTTP и WebSocket адаптеры Bus Tracker.
"""

from src.services.api.app import create_app

__all__ = ["create_app"]
