# src/worker/__init__.py
"""
Фоновые воркеры.
"""

from src.worker.base import BaseWorker
from src.worker.expiry import ExpirySweeper

__all__ = ["BaseWorker", "ExpirySweeper"]
