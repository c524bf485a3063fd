# src/core/tracking/__init__.py
"""
Live-tracking: приём точек, опрос для пассажиров и срок хранения.
"""

from src.core.tracking.expiry import ExpiryPolicy
from src.core.tracking.ingestor import LocationIngestor, check_update
from src.core.tracking.models import (
    LocationBatchIn,
    LocationRecord,
    LocationStreamMessage,
    LocationUpdateIn,
    StreamHandshake,
)
from src.core.tracking.poller import LocationPoller
from src.core.tracking.repository import LocationRepository
from src.core.tracking.sessions import StreamSession, StreamSessionManager
from src.core.tracking.state_machine import StreamStateMachine

__all__ = [
    "LocationUpdateIn",
    "LocationBatchIn",
    "LocationRecord",
    "LocationStreamMessage",
    "StreamHandshake",
    "LocationRepository",
    "LocationIngestor",
    "check_update",
    "LocationPoller",
    "StreamStateMachine",
    "StreamSession",
    "StreamSessionManager",
    "ExpiryPolicy",
]
