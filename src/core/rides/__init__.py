# src/core/rides/__init__.py
from src.core.rides.models import ActiveRideResponse, EndRideRequest, Ride, StartRideRequest
from src.core.rides.repository import RideRepository
from src.core.rides.service import RideRegistry
from src.core.rides.state_machine import RideStateMachine

__all__ = [
    "Ride",
    "StartRideRequest",
    "EndRideRequest",
    "ActiveRideResponse",
    "RideRepository",
    "RideRegistry",
    "RideStateMachine",
]
