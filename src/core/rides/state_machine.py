# src/core/rides/state_machine.py
"""
Допустимые переходы статусов рейса.
"""

from src.common.constants import RideStatus


class RideStateMachine:
    ALLOWED_TRANSITIONS = {
        RideStatus.PENDING: [RideStatus.IN_PROGRESS, RideStatus.ENDED],
        RideStatus.IN_PROGRESS: [RideStatus.ENDED],
        RideStatus.ENDED: [],
    }

    @staticmethod
    def can_transition(current_status: str, new_status: str) -> bool:
        try:
            curr = RideStatus(current_status)
            new = RideStatus(new_status)
            return new in RideStateMachine.ALLOWED_TRANSITIONS.get(curr, [])
        except ValueError:
            return False

    @staticmethod
    def ensure_transition(current_status: str, new_status: str) -> None:
        """Raises ValueError, если переход запрещён."""
        if not RideStateMachine.can_transition(current_status, new_status):
            raise ValueError(f"Недопустимый переход рейса: {current_status} -> {new_status}")
