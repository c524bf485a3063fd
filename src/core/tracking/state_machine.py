# src/core/tracking/state_machine.py
"""
Состояния сессии live-tracking: INIT -> ACTIVE -> CLOSED.
"""

from src.common.constants import StreamState


class StreamStateMachine:
    ALLOWED_TRANSITIONS = {
        StreamState.INIT: [StreamState.ACTIVE, StreamState.CLOSED],
        StreamState.ACTIVE: [StreamState.CLOSED],
        StreamState.CLOSED: [],
    }

    def __init__(self) -> None:
        self._state = StreamState.INIT

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def is_closed(self) -> bool:
        return self._state == StreamState.CLOSED

    @staticmethod
    def can_transition(current_state: str, new_state: str) -> bool:
        try:
            curr = StreamState(current_state)
            new = StreamState(new_state)
            return new in StreamStateMachine.ALLOWED_TRANSITIONS.get(curr, [])
        except ValueError:
            return False

    def transition(self, new_state: StreamState) -> None:
        """Raises ValueError, если переход запрещён."""
        if not self.can_transition(self._state, new_state):
            raise ValueError(f"Недопустимый переход сессии: {self._state} -> {new_state}")
        self._state = new_state

    def close(self) -> None:
        """Переводит в CLOSED из любого состояния; повторный вызов ничего не делает."""
        if not self.is_closed:
            self.transition(StreamState.CLOSED)
