# src/core/tracking/sessions.py
"""
Менеджер сессий live-tracking.
Запускает опросчик каждой сессии отдельной задачей и следит за отключением зрителя.
"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional
from uuid import UUID

from src.common.constants import StreamState, TypeMsg
from src.common.logger import log_info
from src.core.tracking.models import LocationStreamMessage
from src.core.tracking.poller import LocationPoller, SendFunc
from src.core.tracking.repository import LocationRepository


@dataclass
class StreamSession:
    """Информация о сессии."""
    session_id: int
    ride_id: UUID
    poller: LocationPoller
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    task: Optional[asyncio.Task] = None


class StreamSessionManager:
    """
    Менеджер сессий просмотра рейсов.

    Зрители одного рейса опрашивают хранилище независимо.
    """

    def __init__(
        self,
        location_repo: LocationRepository,
        projection: Any,
        poll_interval: float = 15,
    ) -> None:
        self._location_repo = location_repo
        self._projection = projection
        self._poll_interval = poll_interval

        # session_id -> StreamSession
        self._sessions: dict[int, StreamSession] = {}
        self._ids = itertools.count(1)

        # Для статистики
        self._total_sessions: int = 0
        self._total_messages_sent: int = 0

    @property
    def active_sessions(self) -> int:
        """Количество активных сессий."""
        return len(self._sessions)

    def create_poller(self, ride_id: UUID, send: SendFunc) -> LocationPoller:
        """Создаёт опросчик, считающий отправленные сообщения."""

        async def counted_send(message: LocationStreamMessage) -> None:
            await send(message)
            self._total_messages_sent += 1

        return LocationPoller(
            ride_id=ride_id,
            location_repo=self._location_repo,
            projection=self._projection,
            send=counted_send,
            poll_interval=self._poll_interval,
        )

    async def run_session(
        self,
        ride_id: UUID,
        send: SendFunc,
        wait_disconnect: Callable[[], Awaitable[Any]],
    ) -> StreamState:
        """
        Выполняет сессию до закрытия опросчика или отключения зрителя.
        Проигравшая задача отменяется.

        Returns:
            Состояние опросчика на момент выхода (CLOSED)
        """
        poller = self.create_poller(ride_id, send)
        session = StreamSession(session_id=next(self._ids), ride_id=ride_id, poller=poller)

        poll_task = asyncio.create_task(poller.run())
        disconnect_task = asyncio.create_task(wait_disconnect())
        session.task = poll_task

        self._sessions[session.session_id] = session
        self._total_sessions += 1
        await log_info(
            f"Сессия {session.session_id} для рейса {ride_id} открыта "
            f"(зрителей рейса: {self.get_sessions_for_ride(ride_id)})",
            type_msg=TypeMsg.DEBUG,
        )

        try:
            await asyncio.wait({poll_task, disconnect_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            # Снимаем с учёта до первого await: отменённая задача эндпоинта
            # может получить CancelledError на любом следующем await
            self._sessions.pop(session.session_id, None)
            for task in (poll_task, disconnect_task):
                if not task.done():
                    task.cancel()
            await log_info(
                f"Сессия {session.session_id} для рейса {ride_id} закрыта "
                f"(отправлено {poller.messages_sent})",
                type_msg=TypeMsg.DEBUG,
            )
            await asyncio.gather(poll_task, disconnect_task, return_exceptions=True)

        return poller.state

    async def close_all(self) -> None:
        """Отменяет все живые сессии (остановка сервера)."""
        tasks = [s.task for s in self._sessions.values() if s.task is not None and not s.task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        await log_info(f"Закрыто сессий live-tracking: {len(tasks)}", type_msg=TypeMsg.INFO)

    def get_sessions_for_ride(self, ride_id: UUID) -> int:
        """Количество зрителей рейса."""
        return sum(1 for s in self._sessions.values() if s.ride_id == ride_id)

    def get_stats(self) -> dict[str, Any]:
        """Получить статистику."""
        return {
            "active_sessions": len(self._sessions),
            "total_sessions": self._total_sessions,
            "total_messages_sent": self._total_messages_sent,
            "rides_watched": len({s.ride_id for s in self._sessions.values()}),
        }
