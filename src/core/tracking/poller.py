# src/core/tracking/poller.py
"""
Опрос свежей геолокации рейса для одного пассажира.

Каждые poll_interval секунд берётся самая новая точка строго после
watermark и отправляется зрителю (не больше одной за такт). Сессия
закрывается, когда рейс перестал быть in_progress, при любой ошибке
такта или при отмене задачи.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional
from uuid import UUID

from src.common.constants import StreamState, TypeMsg
from src.common.logger import log_info, log_warning
from src.core.tracking.models import LocationStreamMessage
from src.core.tracking.repository import LocationRepository
from src.core.tracking.state_machine import StreamStateMachine


SendFunc = Callable[[LocationStreamMessage], Awaitable[None]]
SleepFunc = Callable[[float], Awaitable[Any]]


class LocationPoller:
    """Опрашивающий цикл одной сессии просмотра рейса."""

    def __init__(
        self,
        ride_id: UUID,
        location_repo: LocationRepository,
        projection: Any,
        send: SendFunc,
        poll_interval: float = 15,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """
        Args:
            ride_id: Отслеживаемый рейс
            location_repo: Репозиторий точек
            projection: Источник статуса рейса (is_ride_active)
            send: Отправка сообщения зрителю
            poll_interval: Интервал опроса (секунды)
            sleep: Функция ожидания между тактами
        """
        self.ride_id = ride_id
        self._location_repo = location_repo
        self._projection = projection
        self._send = send
        self._poll_interval = poll_interval
        self._sleep = sleep
        self._machine = StreamStateMachine()
        self._watermark: Optional[datetime] = None
        self.messages_sent = 0

    @property
    def state(self) -> StreamState:
        return self._machine.state

    @property
    def watermark(self) -> Optional[datetime]:
        return self._watermark

    async def run(self) -> StreamState:
        """
        Выполняет сессию до закрытия.

        Returns:
            Итоговое состояние (всегда CLOSED)
        """
        try:
            if not await self.open():
                return self.state

            while not self._machine.is_closed:
                await self._sleep(self._poll_interval)
                await self.tick()
        except asyncio.CancelledError:
            self._machine.close()
            raise
        except Exception as e:
            await log_warning(
                f"Сессия рейса {self.ride_id} закрыта из-за ошибки: {e}",
                extra={"ride_id": str(self.ride_id)},
            )
        finally:
            self._machine.close()

        return self.state

    async def open(self) -> bool:
        """
        INIT: проверяет, что рейс активен, и фиксирует watermark.

        Returns:
            True если сессия перешла в ACTIVE
        """
        if not await self._projection.is_ride_active(self.ride_id):
            await log_info(
                f"Рейс {self.ride_id} неактивен, сессия закрыта без данных",
                type_msg=TypeMsg.DEBUG,
            )
            self._machine.close()
            return False

        self._watermark = await self._location_repo.current_timestamp()
        self._machine.transition(StreamState.ACTIVE)
        return True

    async def tick(self) -> None:
        """
        Один такт ACTIVE: отправка самой свежей точки и проверка статуса рейса.

        Ошибки хранилища и отправки пробрасываются; run() закрывает сессию.
        """
        record = await self._location_repo.find_latest_since(self.ride_id, self._watermark)
        if record is not None:
            await self._send(LocationStreamMessage.from_record(record))
            self._watermark = record.timestamp
            self.messages_sent += 1

        if not await self._projection.is_ride_active(self.ride_id):
            await log_info(f"Рейс {self.ride_id} завершён, сессия закрыта", type_msg=TypeMsg.DEBUG)
            self._machine.close()
