# src/core/tracking/ingestor.py
"""
Приём пакетов геолокации от водителей.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from src.common.constants import TypeMsg
from src.common.errors import InvalidArgument
from src.common.logger import log_debug, log_info
from src.core.tracking.models import (
    HEADING_RANGE,
    LATITUDE_RANGE,
    LONGITUDE_RANGE,
    LocationUpdateIn,
)
from src.core.tracking.repository import LocationRepository
from src.core.users.models import AuthUser
from src.core.users.service import ensure_driver


NO_VALID_RIDES = "Нет активных рейсов водителя для переданных точек"


def _in_range(value: Optional[float], bounds: tuple[float, float]) -> bool:
    return value is None or (math.isfinite(value) and bounds[0] <= value <= bounds[1])


def check_update(update: LocationUpdateIn) -> None:
    """
    Проверяет числовые поля точки. Значения не корректируются.

    Raises:
        InvalidArgument: координаты вне диапазона или не конечны
    """
    if update.latitude is None or not _in_range(update.latitude, LATITUDE_RANGE):
        raise InvalidArgument(f"Некорректная широта: {update.latitude}")
    if update.longitude is None or not _in_range(update.longitude, LONGITUDE_RANGE):
        raise InvalidArgument(f"Некорректная долгота: {update.longitude}")
    if update.speed is not None and not _in_range(update.speed, (0.0, math.inf)):
        raise InvalidArgument(f"Некорректная скорость: {update.speed}")
    if not _in_range(update.heading, HEADING_RANGE):
        raise InvalidArgument(f"Некорректный курс: {update.heading}")


class LocationIngestor:
    """
    Валидирует и сохраняет пакеты точек.

    Точки для чужих или неактивных рейсов отбрасываются молча;
    если не осталось ни одной, пакет отклоняется.
    """

    def __init__(self, location_repo: LocationRepository, max_batch_size: int = 500) -> None:
        self._location_repo = location_repo
        self._max_batch_size = max_batch_size

    async def ingest(self, caller: AuthUser, updates: Sequence[LocationUpdateIn]) -> int:
        """
        Сохраняет точки водителя.

        Returns:
            Количество принятых точек

        Raises:
            PermissionDenied: вызывающий не водитель
            InvalidArgument: пакет слишком большой, точка некорректна
                или нет ни одной точки для активного рейса водителя
        """
        ensure_driver(caller, "отправлять геолокацию")

        if not updates:
            return 0

        if len(updates) > self._max_batch_size:
            raise InvalidArgument(
                f"Слишком большой пакет: {len(updates)} > {self._max_batch_size}"
            )

        for update in updates:
            check_update(update)

        ride_ids = {update.ride_id for update in updates}
        valid_ride_ids = await self._location_repo.find_active_owned_ride_ids(ride_ids, caller.user_id)

        valid = [u for u in updates if u.ride_id in valid_ride_ids]
        dropped = len(updates) - len(valid)
        if dropped:
            await log_debug(
                f"Отброшено {dropped} точек водителя {caller.user_id}: рейс неактивен или чужой",
                extra={"driver_id": str(caller.user_id), "dropped": dropped},
            )

        if not valid:
            raise InvalidArgument(NO_VALID_RIDES)

        accepted = await self._location_repo.insert_batch(caller.user_id, valid)
        if accepted == 0:
            # Все рейсы завершились между проверкой и записью
            raise InvalidArgument(NO_VALID_RIDES)

        await log_info(
            f"Принято {accepted} точек от водителя {caller.user_id}",
            type_msg=TypeMsg.DEBUG,
        )
        return accepted
