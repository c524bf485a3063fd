# src/core/tracking/expiry.py
"""
Срок хранения точек геолокации.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from src.common.constants import TypeMsg
from src.common.logger import log_info
from src.core.tracking.repository import LocationRepository


class ExpiryPolicy:
    """Точки старше retention_days подлежат удалению."""

    def __init__(self, retention_days: int = 30) -> None:
        if retention_days < 1:
            raise ValueError("retention_days должен быть >= 1")
        self.retention = timedelta(days=retention_days)

    def cutoff(self, now: Optional[datetime] = None) -> datetime:
        """Граница: всё строго раньше неё просрочено."""
        return (now or datetime.now(timezone.utc)) - self.retention

    async def purge(
        self,
        location_repo: LocationRepository,
        batch_size: int,
        now: Optional[datetime] = None,
    ) -> int:
        """
        Удаляет просроченные точки пачками по batch_size.

        Returns:
            Всего удалено строк
        """
        cutoff = self.cutoff(now)
        total = 0
        while True:
            deleted = await location_repo.delete_older_than(cutoff, batch_size)
            total += deleted
            if deleted < batch_size:
                break

        if total:
            await log_info(
                f"Удалено {total} точек геолокации старше {cutoff.isoformat()}",
                type_msg=TypeMsg.INFO,
            )
        return total
