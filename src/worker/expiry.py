# src/worker/expiry.py
"""
Воркер удаления просроченных точек геолокации.
"""

from __future__ import annotations

from typing import Any

from src.core.tracking.expiry import ExpiryPolicy
from src.core.tracking.repository import LocationRepository
from src.worker.base import BaseWorker


class ExpirySweeper(BaseWorker):
    """Периодически удаляет точки старше срока хранения пачками."""

    def __init__(
        self,
        location_repo: LocationRepository,
        policy: ExpiryPolicy,
        interval: float = 3600,
        batch_size: int = 5000,
    ) -> None:
        super().__init__(interval)
        self._location_repo = location_repo
        self._policy = policy
        self._batch_size = batch_size
        self.total_deleted = 0

    @classmethod
    def from_settings(cls, location_repo: LocationRepository, tracking_settings: Any) -> "ExpirySweeper":
        return cls(
            location_repo,
            ExpiryPolicy(tracking_settings.LOCATION_RETENTION_DAYS),
            interval=tracking_settings.EXPIRY_SWEEP_INTERVAL_SECONDS,
            batch_size=tracking_settings.EXPIRY_BATCH_SIZE,
        )

    @property
    def name(self) -> str:
        return "expiry_sweeper"

    async def run_once(self) -> None:
        self.total_deleted += await self._policy.purge(self._location_repo, self._batch_size)
