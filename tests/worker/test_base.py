# tests/worker/test_base.py
"""
Unit тесты для базового класса воркера (src/worker/base.py).
"""

import asyncio
from typing import List

import pytest

from src.worker.base import BaseWorker


class ConcreteWorker(BaseWorker):
    """Конкретная реализация воркера для тестирования."""

    def __init__(self, interval: float = 0.01, fail_on: int = -1) -> None:
        super().__init__(interval)
        self.runs: List[int] = []
        self._fail_on = fail_on

    @property
    def name(self) -> str:
        return "test_worker"

    async def run_once(self) -> None:
        self.runs.append(len(self.runs))
        if len(self.runs) - 1 == self._fail_on:
            raise RuntimeError("cycle failed")


class TestBaseWorker:
    """Тесты жизненного цикла воркера."""

    def test_cannot_instantiate_abstract(self) -> None:
        with pytest.raises(TypeError):
            BaseWorker(1)  # type: ignore[abstract]

    def test_initial_state(self) -> None:
        worker = ConcreteWorker(interval=5)
        assert worker.interval == 5
        assert not worker.is_running
        assert worker.cycles == 0

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self) -> None:
        worker = ConcreteWorker()

        await worker.start()
        task = worker._task
        await worker.start()

        assert worker._task is task
        await worker.stop()

    @pytest.mark.asyncio
    async def test_error_does_not_stop_loop(self) -> None:
        worker = ConcreteWorker(fail_on=0)

        await worker.start()
        await asyncio.sleep(0.05)
        await worker.stop()

        assert len(worker.runs) >= 2
        assert worker.cycles == len(worker.runs)

    @pytest.mark.asyncio
    async def test_wait_returns_after_stop(self) -> None:
        worker = ConcreteWorker()
        await worker.start()

        waiter = asyncio.create_task(worker.wait())
        await asyncio.sleep(0.02)
        assert not waiter.done()

        worker._task.cancel()
        await asyncio.wait_for(waiter, timeout=1)
        await worker.stop()
        assert not worker.is_running

    @pytest.mark.asyncio
    async def test_wait_without_start(self) -> None:
        await ConcreteWorker().wait()
