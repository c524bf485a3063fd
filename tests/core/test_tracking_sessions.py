# tests/core/test_tracking_sessions.py
"""
Тесты менеджера сессий live-tracking (src/core/tracking/sessions.py).
"""

from __future__ import annotations

import asyncio

import pytest

from src.common.constants import StreamState
from src.core.tracking.sessions import StreamSessionManager


class TestStreamSessionManager:
    """Тесты для StreamSessionManager."""

    @pytest.fixture
    def manager(self, store) -> StreamSessionManager:
        return StreamSessionManager(store, store, poll_interval=0.01)

    @pytest.mark.asyncio
    async def test_inactive_ride_session_ends_immediately(self, manager, store, driver) -> None:
        ride_id = store.add_ride(driver.user_id, status="ended")
        sent = []

        async def send(message) -> None:
            sent.append(message)

        never = asyncio.Event()
        state = await manager.run_session(ride_id, send, never.wait)

        assert state == StreamState.CLOSED
        assert sent == []
        assert manager.active_sessions == 0
        assert manager.get_stats()["total_sessions"] == 1

    @pytest.mark.asyncio
    async def test_ride_end_finishes_session_and_counts_messages(self, manager, store, driver) -> None:
        ride_id = store.add_ride(driver.user_id)
        sent = []

        async def send(message) -> None:
            sent.append(message)
            store.end_ride(ride_id)

        never = asyncio.Event()
        task = asyncio.create_task(manager.run_session(ride_id, send, never.wait))
        await asyncio.sleep(0.005)
        store.advance(1)
        store.store(ride_id, 1.0, 2.0)

        state = await asyncio.wait_for(task, timeout=2)

        assert state == StreamState.CLOSED
        assert len(sent) == 1
        assert manager.get_stats()["total_messages_sent"] == 1
        assert manager.active_sessions == 0

    @pytest.mark.asyncio
    async def test_disconnect_cancels_poller(self, manager, store, driver) -> None:
        ride_id = store.add_ride(driver.user_id)
        disconnected = asyncio.Event()

        async def send(message) -> None:
            pass

        task = asyncio.create_task(manager.run_session(ride_id, send, disconnected.wait))
        await asyncio.sleep(0.03)
        assert manager.active_sessions == 1
        assert manager.get_sessions_for_ride(ride_id) == 1

        disconnected.set()
        state = await asyncio.wait_for(task, timeout=2)

        assert state == StreamState.CLOSED
        assert manager.active_sessions == 0

    @pytest.mark.asyncio
    async def test_close_all_cancels_live_sessions(self, manager, store, driver) -> None:
        ride_id = store.add_ride(driver.user_id)
        never = asyncio.Event()

        async def send(message) -> None:
            pass

        tasks = [
            asyncio.create_task(manager.run_session(ride_id, send, never.wait))
            for _ in range(3)
        ]
        await asyncio.sleep(0.03)
        assert manager.active_sessions == 3
        assert manager.get_stats()["rides_watched"] == 1

        await manager.close_all()
        states = await asyncio.wait_for(asyncio.gather(*tasks), timeout=2)

        assert states == [StreamState.CLOSED] * 3
        assert manager.active_sessions == 0
        assert manager.get_stats()["total_sessions"] == 3

    @pytest.mark.asyncio
    async def test_independent_viewers_each_receive_update(self, manager, store, driver) -> None:
        ride_id = store.add_ride(driver.user_id)
        received: dict[int, list] = {1: [], 2: []}
        never = asyncio.Event()

        def sender(viewer: int):
            async def send(message) -> None:
                received[viewer].append(message)
            return send

        tasks = [
            asyncio.create_task(manager.run_session(ride_id, sender(v), never.wait))
            for v in (1, 2)
        ]
        await asyncio.sleep(0.005)
        store.advance(1)
        store.store(ride_id, 7.0, 8.0)
        await asyncio.sleep(0.05)
        store.end_ride(ride_id)

        await asyncio.wait_for(asyncio.gather(*tasks), timeout=2)

        assert [m.latitude for m in received[1]] == [7.0]
        assert [m.latitude for m in received[2]] == [7.0]

    @pytest.mark.asyncio
    async def test_cancelled_session_is_unregistered(self, manager, store, driver) -> None:
        """Отмена задачи зрителя (остановка сервера, обрыв ASGI) снимает сессию с учёта."""
        ride_id = store.add_ride(driver.user_id)
        never = asyncio.Event()

        async def send(message) -> None:
            pass

        task = asyncio.create_task(manager.run_session(ride_id, send, never.wait))
        await asyncio.sleep(0.03)
        assert manager.active_sessions == 1
        poll_task = next(iter(manager._sessions.values())).task

        # Повторная отмена приходит, пока finally ждёт дочерние задачи
        task.cancel()
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert manager.active_sessions == 0
        assert manager.get_sessions_for_ride(ride_id) == 0
        assert manager.get_stats()["rides_watched"] == 0
        assert poll_task.cancelled() or poll_task.done()
