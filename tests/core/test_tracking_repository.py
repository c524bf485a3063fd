# tests/core/test_tracking_repository.py
"""
Тесты репозитория геолокации (src/core/tracking/repository.py).
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from src.core.tracking.models import LocationUpdateIn
from src.core.tracking.repository import LocationRepository, _affected_rows


class TestAffectedRows:
    """Тесты разбора статуса команды."""

    @pytest.mark.parametrize(
        "status, expected",
        [("INSERT 0 3", 3), ("DELETE 17", 17), ("DELETE 0", 0), ("", 0), (None, 0)],
    )
    def test_parse(self, status, expected: int) -> None:
        assert _affected_rows(status) == expected


class TestLocationRepository:
    """Тесты для LocationRepository."""

    @pytest.fixture
    def repo(self, mock_db) -> LocationRepository:
        return LocationRepository(mock_db)

    @pytest.mark.asyncio
    async def test_find_active_owned_ride_ids(self, repo, mock_db) -> None:
        ride_id = uuid4()
        driver_id = uuid4()
        mock_db.fetch.return_value = [{"id": ride_id}]

        result = await repo.find_active_owned_ride_ids({ride_id, uuid4()}, driver_id)

        assert result == {ride_id}
        query, ids, passed_driver = mock_db.fetch.call_args.args
        assert "status = 'in_progress'" in query
        assert ride_id in ids
        assert passed_driver == driver_id

    @pytest.mark.asyncio
    async def test_insert_batch_is_guarded_by_ride_status(self, repo, mock_db) -> None:
        ride_id = uuid4()
        driver_id = uuid4()
        mock_db.execute.return_value = "INSERT 0 2"
        updates = [
            LocationUpdateIn(ride_id=ride_id, latitude=1, longitude=2, speed=3),
            LocationUpdateIn(ride_id=ride_id, latitude=4, longitude=5, heading=6),
        ]

        count = await repo.insert_batch(driver_id, updates)

        assert count == 2
        args = mock_db.execute.call_args.args
        query = args[0]
        assert "JOIN rides" in query
        assert "r.status = 'in_progress'" in query
        assert "ORDER BY u.ord" in query
        assert args[1] == [ride_id, ride_id]
        assert args[2] == [1, 4]
        assert args[4] == [3, None]
        assert args[5] == [None, 6]
        assert args[6] == driver_id

    @pytest.mark.asyncio
    async def test_insert_empty_batch_skips_query(self, repo, mock_db) -> None:
        assert await repo.insert_batch(uuid4(), []) == 0
        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_find_latest_since(self, repo, mock_db) -> None:
        ride_id = uuid4()
        watermark = datetime(2026, 1, 1, tzinfo=timezone.utc)
        ts = datetime(2026, 1, 1, 0, 0, 5, tzinfo=timezone.utc)
        mock_db.fetchrow.return_value = {
            "id": 7, "ride_id": ride_id, "latitude": 1.0, "longitude": 2.0,
            "speed": None, "heading": 45.0, "timestamp": ts,
        }

        record = await repo.find_latest_since(ride_id, watermark)

        assert record.id == 7
        assert record.timestamp == ts
        query = mock_db.fetchrow.call_args.args[0]
        assert "timestamp > $2" in query
        assert "ORDER BY timestamp DESC, id DESC" in query

    @pytest.mark.asyncio
    async def test_find_latest_since_none(self, repo, mock_db) -> None:
        mock_db.fetchrow.return_value = None
        assert await repo.find_latest_since(uuid4(), datetime.now(timezone.utc)) is None

    @pytest.mark.asyncio
    async def test_delete_older_than_is_bounded(self, repo, mock_db) -> None:
        cutoff = datetime(2026, 1, 1, tzinfo=timezone.utc)
        mock_db.execute.return_value = "DELETE 100"

        assert await repo.delete_older_than(cutoff, 100) == 100
        query, passed_cutoff, limit = mock_db.execute.call_args.args
        assert "LIMIT $2" in query
        assert passed_cutoff == cutoff
        assert limit == 100
