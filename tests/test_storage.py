"""
Tests for the SQLite blob store and the command-line health check.
"""

import pytest

from spotprices.exceptions import StoreError
from spotprices.health_check import health_check
from spotprices.storage.service import SqliteStore


@pytest.fixture
def store(tmp_path):
    return SqliteStore(str(tmp_path / "cache.db"))


class TestSqliteStore:
    """Tests for whole-blob reads and writes."""

    @pytest.mark.asyncio
    async def test_read_missing_key(self, store):
        assert await store.read("spot_prices") is None

    @pytest.mark.asyncio
    async def test_write_then_read(self, store):
        await store.write("spot_prices", b'{"date": "2024-01-01"}')

        assert await store.read("spot_prices") == b'{"date": "2024-01-01"}'

    @pytest.mark.asyncio
    async def test_last_write_wins(self, store):
        await store.write("spot_prices", b"first")
        await store.write("spot_prices", b"second")

        assert await store.read("spot_prices") == b"second"

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, store):
        await store.write("a", b"1")
        await store.write("b", b"2")

        assert await store.read("a") == b"1"
        assert await store.read("b") == b"2"

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "cache.db")
        await SqliteStore(path).write("spot_prices", b"kept")

        assert await SqliteStore(path).read("spot_prices") == b"kept"

    @pytest.mark.asyncio
    async def test_unwritable_location_raises_store_error(self, tmp_path):
        store = SqliteStore(str(tmp_path / "missing" / "cache.db"))

        with pytest.raises(StoreError):
            await store.write("spot_prices", b"data")


class TestHealthCheck:
    """Tests for the command-line health check."""

    @pytest.mark.asyncio
    async def test_healthy_store(self, store):
        assert await health_check(store) is True

    @pytest.mark.asyncio
    async def test_unreachable_store(self, tmp_path):
        assert await health_check(SqliteStore(str(tmp_path / "missing" / "cache.db"))) is False
