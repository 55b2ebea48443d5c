"""
Test configuration and fixtures for the spot price cache tests.
Contains in-memory collaborators, a controllable clock, and feed builders.
"""

import json
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

import pytest
import pytz
from fastapi.testclient import TestClient

from spotprices.config import Settings
from spotprices.exceptions import StoreError
from spotprices.main import create_app
from spotprices.services.price_service import PriceCache

HELSINKI = pytz.timezone("Europe/Helsinki")


def helsinki_time(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """Aware Europe/Helsinki datetime."""
    return HELSINKI.localize(datetime(year, month, day, hour, minute))


def feed_entries(day: date, price: float = 0.25, hours: range = range(24)) -> List[Dict[str, Any]]:
    """Build spot-hinta.fi style entries, one per hour of the given day."""
    return [
        {
            "Rank": hour + 1,
            "DateTime": f"{day.isoformat()}T{hour:02d}:00:00+02:00",
            "PriceNoTax": price / 1.255,
            "PriceWithTax": price,
        }
        for hour in hours
    ]


def record_blob(record_date: str, today: List[Optional[float]], tomorrow: List[Optional[float]],
                schema_version: Optional[int] = 2, timestamp: int = 1704096000000) -> bytes:
    """Serialize a cache record the way it is persisted."""
    raw = {"date": record_date, "timestamp": timestamp, "today": today, "tomorrow": tomorrow}
    if schema_version is not None:
        raw["schemaVersion"] = schema_version
    return json.dumps(raw).encode("utf-8")


class FakeClock:
    """Callable clock whose current time tests can move."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = HELSINKI.normalize(self.now + timedelta(**kwargs))


class FakeTransport:
    """Transport returning a canned payload or raising a canned error."""

    def __init__(self, payload: Any = None, error: Exception = None):
        self.payload = payload
        self.error = error
        self.calls: List[str] = []
        self.gate = None

    async def get(self, url: str) -> Any:
        self.calls.append(url)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.payload


class FakeStore:
    """In-memory blob store."""

    def __init__(self):
        self.blobs: Dict[str, bytes] = {}
        self.writes = 0
        self.fail_reads = False
        self.fail_writes = False

    async def read(self, key: str) -> Optional[bytes]:
        if self.fail_reads:
            raise StoreError("disk unavailable")
        return self.blobs.get(key)

    async def write(self, key: str, data: bytes) -> None:
        if self.fail_writes:
            raise StoreError("disk full")
        self.writes += 1
        self.blobs[key] = data


@pytest.fixture
def test_settings():
    """Settings with the production defaults for time and caching."""
    return Settings(store_path=":memory:", log_format="text")


@pytest.fixture
def clock():
    """Clock fixed at 2024-01-01 10:00 Helsinki time."""
    return FakeClock(helsinki_time(2024, 1, 1, 10, 0))


@pytest.fixture
def fake_transport():
    """Transport serving a full day of prices for 2024-01-01."""
    return FakeTransport(payload=feed_entries(date(2024, 1, 1)))


@pytest.fixture
def fake_store():
    """Empty in-memory store."""
    return FakeStore()


@pytest.fixture
def price_cache(fake_transport, fake_store, test_settings, clock):
    """PriceCache wired to the fake collaborators."""
    return PriceCache(fake_transport, fake_store, test_settings, clock=clock)


@pytest.fixture
def test_app(price_cache):
    """
    Create a test instance of the FastAPI application.
    """
    return create_app(price_cache=price_cache)


@pytest.fixture
def test_client(test_app):
    """
    Create a test client for the FastAPI application.
    """
    return TestClient(test_app)
