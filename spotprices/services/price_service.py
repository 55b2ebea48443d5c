"""
Spot price cache - decides between cached and freshly fetched prices.
Combines feed parsing, record migration, and the persistence round-trip.
"""

import asyncio
import json
import math
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytz
from pydantic import ValidationError

from spotprices.config import Settings, settings as default_settings
from spotprices.exceptions import PriceParseError, SpotPriceError, StoreError
from spotprices.logging_config import get_logger
from spotprices.models.price import (
    HOURS_PER_DAY,
    CacheRecord,
    HourlySeries,
    empty_series,
    has_valid_prices,
)
from spotprices.services.transport import Transport
from spotprices.storage.service import Store
from spotprices.utils.time_utils import days_between, format_time_of_day, get_next_boundary, local_now

logger = get_logger(__name__)

CURRENT_SCHEMA_VERSION = 2

# PriceWithTax is EUR/kWh; cached series are c/kWh
PRICE_SCALE = 100


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def parse_prices_for_date(entries: Any, target_date: date) -> HourlySeries:
    """
    Bucket feed entries into a 24-slot series for one local calendar date.

    Args:
        entries: Decoded feed body, a list of {"DateTime", "PriceWithTax", ...}
        target_date: Local date whose hours should be collected

    Returns:
        Series of hourly prices in c/kWh, None for hours without entries.
        Several entries for the same hour are averaged.

    Raises:
        PriceParseError: If the body is not a list of entries
    """
    if not isinstance(entries, list):
        raise PriceParseError(f"Expected a list of price entries, got {type(entries).__name__}")

    target = target_date.isoformat()
    buckets: Dict[int, List[float]] = defaultdict(list)
    skipped = 0

    for entry in entries:
        try:
            timestamp = datetime.fromisoformat(entry["DateTime"])
            price = entry["PriceWithTax"]
        except (KeyError, TypeError, ValueError):
            skipped += 1
            continue

        if not _is_number(price):
            skipped += 1
            continue

        # Local wall-clock date as published, no timezone conversion
        if timestamp.date().isoformat() != target:
            continue
        buckets[timestamp.hour].append(float(price))

    if skipped:
        logger.warning("Skipped malformed price entries", skipped=skipped, date=target)

    series = empty_series()
    for hour, prices in buckets.items():
        series[hour] = sum(prices) / len(prices) * PRICE_SCALE
    return series


def _normalize_series(values: Any) -> HourlySeries:
    """Coerce a stored series to 24 slots; anything non-numeric becomes None."""
    if not isinstance(values, list):
        return empty_series()
    series = [float(v) if _is_number(v) else None for v in values[:HOURS_PER_DAY]]
    return series + [None] * (HOURS_PER_DAY - len(series))


def _is_all_zero(values: Any) -> bool:
    return isinstance(values, list) and bool(values) and all(_is_number(v) and v == 0 for v in values)


def migrate_record(raw: Dict[str, Any], timezone_name: str = None) -> Dict[str, Any]:
    """
    Upgrade a decoded cache record to the current schema.

    Version 1 records used 0 for hours without data, so a series made only of
    zeros is read as "no data". A genuinely free day stored by an old version
    is lost to this rule. Records already at the current version are returned
    unchanged.
    """
    version = raw.get("schemaVersion")
    if _is_number(version) and version >= CURRENT_SCHEMA_VERSION:
        return raw

    migrated = dict(raw)
    for key in ("today", "tomorrow"):
        values = raw.get(key)
        migrated[key] = empty_series() if _is_all_zero(values) else _normalize_series(values)

    # Version 1 records carried only the fetch timestamp
    if "date" not in migrated and _is_number(raw.get("timestamp")):
        tz = pytz.timezone(timezone_name or default_settings.timezone)
        fetched = datetime.fromtimestamp(raw["timestamp"] / 1000, tz)
        migrated["date"] = fetched.date().isoformat()

    migrated["schemaVersion"] = CURRENT_SCHEMA_VERSION
    logger.info("Migrated cached price record", from_version=version, to_version=CURRENT_SCHEMA_VERSION)
    return migrated


class PriceCache:
    """Owns the cached price record and decides when to refresh it."""

    def __init__(
        self,
        transport: Transport,
        store: Store,
        config: Settings = None,
        clock: Callable[[], datetime] = None,
    ):
        self._transport = transport
        self._store = store
        self._settings = config or default_settings
        self._clock = clock or (lambda: local_now(self._settings.timezone))
        self._record: Optional[CacheRecord] = None
        self._loaded = False
        self._inflight: Optional[asyncio.Future] = None

    @property
    def cached_record(self) -> Optional[CacheRecord]:
        """Record currently held in memory, if any."""
        return self._record

    def local_now(self) -> datetime:
        """Current time on the cache's clock."""
        return self._clock()

    async def fetch_prices(self, force_refresh: bool = False) -> Tuple[HourlySeries, HourlySeries]:
        """
        Return today's and tomorrow's hourly prices, fetching when needed.

        Never raises: failures fall back to cached data, or to two series
        with every hour marked as missing.
        """
        try:
            record = await self.load_record()
            reason = self._refresh_reason(record, self._clock(), force_refresh)
            if reason is None:
                logger.debug("Serving cached prices", date=record.date)
                return list(record.today), list(record.tomorrow)

            logger.info("Refreshing prices", reason=reason)
            return await self._refresh()
        except Exception as e:
            logger.error("Unexpected error while fetching prices", error=str(e))
            return self._fallback()

    def next_update_at(self) -> datetime:
        """Next time tomorrow's prices are due to be published."""
        return get_next_boundary(
            self._clock(),
            self._settings.tomorrow_publish_hour,
            self._settings.tomorrow_publish_minute,
        )

    def get_next_update_time(self, locale: str = None) -> str:
        """Localized time of day of the next publication boundary."""
        return format_time_of_day(self.next_update_at(), locale or self._settings.display_locale)

    def _refresh_reason(self, record: Optional[CacheRecord], now: datetime, force_refresh: bool) -> Optional[str]:
        if record is None:
            return "no cached prices"
        if record.date != now.date().isoformat():
            return "cached prices are from an earlier day"
        if not has_valid_prices(record.today):
            return "no cached prices for today"

        publish_time = (self._settings.tomorrow_publish_hour, self._settings.tomorrow_publish_minute)
        if (now.hour, now.minute) >= publish_time and not has_valid_prices(record.tomorrow):
            return "waiting for tomorrow's prices"
        if force_refresh:
            return "forced refresh"
        return None

    async def load_record(self) -> Optional[CacheRecord]:
        """Return the in-memory record, reading it from the store on first use."""
        if not self._loaded:
            try:
                self._record = await self._read_stored_record()
                self._loaded = True
            except StoreError as e:
                # Retried on the next call until a read completes
                logger.warning("Could not read price cache", error=str(e))

        if self._record is not None and self._is_expired(self._record):
            logger.info("Discarding expired price cache", date=self._record.date)
            self._record = None
        return self._record

    async def _read_stored_record(self) -> Optional[CacheRecord]:
        blob = await self._store.read(self._settings.cache_key)
        if blob is None:
            return None

        try:
            raw = json.loads(blob)
            if not isinstance(raw, dict):
                raise ValueError(f"expected an object, got {type(raw).__name__}")
            record = CacheRecord.model_validate(migrate_record(raw, self._settings.timezone))
        except (ValueError, ValidationError, OverflowError, OSError) as e:
            logger.warning("Ignoring unreadable price cache", error=str(e))
            return None

        logger.debug("Loaded price cache", date=record.date, schema_version=record.schema_version)
        return record

    def _is_expired(self, record: CacheRecord) -> bool:
        age = self._age_in_days(record)
        return age is None or age > self._settings.cache_expiry_days

    async def _refresh(self) -> Tuple[HourlySeries, HourlySeries]:
        """Fetch fresh prices, sharing one request among overlapping callers."""
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.ensure_future(self._fetch_fresh())
        else:
            logger.debug("Joining in-flight price fetch")

        today, tomorrow = await asyncio.shield(self._inflight)
        return list(today), list(tomorrow)

    async def _fetch_fresh(self) -> Tuple[HourlySeries, HourlySeries]:
        now = self._clock()
        today_date = now.date()

        try:
            payload = await self._transport.get(self._settings.price_feed_url)
            today = parse_prices_for_date(payload, today_date)
            tomorrow = parse_prices_for_date(payload, today_date + timedelta(days=1))
        except SpotPriceError as e:
            logger.warning("Price fetch failed, using cached prices", error=str(e))
            return self._fallback()
        except Exception as e:
            logger.error("Unexpected price fetch failure, using cached prices", error=str(e))
            return self._fallback()

        if not has_valid_prices(today):
            logger.warning("Price feed has no prices for today", date=today_date.isoformat())
            return self._fallback()

        record = CacheRecord(
            schema_version=CURRENT_SCHEMA_VERSION,
            date=today_date.isoformat(),
            timestamp=int(now.timestamp() * 1000),
            today=today,
            tomorrow=tomorrow,
        )
        self._record = record
        self._loaded = True
        await self._persist(record)

        logger.info(
            "Fetched prices",
            date=record.date,
            hours_today=sum(v is not None for v in today),
            hours_tomorrow=sum(v is not None for v in tomorrow),
        )
        return record.today, record.tomorrow

    async def _persist(self, record: CacheRecord) -> None:
        try:
            await self._store.write(self._settings.cache_key, record.to_json())
        except StoreError as e:
            logger.error("Failed to persist price cache", error=str(e))

    def _fallback(self) -> Tuple[HourlySeries, HourlySeries]:
        record = self._record
        if record is None or not (has_valid_prices(record.today) or has_valid_prices(record.tomorrow)):
            return empty_series(), empty_series()

        # Yesterday's "tomorrow" holds today's prices
        if has_valid_prices(record.tomorrow) and self._age_in_days(record) == 1:
            logger.info("Serving yesterday's tomorrow prices as today", date=record.date)
            return list(record.tomorrow), empty_series()
        return list(record.today), list(record.tomorrow)

    def _age_in_days(self, record: CacheRecord) -> Optional[int]:
        try:
            return days_between(date.fromisoformat(record.date), self._clock().date())
        except ValueError:
            return None
