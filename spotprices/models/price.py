"""
Pydantic data models for cached price data and API responses.
Defines the persisted cache record and the HTTP response formats.
"""

import math
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

HOURS_PER_DAY = 24

# An hourly series holds one slot per local hour; None marks an hour without data.
HourlySeries = List[Optional[float]]


def empty_series() -> HourlySeries:
    """Return a series with every hour marked as missing."""
    return [None] * HOURS_PER_DAY


def has_valid_prices(series: HourlySeries) -> bool:
    """True when at least one hour carries a price (zero counts as a price)."""
    return any(value is not None for value in series)


class CacheRecord(BaseModel):
    """
    Persisted snapshot of one successful fetch.

    Stored as JSON:
    {"schemaVersion": 2, "date": "2024-01-01", "timestamp": 1704103200000,
     "today": [6.1, null, ...], "tomorrow": [null, ...]}
    """
    schema_version: int = Field(alias="schemaVersion", description="Record layout version")
    date: str = Field(description="Local calendar date (YYYY-MM-DD) the record was fetched on")
    timestamp: int = Field(description="Fetch time in epoch milliseconds")
    today: HourlySeries = Field(description="Prices for the record date in c/kWh")
    tomorrow: HourlySeries = Field(description="Prices for the following date in c/kWh")

    class Config:
        populate_by_name = True

    @field_validator("today", "tomorrow")
    @classmethod
    def _check_series_length(cls, value: HourlySeries) -> HourlySeries:
        if len(value) != HOURS_PER_DAY:
            raise ValueError(f"hourly series must have {HOURS_PER_DAY} slots, got {len(value)}")
        # NaN and infinity cannot be persisted as JSON numbers
        return [v if v is None or math.isfinite(v) else None for v in value]

    def to_json(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")


class PricesResponse(BaseModel):
    """
    API response carrying today's and tomorrow's hourly prices.
    """
    date: Optional[str] = Field(default=None, description="Date of the cached record, if any")
    fetched_at: Optional[datetime] = Field(default=None, description="When the cached record was fetched")
    today: HourlySeries = Field(description="24 hourly prices for today (c/kWh, null = no data)")
    tomorrow: HourlySeries = Field(description="24 hourly prices for tomorrow (c/kWh, null = no data)")


class NextUpdateResponse(BaseModel):
    """
    When tomorrow's prices are next expected to be published.
    """
    next_update: datetime = Field(description="Next publication boundary in local time")
    display: str = Field(description="Localized short time-of-day string")
    locale: str = Field(description="Locale used for the display string")


class HealthResponse(BaseModel):
    """
    Health check response model.
    """
    status: str = Field(description="Health status")
    timestamp: datetime = Field(description="Health check timestamp")
    details: Optional[dict] = Field(default=None, description="Additional health details")
