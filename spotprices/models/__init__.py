"""
Data models package for the spot price cache.
Contains Pydantic models for cached price records and API responses.
"""

from .price import (
    HOURS_PER_DAY,
    CacheRecord,
    HealthResponse,
    HourlySeries,
    NextUpdateResponse,
    PricesResponse,
    empty_series,
    has_valid_prices,
)

__all__ = [
    "HOURS_PER_DAY",
    "CacheRecord",
    "HealthResponse",
    "HourlySeries",
    "NextUpdateResponse",
    "PricesResponse",
    "empty_series",
    "has_valid_prices",
]
