"""
Services package for the spot price cache.
Contains the price cache and the HTTP transport for the upstream feed.
"""

from .price_service import CURRENT_SCHEMA_VERSION, PriceCache, migrate_record, parse_prices_for_date
from .transport import HttpxTransport, Transport

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "HttpxTransport",
    "PriceCache",
    "Transport",
    "migrate_record",
    "parse_prices_for_date",
]
