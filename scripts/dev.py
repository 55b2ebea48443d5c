#!/usr/bin/env python3
"""
Development helper scripts for the spot price cache.
Provides utilities for manual fetches, cache inspection, and configuration.
"""

import asyncio
import sys
from pathlib import Path

# Add the project root to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from spotprices.config import settings
from spotprices.logging_config import setup_logging
from spotprices.services.price_service import PriceCache
from spotprices.services.transport import HttpxTransport
from spotprices.storage.service import SqliteStore


def _build_cache() -> PriceCache:
    return PriceCache(HttpxTransport(settings.request_timeout), SqliteStore(settings.store_path), settings)


def _print_series(title: str, series) -> None:
    print(f"\n{title}:")
    for hour, price in enumerate(series):
        value = "   no data" if price is None else f"{price:>7.2f} c/kWh"
        print(f"  {hour:02d}:00 {value}")


async def init_store():
    """Initialize the blob store."""
    print("Initializing blob store...")
    setup_logging()
    await SqliteStore(settings.store_path).init_database()
    print(f"Blob store initialized at: {settings.store_path}")


async def fetch_prices_manual(force_refresh: bool):
    """Fetch prices through the cache and print them."""
    setup_logging()
    price_cache = _build_cache()
    today, tomorrow = await price_cache.fetch_prices(force_refresh=force_refresh)

    _print_series("Today", today)
    _print_series("Tomorrow", tomorrow)
    print(f"\nNext update: {price_cache.get_next_update_time()}")


async def show_cache():
    """Display the persisted cache record without fetching."""
    setup_logging()
    record = await _build_cache().load_record()

    if record is None:
        print("No usable cached record")
        return

    print(f"Schema version: {record.schema_version}")
    print(f"Date: {record.date}")
    print(f"Timestamp: {record.timestamp}")
    _print_series("Today", record.today)
    _print_series("Tomorrow", record.tomorrow)


def show_config():
    """Display current configuration settings."""
    print("Current Configuration:")
    print("-" * 40)
    print(f"API Host: {settings.api_host}")
    print(f"API Port: {settings.api_port}")
    print(f"Debug Mode: {settings.api_debug}")
    print(f"Price Feed: {settings.price_feed_url}")
    print(f"Request Timeout: {settings.request_timeout}s")
    print(f"Store Path: {settings.store_path}")
    print(f"Timezone: {settings.timezone}")
    print(f"Tomorrow Published: {settings.tomorrow_publish_hour}:{settings.tomorrow_publish_minute:02d}")
    print(f"Refresh Interval: {settings.refresh_interval_minutes} min")
    print(f"Log Level: {settings.log_level}")


def main():
    """Main script entry point with command selection."""
    if len(sys.argv) < 2:
        print("Spot Price Cache Development Scripts")
        print("Usage: python scripts/dev.py <command>")
        print("\nAvailable commands:")
        print("  init-store    - Initialize blob store")
        print("  fetch-prices  - Fetch prices through the cache")
        print("  force-fetch   - Fetch prices bypassing a current cache")
        print("  show-cache    - Display the persisted cache record")
        print("  show-config   - Display current configuration")
        return

    command = sys.argv[1]

    if command == "init-store":
        asyncio.run(init_store())
    elif command == "fetch-prices":
        asyncio.run(fetch_prices_manual(force_refresh=False))
    elif command == "force-fetch":
        asyncio.run(fetch_prices_manual(force_refresh=True))
    elif command == "show-cache":
        asyncio.run(show_cache())
    elif command == "show-config":
        show_config()
    else:
        print(f"Unknown command: {command}")
        print("Run without arguments to see available commands")


if __name__ == "__main__":
    main()
