"""
Simple background refresher built on asyncio tasks.
Periodically asks the price cache for prices so tomorrow's data is picked up
soon after it is published.
"""

import asyncio
from datetime import datetime
from typing import Optional

from spotprices.config import settings
from spotprices.logging_config import get_logger
from spotprices.models.price import has_valid_prices
from spotprices.services.price_service import PriceCache

logger = get_logger(__name__)


class SimpleScheduler:
    """Simple background task scheduler for price refreshes."""

    def __init__(self, price_cache: PriceCache, interval_minutes: int = None):
        self.price_cache = price_cache
        self.interval_seconds = (interval_minutes or settings.refresh_interval_minutes) * 60
        self._running = False
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        """Start the scheduler background task."""
        if self._running:
            logger.warning("Scheduler already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._scheduler_loop())
        logger.info("Scheduler started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        """Stop the scheduler."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        logger.info("Scheduler stopped")

    async def _scheduler_loop(self) -> None:
        """Main scheduler loop."""
        while self._running:
            try:
                await self._refresh_prices_job()
                await asyncio.sleep(self.interval_seconds)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Scheduler loop error", error=str(e))
                await asyncio.sleep(self.interval_seconds)

    async def _refresh_prices_job(self) -> None:
        """Execute one price refresh through the cache."""
        job_start = datetime.now()
        today, tomorrow = await self.price_cache.fetch_prices()

        duration = (datetime.now() - job_start).total_seconds()
        logger.debug(
            "Completed scheduled price refresh",
            has_today=has_valid_prices(today),
            has_tomorrow=has_valid_prices(tomorrow),
            duration_seconds=duration,
        )

    async def run_manual_fetch(self) -> None:
        """Run a forced price refresh."""
        logger.info("Running manual price fetch")
        await self.price_cache.fetch_prices(force_refresh=True)

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._running
