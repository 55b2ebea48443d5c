"""
FastAPI route handlers for the price cache endpoints.
Serves cached hourly prices, the next publication time, and service health.
"""

from datetime import datetime
from typing import Optional

import pytz
from babel.core import UnknownLocaleError
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from spotprices.config import settings
from spotprices.logging_config import get_logger
from spotprices.models.price import HealthResponse, NextUpdateResponse, PricesResponse, has_valid_prices
from spotprices.services.price_service import PriceCache

logger = get_logger(__name__)

router = APIRouter()


def get_price_cache(request: Request) -> PriceCache:
    """Dependency returning the cache built for this application."""
    price_cache = getattr(request.app.state, "price_cache", None)
    if price_cache is None:
        raise HTTPException(status_code=503, detail="Price cache is not ready")
    return price_cache


@router.get("/health", response_model=HealthResponse)
async def health_check(price_cache: PriceCache = Depends(get_price_cache)):
    """
    Health check endpoint for monitoring and load balancers.

    Reports whether the cached record covers today, so a stalled feed shows up
    as "stale" even though the service itself keeps answering.
    """
    try:
        record = await price_cache.load_record()
        now = price_cache.local_now()

        if record is None:
            data_status = "empty"
        elif record.date == now.date().isoformat() and has_valid_prices(record.today):
            data_status = "fresh"
        else:
            data_status = "stale"

        last_fetch = None
        if record is not None:
            tz = pytz.timezone(settings.timezone)
            last_fetch = datetime.fromtimestamp(record.timestamp / 1000, tz).isoformat()

        details = {
            "service": "spot-price-cache",
            "cache_date": record.date if record else None,
            "last_fetch": last_fetch,
            "has_tomorrow": has_valid_prices(record.tomorrow) if record else False,
            "data_status": data_status,
        }

        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(),
            details=details
        )

    except Exception as e:
        logger.error("Health check failed", error=str(e))
        return HealthResponse(
            status="unhealthy",
            timestamp=datetime.now(),
            details={"service": "spot-price-cache", "error": str(e)}
        )


@router.get("/prices", response_model=PricesResponse)
async def get_prices(
    force_refresh: bool = Query(
        default=False,
        description="Fetch from the upstream feed even when the cache is current"
    ),
    price_cache: PriceCache = Depends(get_price_cache),
):
    """
    Return today's and tomorrow's hourly prices in c/kWh.

    Each list has 24 entries indexed by local hour; null marks an hour without
    data. Upstream failures are absorbed by the cache, so this endpoint always
    answers with the best data available.
    """
    today, tomorrow = await price_cache.fetch_prices(force_refresh=force_refresh)
    record = price_cache.cached_record

    fetched_at = None
    if record is not None:
        fetched_at = datetime.fromtimestamp(record.timestamp / 1000, pytz.timezone(settings.timezone))

    return PricesResponse(
        date=record.date if record else None,
        fetched_at=fetched_at,
        today=today,
        tomorrow=tomorrow,
    )


@router.get("/prices/next-update", response_model=NextUpdateResponse)
async def get_next_update(
    locale: Optional[str] = Query(
        default=None,
        description="Locale for the display string, e.g. 'fi_FI' or 'en_US'",
        max_length=32
    ),
    price_cache: PriceCache = Depends(get_price_cache),
):
    """
    Report when tomorrow's prices are next due to be published.

    Raises:
        HTTPException: 422 for unknown or malformed locales.
    """
    display_locale = locale or settings.display_locale
    try:
        display = price_cache.get_next_update_time(display_locale)
    except (UnknownLocaleError, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"Unknown locale '{display_locale}': {e}")

    return NextUpdateResponse(
        next_update=price_cache.next_update_at(),
        display=display,
        locale=display_locale,
    )
