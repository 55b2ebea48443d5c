"""
Main application entry point for the spot price cache service.
Wires the blob store, feed transport, price cache, and scheduler into FastAPI.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from spotprices.api.routes import router as api_router
from spotprices.config import settings
from spotprices.logging_config import setup_logging
from spotprices.scheduler.simple_scheduler import SimpleScheduler
from spotprices.services.price_service import PriceCache
from spotprices.services.transport import HttpxTransport
from spotprices.storage.service import SqliteStore


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup and shutdown procedures.
    """
    # Startup
    setup_logging()
    if getattr(app.state, "price_cache", None) is None:
        store = SqliteStore(settings.store_path)
        await store.init_database()
        app.state.store = store
        app.state.price_cache = PriceCache(HttpxTransport(settings.request_timeout), store, settings)

    scheduler = SimpleScheduler(app.state.price_cache, settings.refresh_interval_minutes)
    await scheduler.start()

    yield

    # Shutdown
    await scheduler.stop()


def create_app(price_cache: PriceCache = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        price_cache: Pre-built cache to serve; built at startup when omitted
    """
    app = FastAPI(
        title="Spot Price Cache",
        description="Hourly spot-hinta.fi electricity prices with local caching",
        version="2.0.0",
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        lifespan=lifespan,
    )
    app.state.price_cache = price_cache

    # Include API routes
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "spotprices.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
