"""
Health check module for Docker health checks and monitoring.
Verifies that the blob store is reachable and reports the cached record.
"""

import asyncio
import sys

from spotprices.config import settings
from spotprices.logging_config import get_logger, setup_logging
from spotprices.storage.service import SqliteStore

logger = get_logger(__name__)


async def health_check(store: SqliteStore = None) -> bool:
    """
    Perform health check of the service storage.
    """
    store = store or SqliteStore(settings.store_path)
    try:
        store_healthy = await store.health_check()
        if store_healthy:
            cached = await store.read(settings.cache_key)
            logger.debug("Cached record present", present=cached is not None)
        return store_healthy

    except Exception as e:
        logger.error("Health check failed", error=str(e))
        return False


async def main():
    """
    Main health check entry point for command line usage.
    """
    setup_logging()
    is_healthy = await health_check()

    if is_healthy:
        logger.info("Health check passed")
        sys.exit(0)
    else:
        logger.error("Health check failed")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
