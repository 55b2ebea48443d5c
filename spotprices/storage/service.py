"""
Blob storage service using SQLite with aiosqlite.
Persists named byte blobs so the price cache survives process restarts.
"""

from datetime import datetime
from typing import Optional, Protocol

import aiosqlite

from spotprices.config import settings
from spotprices.exceptions import StoreError
from spotprices.logging_config import get_logger

logger = get_logger(__name__)


class Store(Protocol):
    """Host key/value persistence consumed by PriceCache."""

    async def read(self, key: str) -> Optional[bytes]:
        ...

    async def write(self, key: str, data: bytes) -> None:
        ...


class SqliteStore:
    """Whole-blob key/value store backed by a single SQLite table."""

    def __init__(self, database_path: str = None):
        self.database_path = database_path or settings.store_path
        self._initialized = False

    async def init_database(self) -> None:
        """Create the blob table if it does not exist yet."""
        try:
            async with aiosqlite.connect(self.database_path) as db:
                await db.execute("""
                    CREATE TABLE IF NOT EXISTS blobs (
                        key TEXT PRIMARY KEY,
                        value BLOB NOT NULL,
                        updated_at TIMESTAMP NOT NULL
                    )
                """)
                await db.commit()
            self._initialized = True
            logger.debug("Blob store ready", path=self.database_path)
        except Exception as e:
            logger.error("Failed to initialize blob store", error=str(e), path=self.database_path)
            raise StoreError(f"Store initialization failed: {e}")

    async def read(self, key: str) -> Optional[bytes]:
        """Return the blob stored under key, or None when absent."""
        if not self._initialized:
            await self.init_database()

        try:
            async with aiosqlite.connect(self.database_path) as db:
                cursor = await db.execute("SELECT value FROM blobs WHERE key = ?", (key,))
                row = await cursor.fetchone()
                return bytes(row[0]) if row else None
        except Exception as e:
            logger.error("Failed to read blob", error=str(e), key=key)
            raise StoreError(f"Failed to read '{key}': {e}")

    async def write(self, key: str, data: bytes) -> None:
        """Replace the blob stored under key."""
        if not self._initialized:
            await self.init_database()

        try:
            async with aiosqlite.connect(self.database_path) as db:
                await db.execute("""
                    INSERT INTO blobs (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT (key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                """, (key, data, datetime.now().isoformat()))
                await db.commit()
            logger.debug("Stored blob", key=key, size=len(data))
        except Exception as e:
            logger.error("Failed to write blob", error=str(e), key=key)
            raise StoreError(f"Failed to write '{key}': {e}")

    async def health_check(self) -> bool:
        """Check that the store file can be opened and queried."""
        try:
            async with aiosqlite.connect(self.database_path) as db:
                await db.execute("SELECT 1")
            return True
        except Exception as e:
            logger.error("Store health check failed", error=str(e))
            return False
