"""
Storage package for the spot price cache.
Contains the blob store interface and its SQLite implementation.
"""

from .service import SqliteStore, Store

__all__ = [
    "SqliteStore",
    "Store",
]
