"""
API package for the spot price cache.
Contains FastAPI route handlers and their dependencies.
"""

from .routes import router

__all__ = [
    "router",
]
