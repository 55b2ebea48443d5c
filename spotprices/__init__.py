"""
Spot Price Cache - hourly electricity prices from spot-hinta.fi

Fetches today's and tomorrow's hourly prices, keeps them in a persistent
local cache, and refreshes only when the cached copy is out of date.

Main components:
- Price cache with refresh decisions and record migration
- HTTP transport for the upstream feed
- SQLite blob store for the persisted record
- Background refresher and FastAPI endpoints
"""

__version__ = "2.0.0"
