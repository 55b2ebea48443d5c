"""
HTTP transport for the upstream price feed.
One GET per call, no retries, bounded by an explicit timeout.
"""

import asyncio
import json
from typing import Any, Protocol

import httpx

from spotprices.config import settings
from spotprices.exceptions import PriceParseError, TransportError


class Transport(Protocol):
    """Request/response primitive consumed by PriceCache."""

    async def get(self, url: str) -> Any:
        ...


class HttpxTransport:
    """Transport that issues a single httpx GET and decodes the JSON body."""

    def __init__(self, timeout: float = None):
        self.timeout = timeout if timeout is not None else settings.request_timeout

    async def get(self, url: str) -> Any:
        try:
            # httpx limits each connect/read step; wait_for bounds the whole request
            return await asyncio.wait_for(self._get_json(url), self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise TransportError(f"Request timed out after {self.timeout}s: {e}")
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error: {e}")
        except ValueError as e:
            raise PriceParseError(f"Invalid JSON body: {e}")
        except Exception as e:
            raise TransportError(f"Unexpected error: {e}")

    async def _get_json(self, url: str) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(url, headers={"Accept": "application/json"})
            response.raise_for_status()
            return json.loads(response.text)
