"""
Domain exceptions for the spot price cache.
Collaborators raise these; PriceCache recovers from all of them.
"""


class SpotPriceError(Exception):
    """Base exception for all spot price cache errors."""
    pass


class TransportError(SpotPriceError):
    """Raised when the price feed request fails or times out."""
    pass


class PriceParseError(SpotPriceError):
    """Raised when the price feed body cannot be interpreted."""
    pass


class StoreError(SpotPriceError):
    """Raised when the persistent blob store cannot be read or written."""
    pass
