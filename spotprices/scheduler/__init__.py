"""
Scheduler package for the spot price cache.
Contains the periodic background refresher.
"""

from .simple_scheduler import SimpleScheduler

__all__ = [
    "SimpleScheduler",
]
