"""
Utilities package for the index time-series sweep.

Exports shared helpers for logging and profiling.
Keep this package lightweight and free of sweep-specific logic.
"""

from index_timeseries.utils.logging import configure_logging, get_logger
from index_timeseries.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
