"""
Core utility functions for the hybrid dashboard backend.
"""

from .date_utils import Clock, elapsed_ms, ms_to_datetime, now_ms

__all__ = [
    "Clock",
    "elapsed_ms",
    "ms_to_datetime",
    "now_ms",
]
