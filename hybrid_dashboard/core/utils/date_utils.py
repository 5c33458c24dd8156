"""
Date and clock helpers.

Cache timestamps are integer milliseconds since the epoch; latencies are
measured with the monotonic performance counter.
"""

import time
from collections.abc import Callable
from datetime import UTC, datetime

# Signature of an injectable millisecond clock (tests pass a fake one)
Clock = Callable[[], int]


def now_ms() -> int:
    """Current wall-clock time as integer milliseconds since the epoch."""
    return int(time.time() * 1000)


def elapsed_ms(start: float) -> int:
    """Milliseconds elapsed since a time.perf_counter() reading."""
    return int((time.perf_counter() - start) * 1000)


def ms_to_datetime(timestamp_ms: int) -> datetime | None:
    """Convert an epoch-millisecond timestamp to UTC datetime (None for 0)."""
    if timestamp_ms <= 0:
        return None
    return datetime.fromtimestamp(timestamp_ms / 1000, UTC)
