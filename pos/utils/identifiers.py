"""Time-derived identifiers for products, categories and sales."""
import threading
import time
from typing import Callable, Optional


class TimestampIdGenerator:
    """
    Issue ids from the millisecond clock.

    Two calls within the same millisecond would collide, so the generator
    remembers the last value it handed out and bumps past it. Ids are
    therefore strictly increasing within one process.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            stamp = int(self._clock() * 1000)
            if stamp <= self._last:
                stamp = self._last + 1
            self._last = stamp
            return str(stamp)


def receipt_number_for(sale_id: str, prefix: str = 'RCP') -> str:
    """Human-facing receipt number: prefix plus the last 8 digits of the id."""
    return f"{prefix}{sale_id[-8:]}"
