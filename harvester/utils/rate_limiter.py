"""
Rate limiter utility for controlling request frequency per source.
"""

import asyncio
import time
from typing import Optional


class RateLimiter:
    """Spaces requests evenly at ``requests_per_second``.

    Callers reserve the next free slot under a lock and then sleep outside
    of it, so concurrent callers queue up instead of bursting.
    """

    def __init__(self, requests_per_second: float = 1.0):
        """Initialize rate limiter.

        Args:
            requests_per_second: Maximum sustained request rate
        """
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        self.requests_per_second = requests_per_second
        self.delay_seconds = 1.0 / requests_per_second
        self._next_slot: Optional[float] = None
        self._lock = asyncio.Lock()

    async def wait(self):
        """Wait appropriate amount of time before next request."""
        async with self._lock:
            now = time.monotonic()
            slot = now if self._next_slot is None else max(now, self._next_slot)
            self._next_slot = slot + self.delay_seconds
        wait_time = slot - now
        if wait_time > 0:
            await asyncio.sleep(wait_time)
