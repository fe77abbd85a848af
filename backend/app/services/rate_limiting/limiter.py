"""
Sliding-window rate limiter for outbound indexer / pinning requests.
"""

import asyncio
import time
from collections import defaultdict, deque


class RateLimiter:
    """
    Allows at most ``max_requests`` per ``window_sec`` for each key.

    Usage:
        limiter = RateLimiter(max_requests=5, window_sec=1.0)
        async with limiter.acquire("eth-mainnet"):
            # Make API request
            ...
    """

    def __init__(self, max_requests: int, window_sec: float = 1.0):
        self.max_requests = max(1, max_requests)
        self.window_sec = window_sec
        self._windows: dict[str, deque[float]] = defaultdict(deque)
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def acquire(self, key: str = "default") -> "RateLimiterContext":
        """
        Wait for a free slot in the window of ``key``.

        Args:
            key: Separate budget per upstream (e.g. one per Alchemy network)
        """
        return RateLimiterContext(self, key)

    async def _wait_for_slot(self, key: str) -> None:
        async with self._locks[key]:
            window = self._windows[key]
            while True:
                now = time.monotonic()
                while window and window[0] <= now - self.window_sec:
                    window.popleft()
                if len(window) < self.max_requests:
                    window.append(now)
                    return
                await asyncio.sleep(window[0] + self.window_sec - now)


class RateLimiterContext:
    """Async context manager returned by RateLimiter.acquire()."""

    def __init__(self, limiter: RateLimiter, key: str):
        self.limiter = limiter
        self.key = key

    async def __aenter__(self):
        await self.limiter._wait_for_slot(self.key)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


_limiters: dict[str, RateLimiter] = {}


def get_rate_limiter(name: str, max_requests: int, window_sec: float = 1.0) -> RateLimiter:
    """Get or create a named rate limiter shared across adapter instances."""
    if name not in _limiters:
        _limiters[name] = RateLimiter(max_requests, window_sec)
    return _limiters[name]
