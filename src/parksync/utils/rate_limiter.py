"""
Pacing Policies
===============

Controls the spacing between per-park requests so scraped third-party
endpoints are not hammered. Orchestrators call ``acquire()`` once before
each park; the policy decides whether (and how long) to block.

Policies:
- NoPacing: never blocks (tests, single-entity runs)
- FixedDelay: fixed sleep between consecutive entities
- TokenBucket: rate-based limiting, safe to share between threads
"""

import threading
import time
from typing import Callable


class PacingPolicy:
    """Interface for pacing policies."""

    def acquire(self) -> None:
        raise NotImplementedError

    def reset(self) -> None:
        """Forget previous acquisitions."""


class NoPacing(PacingPolicy):
    """Pacing policy that never waits."""

    def acquire(self) -> None:
        return None


class FixedDelay(PacingPolicy):
    """Sleep a fixed number of seconds between consecutive acquisitions.

    The first acquisition after construction (or ``reset()``) returns
    immediately, so a run over N entities sleeps N-1 times.
    """

    def __init__(self, seconds: float, sleep: Callable[[float], None] = time.sleep):
        if seconds < 0:
            raise ValueError("delay must be non-negative")
        self.seconds = seconds
        self._sleep = sleep
        self._first = True

    def acquire(self) -> None:
        if self._first:
            self._first = False
            return
        if self.seconds > 0:
            self._sleep(self.seconds)

    def reset(self) -> None:
        self._first = True


class TokenBucket(PacingPolicy):
    """Rate limiter using token bucket algorithm.

    Usage:
        ```python
        pacing = TokenBucket(rate=0.5)  # 1 park every 2 seconds

        for park in parks:
            pacing.acquire()  # Blocks until token available
            sync(park)
        ```

    The lock is released while sleeping so concurrent callers can re-check.
    """

    def __init__(self, rate: float = 1.0,
                 clock: Callable[[], float] = time.time,
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize token bucket.

        Args:
            rate: Tokens per second (e.g., 1.0 = 1 request/second)
        """
        if rate <= 0:
            raise ValueError("rate must be positive")
        self.rate = rate
        self.capacity = max(rate, 1.0)
        self._clock = clock
        self._sleep = sleep
        self.tokens = self.capacity
        self.last_update = clock()
        self.lock = threading.Lock()

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self.last_update
        self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
        self.last_update = now

    def acquire(self) -> None:
        """Block until a token is available, then consume it."""
        while True:
            with self.lock:
                self._refill()
                if self.tokens >= 1.0:
                    self.tokens -= 1.0
                    return
                wait_time = (1.0 - self.tokens) / self.rate

            self._sleep(wait_time)

    def reset(self) -> None:
        """Reset the token bucket to full capacity."""
        with self.lock:
            self.tokens = self.capacity
            self.last_update = self._clock()
