"""Sliding-window rate limiter for job starts."""

import threading
import time
from collections import deque
from collections.abc import Callable


class RateLimiter:
    """
    Allows at most ``max_calls`` acquisitions in any rolling ``period_seconds``.

    ``acquire`` blocks the calling thread until a slot frees up. Safe to call
    from many worker threads at once.
    """

    def __init__(
        self,
        max_calls: int,
        period_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_calls < 1:
            raise ValueError(f"max_calls must be positive, got {max_calls}")
        self._max_calls = max_calls
        self._period = period_seconds
        self._clock = clock
        self._sleep = sleep
        self._calls: deque[float] = deque()
        self._lock = threading.Lock()

    def acquire(self) -> float:
        """Takes a slot, waiting if needed. Returns the seconds spent waiting."""
        waited = 0.0
        while True:
            with self._lock:
                now = self._clock()
                while self._calls and now - self._calls[0] >= self._period:
                    self._calls.popleft()
                if len(self._calls) < self._max_calls:
                    self._calls.append(now)
                    return waited
                delay = self._period - (now - self._calls[0])
            self._sleep(delay)
            waited += delay
