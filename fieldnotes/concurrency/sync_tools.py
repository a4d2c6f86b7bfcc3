"""Lock-guarded counters, a token-bucket rate limiter and deadline-bound work."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable


class Counter:
    """Counts occurrences of keys safely across threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: dict[str, int] = {}

    def inc(self, key: str) -> None:
        """Add one to the count of key."""
        with self._lock:
            self._counts[key] = self._counts.get(key, 0) + 1

    def snapshot(self) -> dict[str, int]:
        """Return an independent copy of the current counts."""
        with self._lock:
            return dict(self._counts)


class TokenBucket:
    """Allows events at rate per second with bursts of up to burst events.

    The bucket starts full. Waiting reserves a token ahead of time, so later
    callers queue behind earlier ones.
    """

    def __init__(
        self,
        rate: float,
        burst: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if rate <= 0:
            raise ValueError("rate must be positive")
        if burst < 1:
            raise ValueError("burst must be at least 1")
        self.rate = float(rate)
        self.burst = burst
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._tokens = float(burst)
        self._last = clock()

    def _advance(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self._last)
        self._tokens = min(float(self.burst), self._tokens + elapsed * self.rate)
        self._last = now

    def allow(self) -> bool:
        """Take a token if one is available now."""
        with self._lock:
            self._advance()
            if self._tokens >= 1:
                self._tokens -= 1
                return True
            return False

    def wait(self, timeout: float | None = None) -> float:
        """Block until a token is available and return the seconds waited.

        Raises TimeoutError at once, taking nothing, if the wait would exceed timeout.
        """
        with self._lock:
            self._advance()
            self._tokens -= 1
            delay = 0.0 if self._tokens >= 0 else -self._tokens / self.rate
            if timeout is not None and delay > timeout:
                self._tokens += 1
                raise TimeoutError("rate: wait would exceed timeout")
        if delay > 0:
            self._sleep(delay)
        return delay


def timed_operation(timeout: float, work_duration: float = 0.1) -> float:
    """Do work_duration seconds of work unless timeout passes first.

    Returns the seconds spent; raises TimeoutError when the deadline wins.
    """
    started = time.monotonic()
    expired = threading.Event()
    deadline = threading.Timer(max(timeout, 0.0), expired.set)
    deadline.daemon = True
    deadline.start()
    try:
        if expired.wait(work_duration):
            raise TimeoutError("context deadline exceeded")
    finally:
        deadline.cancel()
    return time.monotonic() - started