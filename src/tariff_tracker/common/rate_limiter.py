"""Token-bucket rate limiter for polite scraping."""

from __future__ import annotations

import time
import threading


class RateLimiter:
    """Thread-safe minimum-interval limiter.

    Args:
        requests_per_minute: Maximum requests allowed per minute. Zero or
            a negative value disables waiting.
    """

    def __init__(self, requests_per_minute: int = 30) -> None:
        self._interval = 60.0 / requests_per_minute if requests_per_minute > 0 else 0.0
        self._last_request_time: float | None = None
        self._lock = threading.Lock()

    def wait(self) -> None:
        """Block until the next request is allowed."""
        with self._lock:
            now = time.monotonic()
            if self._last_request_time is not None:
                remaining = self._interval - (now - self._last_request_time)
                if remaining > 0:
                    time.sleep(remaining)
            self._last_request_time = time.monotonic()
