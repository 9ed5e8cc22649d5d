"""Minimum-interval rate limiter for outbound web requests."""

import logging
import threading
import time

logger = logging.getLogger(__name__)


class RateLimiter:
    """Spaces successive requests at least ``min_interval`` seconds apart.

    One instance is shared by every caller that should be throttled together.
    The lock only guards the read-modify-write of the cursor; sleeping happens
    after it is released.
    """

    def __init__(self, min_interval: float) -> None:
        """Initialise the rate limiter.

        :param min_interval: Minimum seconds between requests. Zero disables limiting.
        """
        self.min_interval = max(0.0, min_interval)
        self._last_request: float | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_millis(cls, min_interval_ms: int) -> "RateLimiter":
        """Create a rate limiter from an interval in milliseconds.

        :param min_interval_ms: Minimum milliseconds between requests.
        :returns: Configured RateLimiter.
        """
        return cls(min_interval_ms / 1000)

    def wait(self) -> float:
        """Block until the next request is permitted.

        :returns: Seconds spent sleeping.
        """
        if self.min_interval == 0:
            return 0.0

        with self._lock:
            now = time.monotonic()
            if self._last_request is None:
                sleep_for = 0.0
            else:
                sleep_for = max(0.0, self.min_interval - (now - self._last_request))
            self._last_request = now + sleep_for

        if sleep_for > 0:
            logger.debug(f"Rate limit: sleeping {sleep_for:.3f}s")
            time.sleep(sleep_for)
        return sleep_for
