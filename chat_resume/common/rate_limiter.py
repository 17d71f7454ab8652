"""Blocking token bucket guarding the Gemini per-minute quotas."""

import logging
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """Token bucket refilled one token per ``60 / requests_per_minute`` seconds.

    The bucket starts full so short bursts (a chat turn embeds the query and
    calls the intent model at the same time) go through immediately. A limit
    of ``None`` or ``<= 0`` turns ``acquire`` into a no-op.
    """

    def __init__(
        self,
        requests_per_minute: int | None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.capacity = requests_per_minute if requests_per_minute and requests_per_minute > 0 else None
        self.interval = 60.0 / self.capacity if self.capacity else 0.0
        self.tokens = float(self.capacity or 0)
        self._clock = clock
        self._sleep = sleep
        self._last_refill = clock()
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.capacity is not None

    def _refill(self) -> None:
        elapsed = self._clock() - self._last_refill
        earned = int(elapsed // self.interval)
        if earned > 0:
            self.tokens = min(float(self.capacity), self.tokens + earned)
            self._last_refill += earned * self.interval

    def _try_take(self) -> float:
        """Take a token, or return how long to wait for the next one."""
        with self._lock:
            self._refill()
            if self.tokens >= 1:
                self.tokens -= 1
                return 0.0
            return max(self.interval - (self._clock() - self._last_refill), 0.0) or self.interval

    def acquire(self) -> None:
        """Block until a request may be sent."""
        if not self.enabled:
            return

        while (wait := self._try_take()) > 0:
            logger.debug("Rate limit reached, waiting %.2fs", wait)
            self._sleep(wait)
