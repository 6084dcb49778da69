"""Token-bucket rate limiter for outgoing notifications."""

import math
import threading
import time

from chat_alerts.errors import ConfigurationError


class RateLimiter:
    """Token bucket that admits at most ``rate`` events per ``per`` seconds.

    Tokens refill continuously with elapsed time, capped at ``rate``, so a
    burst can never exceed one window's worth of events. The bucket starts
    full. Events that find less than one token are dropped silently.

    Thread-safe: each admission check runs under a single lock.
    """

    def __init__(self, rate: float = math.inf, per: float = 1.0):
        """Initialize the rate limiter.

        Args:
            rate: Bucket capacity, and tokens added every ``per`` seconds
                (``math.inf`` = no limit)
            per: Refill window in seconds, must be positive

        Raises:
            ConfigurationError: If rate is negative or per is not positive
        """
        if math.isnan(rate) or rate < 0:
            raise ConfigurationError(f"Rate must not be negative, got {rate}")
        if math.isnan(per) or per <= 0:
            raise ConfigurationError(f"Per must be a positive number of seconds, got {per}")

        self.rate = float(rate)
        self.per = float(per)
        self._allowance = 0.0
        self._last_event_ms: int | None = None  # None = never
        self._lock = threading.Lock()

    @property
    def unlimited(self) -> bool:
        return math.isinf(self.rate)

    @property
    def allowance(self) -> float:
        """Tokens currently in the bucket (as of the last admission check)."""
        return self._allowance

    def admit(self, now_millis: int | None = None) -> bool:
        """Check whether an event arriving at ``now_millis`` may be sent.

        Args:
            now_millis: Event time in epoch milliseconds (default: now)

        Returns:
            True if the event is admitted, False if it should be dropped
        """
        if now_millis is None:
            now_millis = int(time.time() * 1000)

        with self._lock:
            if self.unlimited:
                self._last_event_ms = now_millis
                return True

            if self._last_event_ms is None:
                # First event: treat the last one as infinitely long ago
                self._allowance = self.rate
            else:
                # Clock going backwards adds nothing
                elapsed = max(0.0, (now_millis - self._last_event_ms) / 1000.0)
                self._allowance = min(
                    self.rate, self._allowance + elapsed * (self.rate / self.per)
                )
            self._last_event_ms = now_millis

            if self._allowance >= 1.0:
                self._allowance -= 1.0
                return True

            return False
