"""Pacing for outbound email so the mail provider is not flooded."""

import threading
import time
from typing import Callable, Optional


class SendRateLimiter:
    """Enforces a minimum interval between consecutive sends.

    The first call to wait() returns immediately. Later calls sleep only for
    whatever part of the interval has not already elapsed.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if min_interval < 0:
            raise ValueError(f"min_interval must be >= 0, got {min_interval}")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_send: Optional[float] = None
        self._lock = threading.Lock()

    def wait(self) -> float:
        """Block until the next send is allowed.

        Returns:
            Seconds slept (0.0 when no wait was needed)
        """
        with self._lock:
            slept = 0.0
            now = self._clock()
            if self._last_send is not None:
                remaining = self.min_interval - (now - self._last_send)
                if remaining > 0:
                    self._sleep(remaining)
                    slept = remaining
                    now = self._clock()
            self._last_send = now
            return slept
