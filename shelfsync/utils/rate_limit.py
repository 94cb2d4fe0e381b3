# shelfsync/utils/rate_limit.py

import time
import random
import logging
from typing import Optional

class RateLimiter:
    """Spaces out calls to the metadata provider.

    Every call waits a random interval after the previous one, and every
    ``burst_size`` calls the limiter takes a longer pause. State is per
    instance, so each provider paces itself.
    """

    def __init__(self,
                 min_delay: float = 0.5,
                 max_delay: float = 1.0,
                 burst_size: int = 50,
                 min_burst_delay: float = 5.0,
                 max_burst_delay: float = 10.0):
        """
        Args:
            min_delay: Shortest gap between two provider calls in seconds
            max_delay: Longest gap between two provider calls in seconds
            burst_size: Calls allowed before a longer pause
            min_burst_delay: Shortest pause after a burst in seconds
            max_burst_delay: Longest pause after a burst in seconds
        """
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.burst_size = burst_size
        self.min_burst_delay = min_burst_delay
        self.max_burst_delay = max_burst_delay
        self.request_count = 0
        self._last_call: Optional[float] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    def delay(self) -> None:
        """Block until the next provider call may go out"""
        if self._last_call is not None:
            if self.request_count >= self.burst_size:
                pause = random.uniform(self.min_burst_delay, self.max_burst_delay)
                self.logger.info(f"Pausing metadata requests for {pause:.1f} seconds after {self.request_count} calls")
                time.sleep(pause)
                self.request_count = 0
            else:
                gap = random.uniform(self.min_delay, self.max_delay)
                remaining = gap - (time.monotonic() - self._last_call)
                if remaining > 0:
                    time.sleep(remaining)

        self.request_count += 1
        self._last_call = time.monotonic()
