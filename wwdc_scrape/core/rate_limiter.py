"""Request throttling for the WWDC scraper."""

import time
from typing import Optional
import structlog

logger = structlog.get_logger(__name__)


class RateLimiter:
    """Keeps consecutive requests at least a minimum interval apart."""

    def __init__(self, requests_per_second: Optional[float]):
        """
        Initialize rate limiter.

        Args:
            requests_per_second: Maximum request rate, None for no throttling
        """
        self.min_interval = 1.0 / requests_per_second if requests_per_second else 0.0
        self.last_request_time: Optional[float] = None
        self.request_count = 0

    def wait_if_needed(self) -> None:
        """Sleep until the minimum interval since the previous request has passed."""
        if self.min_interval and self.last_request_time is not None:
            elapsed = time.monotonic() - self.last_request_time
            if elapsed < self.min_interval:
                logger.debug("Rate limiting: sleeping", sleep_time=self.min_interval - elapsed)
                time.sleep(self.min_interval - elapsed)

        self.last_request_time = time.monotonic()
        self.request_count += 1

    def reset(self) -> None:
        """Reset rate limiter state."""
        self.last_request_time = None
        self.request_count = 0
