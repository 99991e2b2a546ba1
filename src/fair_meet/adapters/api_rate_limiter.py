"""Rate limiter for outgoing API requests.

Keeps a minimum delay between requests to one API so that fan-out from a
single ranking request stays within the provider's published limits.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class ApiRateLimiter:
    """Spaces requests to one API at least ``min_delay_seconds`` apart.

    Shared by every adapter instance that talks to the same API; callers
    queue on an asyncio.Lock and are released one at a time.
    """

    def __init__(
        self,
        api_name: str,
        min_delay_seconds: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the rate limiter.

        Args:
            api_name: Name of the API (for logging).
            min_delay_seconds: Minimum delay between requests in seconds. 0 disables waiting.
            clock: Monotonic time source.
        """
        if min_delay_seconds < 0:
            raise ValueError("min_delay_seconds must not be negative")
        self.api_name = api_name
        self.min_delay_seconds = min_delay_seconds
        self._clock = clock
        self._last_request_time: float | None = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait until the next request to this API is allowed."""
        if self.min_delay_seconds == 0:
            return

        async with self._lock:
            if self._last_request_time is not None:
                wait_time = self.min_delay_seconds - (self._clock() - self._last_request_time)
                if wait_time > 0:
                    logger.debug(f"{self.api_name}: waiting {wait_time:.2f}s before next request")
                    await asyncio.sleep(wait_time)

            self._last_request_time = self._clock()

    async def __aenter__(self) -> ApiRateLimiter:
        await self.acquire()
        return self

    async def __aexit__(
        self, _exc_type: type | None, _exc_val: Exception | None, _exc_tb: object
    ) -> None:
        """Nothing to release; the delay is measured from request start."""
