"""
Request spacing for polite scraping.

Sites such as eBay start serving bot checks when detail pages are requested in
quick bursts. The limiter enforces a fixed minimum interval between the start of
successive requests to a domain and caps how many may be in flight at once.
"""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from datacollect.config import RateLimitConfig
from datacollect.utils import metrics
from datacollect.utils.logging import DatacollectLogger


@dataclass
class DomainState:
    """Spacing state for a single domain."""

    domain: str
    last_request_time: float | None = None
    total_requests: int = 0
    total_wait: float = 0.0


class RateLimiter:
    """
    Per-domain limiter with a fixed minimum spacing between request starts.

    Waiters are served in arrival order (asyncio.Lock is FIFO), so tasks that
    request a slot in document order also start their fetches in that order.
    """

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        logger: DatacollectLogger | None = None,
    ):
        """
        Initialize the rate limiter.

        Args:
            config: Rate limiting configuration.
            logger: Logger instance.
        """
        self.config = config or RateLimitConfig()
        self.logger = logger or DatacollectLogger("rate_limiter")

        self._domain_states: dict[str, DomainState] = {}
        self._domain_locks: dict[str, asyncio.Lock] = {}
        self._semaphore = asyncio.Semaphore(max(1, self.config.max_concurrent))

    def _get_state(self, domain: str) -> DomainState:
        """Get or create domain state."""
        if domain not in self._domain_states:
            self._domain_states[domain] = DomainState(domain=domain)
        return self._domain_states[domain]

    def _get_lock(self, domain: str) -> asyncio.Lock:
        """Get or create domain lock."""
        if domain not in self._domain_locks:
            self._domain_locks[domain] = asyncio.Lock()
        return self._domain_locks[domain]

    async def acquire(self, domain: str) -> float:
        """
        Wait until a request to ``domain`` may start.

        Returns:
            The number of seconds waited.
        """
        lock = self._get_lock(domain)
        state = self._get_state(domain)

        async with lock:
            wait_time = 0.0
            if state.last_request_time is not None:
                elapsed = time.monotonic() - state.last_request_time
                wait_time = max(0.0, self.config.min_delay - elapsed)

            if wait_time > 0:
                self.logger.rate_limit_wait(
                    domain=domain,
                    delay_seconds=wait_time,
                    reason="min_spacing",
                )
                await asyncio.sleep(wait_time)

            state.last_request_time = time.monotonic()
            state.total_requests += 1
            state.total_wait += wait_time

        metrics.record_wait(domain, wait_time)
        return wait_time

    @asynccontextmanager
    async def slot(self, domain: str) -> AsyncIterator[float]:
        """
        Hold one of the concurrent request slots for the duration of a request.

        The spacing wait happens after a slot is obtained, so the interval is
        measured between actual request starts.
        """
        async with self._semaphore:
            waited = await self.acquire(domain)
            yield waited

    def get_stats(self, domain: str) -> dict[str, Any]:
        """
        Get statistics for a domain.

        Args:
            domain: The domain.

        Returns:
            Dictionary of statistics.
        """
        state = self._get_state(domain)
        return {
            "domain": domain,
            "min_delay": self.config.min_delay,
            "total_requests": state.total_requests,
            "total_wait": state.total_wait,
        }
