"""
Streaming pagination over a search source.

The paginator walks listing pages 1, 2, 3, ... of a PaginatedSource, fans out
the detail fetches for each page and yields records as an async generator.

Termination:
- a listing page with no entries ends the stream;
- a page whose entries all fail to produce a record ends the stream when no
  earlier page produced one either (the site layout probably changed);
- a FetchError on a listing page is raised to the consumer after the records
  already yielded.

Detail fetch failures are logged and skipped. Records are yielded in page order
and, within a page, in document order.
"""

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from datacollect.compliance.rate_limiter import RateLimiter
from datacollect.config import SearchConfig
from datacollect.core.interfaces import PaginatedSource
from datacollect.exceptions import DatacollectError, FetchError
from datacollect.models import ListingEntry
from datacollect.utils import metrics
from datacollect.utils.logging import DatacollectLogger

R = TypeVar("R")


@dataclass
class SearchState:
    """State owned by a single search call."""

    query: str
    page: int = 0
    pages_fetched: int = 0
    records_emitted: int = 0
    detail_failures: int = 0
    seen_success: bool = False
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def mark_success(self) -> None:
        async with self.lock:
            self.seen_success = True

    async def mark_failure(self) -> None:
        async with self.lock:
            self.detail_failures += 1


class Paginator(Generic[R]):
    """
    Drives a PaginatedSource across result pages.

    Example:
        paginator = Paginator(source, SearchConfig(delay_seconds=1.0))
        async for product in paginator.search("rust book"):
            ...
    """

    def __init__(
        self,
        source: PaginatedSource[R],
        config: SearchConfig | None = None,
        logger: DatacollectLogger | None = None,
    ):
        """
        Initialize the paginator.

        Args:
            source: Source providing listing pages and detail records.
            config: Search configuration (delay, concurrency, page bounds).
            logger: Logger instance.
        """
        self.source = source
        self.config = config or SearchConfig()
        self.logger = logger or DatacollectLogger("paginator")

    async def search(self, query: str) -> AsyncIterator[R]:
        """
        Yield records matching ``query``, one listing page at a time.

        Every call starts from the first page with fresh state. Closing the
        generator early cancels detail fetches still in flight.

        Raises:
            FetchError: if a listing page could not be fetched.
        """
        state = SearchState(query=query, page=self.config.start_page - 1)
        limiter = RateLimiter(self.config.rate_limit(), logger=self.logger)
        log = self.logger.bind(source=self.source.name, query=query)
        reason = "max_pages"

        while self.config.max_pages is None or state.pages_fetched < self.config.max_pages:
            state.page += 1

            try:
                async with limiter.slot(self.source.domain):
                    entries = await self.source.fetch_listing(query, state.page)
            except FetchError as e:
                log.search_finished(
                    query=query,
                    pages=state.pages_fetched,
                    records_emitted=state.records_emitted,
                    reason="listing_error",
                    error=str(e),
                )
                raise

            state.pages_fetched += 1
            metrics.record_search_page(self.source.name)
            log.listing_parsed(
                query=query,
                page=state.page,
                result_count=len(entries),
                sponsored_count=sum(1 for entry in entries if entry.sponsored),
            )

            if not entries:
                reason = "empty_page"
                break

            tasks = [
                asyncio.create_task(self._fetch_detail(entry, limiter, state, log))
                for entry in entries
            ]
            page_records = 0
            try:
                for task in tasks:
                    record = await task
                    if record is None:
                        continue
                    page_records += 1
                    state.records_emitted += 1
                    yield record
            finally:
                pending = [task for task in tasks if not task.done()]
                for task in pending:
                    task.cancel()
                if pending:
                    await asyncio.gather(*pending, return_exceptions=True)

            log.search_progress(
                query=query,
                page=state.page,
                records_emitted=state.records_emitted,
                detail_failures=state.detail_failures,
            )

            if page_records == 0 and not state.seen_success:
                reason = "no_records"
                break

        log.search_finished(
            query=query,
            pages=state.pages_fetched,
            records_emitted=state.records_emitted,
            reason=reason,
        )

    async def _fetch_detail(
        self,
        entry: ListingEntry,
        limiter: RateLimiter,
        state: SearchState,
        log: DatacollectLogger,
    ) -> R | None:
        """Fetch one detail record; failures are logged and reported as None."""
        try:
            async with limiter.slot(self.source.domain):
                record = await self.source.by_id(entry.id)
        except DatacollectError as e:
            await state.mark_failure()
            log.warning(
                "detail_fetch_failed",
                record_id=entry.id,
                page=state.page,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        await state.mark_success()
        metrics.record_search_record(self.source.name, entry.sponsored)
        return self.source.tag_sponsored(record, entry.sponsored)
