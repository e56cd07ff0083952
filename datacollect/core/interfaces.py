"""
Interfaces implemented by the data sources.

Each source is an independent strategy over one site; nothing is shared through
inheritance beyond these contracts.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from datacollect.models import ListingEntry

R = TypeVar("R")


class RecordSource(ABC, Generic[R]):
    """A site that can produce one record per identifier."""

    #: Short name used in logs and metrics
    name: str = "source"

    @property
    @abstractmethod
    def domain(self) -> str:
        """Host that requests go to; used as the rate limiting key."""

    @abstractmethod
    async def by_id(self, record_id: int) -> R:
        """
        Fetch and extract a single record.

        Raises:
            FetchError: if the page could not be fetched.
            MissingFieldError: if a field required for identity is absent.
        """


class PaginatedSource(RecordSource[R]):
    """A record source that also offers paginated keyword search."""

    @abstractmethod
    async def fetch_listing(self, query: str, page: int) -> list[ListingEntry]:
        """
        Fetch one page of search results.

        Returns:
            Result entries in document order; empty when the page lists nothing.

        Raises:
            FetchError: if the listing page could not be fetched.
        """

    @abstractmethod
    def tag_sponsored(self, record: R, sponsored: bool) -> R:
        """Attach the listing's sponsored flag to a record."""
