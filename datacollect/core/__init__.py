"""Core modules: HTTP client and search pagination."""

from datacollect.core.client import Client
from datacollect.core.interfaces import PaginatedSource, RecordSource
from datacollect.core.paginator import Paginator, SearchState

__all__ = [
    "Client",
    "PaginatedSource",
    "Paginator",
    "RecordSource",
    "SearchState",
]
