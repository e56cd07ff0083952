"""
Exception hierarchy for datacollect.

All exceptions inherit from DatacollectError to allow catching all collection errors.
"""

from datetime import datetime, timezone
from typing import Any


class DatacollectError(Exception):
    """Base exception for all datacollect errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)


# =============================================================================
# Fetch Errors
# =============================================================================


class FetchError(DatacollectError):
    """HTTP fetch failed."""

    def __init__(self, url: str, message: str, status_code: int | None = None):
        super().__init__(
            f"Fetch failed for {url}: {message}",
            {"url": url, "status_code": status_code},
        )
        self.url = url
        self.status_code = status_code


class FetchTimeoutError(FetchError):
    """Request timed out."""

    def __init__(self, url: str, timeout_seconds: float):
        super().__init__(url, f"Timeout after {timeout_seconds}s")
        self.timeout_seconds = timeout_seconds


class HTTPStatusError(FetchError):
    """Server answered with a non-success status."""

    def __init__(self, url: str, status_code: int):
        super().__init__(url, f"HTTP {status_code}", status_code=status_code)


# =============================================================================
# Extraction Errors
# =============================================================================


class ExtractionError(DatacollectError):
    """Record extraction failed."""

    def __init__(self, url: str | None, message: str, field: str | None = None):
        where = f" for {url}" if url else ""
        super().__init__(
            f"Extraction failed{where}: {message}",
            {"url": url, "field": field},
        )
        self.url = url
        self.field = field


class ParseFailure(ExtractionError):
    """A single value could not be parsed."""

    def __init__(self, value: str | None, target: str):
        super().__init__(None, f"could not parse {value!r} as {target}", field=target)
        self.value = value
        self.target = target


class MissingFieldError(ExtractionError):
    """A field required for record identity is absent."""

    def __init__(self, url: str, field: str):
        super().__init__(url, f"required field '{field}' not found", field=field)
