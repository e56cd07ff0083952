"""
HTTP client used by every data source.

Wraps an httpx.AsyncClient and maps transport failures onto FetchError so that
callers only ever see the datacollect exception hierarchy. Two variants exist:
a cookie-keeping client for sites that hand out a session cookie first, and a
stateless one that forgets cookies after every response.
"""

import time
from dataclasses import replace
from typing import Any

import httpx

from datacollect.config import ClientConfig
from datacollect.exceptions import FetchError, FetchTimeoutError, HTTPStatusError
from datacollect.utils import metrics
from datacollect.utils.logging import DatacollectLogger
from datacollect.utils.url_utils import get_domain


class Client:
    """
    Async HTTP client with request timeouts and structured logging.

    Use as an async context manager, or call start()/stop() explicitly. The
    client is lazily started on first request.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        logger: DatacollectLogger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            config: Client configuration.
            logger: Logger instance.
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        self.config = config or ClientConfig()
        self.logger = logger or DatacollectLogger("client")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def with_cookies(cls, config: ClientConfig | None = None, **kwargs: Any) -> "Client":
        """Create a client that keeps a cookie jar between requests."""
        return cls(replace(config or ClientConfig(), cookies=True), **kwargs)

    @classmethod
    def stateless(cls, config: ClientConfig | None = None, **kwargs: Any) -> "Client":
        """Create a client that never sends cookies back."""
        return cls(replace(config or ClientConfig(), cookies=False), **kwargs)

    @property
    def keeps_cookies(self) -> bool:
        return self.config.cookies

    async def start(self) -> None:
        """Initialize the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout_seconds),
                follow_redirects=True,
                max_redirects=self.config.max_redirects,
                verify=self.config.verify_ssl,
                headers={"User-Agent": self.config.user_agent},
                transport=self._transport,
            )

    async def stop(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        Send a GET request. The response status is not checked.

        Raises:
            FetchTimeoutError: if the request timed out.
            FetchError: on any other transport failure.
        """
        if self._client is None:
            await self.start()

        assert self._client is not None

        domain = get_domain(url)
        start_time = time.monotonic()
        self.logger.fetch_start(url=url, params=params)

        try:
            response = await self._client.get(url, params=params, headers=headers)
        except httpx.TimeoutException:
            self._record_failure(url, domain, "FetchTimeoutError", start_time)
            raise FetchTimeoutError(url, self.config.timeout_seconds)
        except httpx.HTTPError as e:
            self._record_failure(url, domain, type(e).__name__, start_time)
            raise FetchError(url, str(e)) from e
        finally:
            if not self.config.cookies:
                self._client.cookies.clear()

        duration_ms = (time.monotonic() - start_time) * 1000
        metrics.record_fetch(
            domain=domain,
            status="success" if response.is_success else "http_error",
            duration_seconds=duration_ms / 1000,
            status_code=response.status_code,
        )
        self.logger.fetch_success(
            url=str(response.url),
            status_code=response.status_code,
            duration_ms=duration_ms,
            content_length=len(response.content),
        )
        return response

    async def get_text(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> str:
        """
        GET a document and return its decoded body.

        Raises:
            HTTPStatusError: if the status is not 2xx.
        """
        response = await self.get(url, params=params, headers=headers)
        _raise_for_status(url, response)
        return response.text

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        GET a JSON document and decode it.

        Raises:
            HTTPStatusError: if the status is not 2xx.
            FetchError: if the body is not valid JSON.
        """
        response = await self.get(url, params=params, headers=headers)
        _raise_for_status(url, response)
        return decode_json(url, response)

    def _record_failure(self, url: str, domain: str, error_type: str, start_time: float) -> None:
        duration = time.monotonic() - start_time
        metrics.record_fetch(domain=domain, status="error", duration_seconds=duration)
        metrics.record_error(domain, error_type)
        self.logger.fetch_error(url=url, error=error_type, error_type=error_type)

    async def __aenter__(self) -> "Client":
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.stop()


def _raise_for_status(url: str, response: httpx.Response) -> None:
    if not response.is_success:
        metrics.record_error(get_domain(url), "HTTPStatusError")
        raise HTTPStatusError(url, response.status_code)


def decode_json(url: str, response: httpx.Response) -> Any:
    """Decode a response body as JSON, mapping decode errors onto FetchError."""
    try:
        return response.json()
    except ValueError as e:
        raise FetchError(url, f"invalid JSON body: {e}", response.status_code) from e
