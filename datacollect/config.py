"""
Configuration for datacollect.

All configuration can be set via environment variables with the DATACOLLECT_ prefix.
"""

from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict


class DatacollectSettings(BaseSettings):
    """Main settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DATACOLLECT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Identity
    user_agent: str = (
        "Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0"
    )

    # Transport
    request_timeout_seconds: float = 30.0
    max_redirects: int = 10
    verify_ssl: bool = True

    # Search politeness
    search_delay_seconds: float = 1.0
    max_concurrent_fetches: int = 4

    # Parsing
    default_currency: str = "USD"

    # Endpoints
    ebay_base_url: str = "https://www.ebay.com"
    passmark_base_url: str = "https://www.cpubenchmark.net"
    rdap_base_url: str = "https://rdap.org"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    def client_config(self, cookies: bool = False) -> "ClientConfig":
        """Build a client configuration from these settings."""
        return ClientConfig(
            user_agent=self.user_agent,
            timeout_seconds=self.request_timeout_seconds,
            max_redirects=self.max_redirects,
            verify_ssl=self.verify_ssl,
            cookies=cookies,
        )

    def search_config(self) -> "SearchConfig":
        """Build a search configuration from these settings."""
        return SearchConfig(
            delay_seconds=self.search_delay_seconds,
            max_concurrent_fetches=self.max_concurrent_fetches,
        )


@dataclass
class ClientConfig:
    """HTTP client configuration."""

    user_agent: str = "datacollect/0.1"
    timeout_seconds: float = 30.0
    max_redirects: int = 10
    verify_ssl: bool = True
    cookies: bool = False


@dataclass
class RateLimitConfig:
    """Request spacing configuration."""

    min_delay: float = 1.0
    max_concurrent: int = 4


@dataclass
class SearchConfig:
    """Paginated search configuration."""

    delay_seconds: float = 1.0
    max_concurrent_fetches: int = 4
    max_pages: int | None = None
    start_page: int = 1

    def rate_limit(self) -> RateLimitConfig:
        return RateLimitConfig(
            min_delay=self.delay_seconds,
            max_concurrent=self.max_concurrent_fetches,
        )


def load_config() -> DatacollectSettings:
    """Load configuration from environment variables."""
    return DatacollectSettings()
