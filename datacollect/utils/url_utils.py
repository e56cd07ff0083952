"""
URL helpers for datacollect.
"""

from urllib.parse import urljoin, urlparse


def get_domain(url: str) -> str:
    """
    Extract the domain (host) from a URL.

    Args:
        url: The URL to extract domain from.

    Returns:
        The domain/host portion of the URL.
    """
    parsed = urlparse(url)
    return parsed.netloc.lower()


def build_url(base_url: str, path: str) -> str:
    """Join a path onto a base URL, treating the base as a directory."""
    if not base_url.endswith("/"):
        base_url += "/"
    return urljoin(base_url, path.lstrip("/"))
