"""Politeness controls for outgoing requests."""

from datacollect.compliance.rate_limiter import DomainState, RateLimiter

__all__ = [
    "DomainState",
    "RateLimiter",
]
