"""Utility modules for datacollect."""

from datacollect.utils.logging import DatacollectLogger, get_logger, setup_logging
from datacollect.utils.url_utils import build_url, get_domain

__all__ = [
    "DatacollectLogger",
    "build_url",
    "get_domain",
    "get_logger",
    "setup_logging",
]
