"""
datacollect

Structured record collection from eBay product pages and searches, the Passmark
CPU benchmark list and RDAP domain registration data.
"""

__version__ = "0.1.0"

from datacollect.config import DatacollectSettings, SearchConfig, load_config
from datacollect.exceptions import DatacollectError
from datacollect.models import CPU, Currency, DomainRecord, Event, Money, Product
from datacollect.core.client import Client
from datacollect.sources.ebay import EbaySource
from datacollect.sources.passmark import CPUMegaList
from datacollect.sources.rdap import DomainLookup

__all__ = [
    "CPU",
    "CPUMegaList",
    "Client",
    "Currency",
    "DatacollectError",
    "DatacollectSettings",
    "DomainLookup",
    "DomainRecord",
    "EbaySource",
    "Event",
    "Money",
    "Product",
    "SearchConfig",
    "load_config",
]
