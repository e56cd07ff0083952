"""Data sources: one module per site."""

from datacollect.sources.ebay import EbaySource, parse_listing, parse_product
from datacollect.sources.passmark import CPUMegaList, parse_cpu
from datacollect.sources.rdap import DomainLookup, parse_domain_record

__all__ = [
    "CPUMegaList",
    "DomainLookup",
    "EbaySource",
    "parse_cpu",
    "parse_domain_record",
    "parse_listing",
    "parse_product",
]
