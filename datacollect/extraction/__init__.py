"""Extraction toolkit: microdata, prices and obfuscated labels."""

from datacollect.extraction.microdata import Scope
from datacollect.extraction.money import (
    currency_from_text,
    money_from_scope,
    money_from_text,
    parse_cents,
    parse_decimal,
    parse_number,
)
from datacollect.extraction.obfuscation import has_hidden_word

__all__ = [
    "Scope",
    "currency_from_text",
    "has_hidden_word",
    "money_from_scope",
    "money_from_text",
    "parse_cents",
    "parse_decimal",
    "parse_number",
]
