"""
Parsing of prices and other numbers found in scraped text.

Accepts free text such as ``"$312.03"``, ``"US $1,024.99"`` or ``"312"`` and
schema.org microdata scopes exposing ``price``/``priceCurrency``. A value that
cannot be parsed is reported as ParseFailure (or None from the low-level
helpers); a zero amount is never made up.
"""

import re
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Callable, TypeVar

from datacollect.exceptions import ParseFailure
from datacollect.extraction.microdata import Scope
from datacollect.models import Currency, Money

T = TypeVar("T")

_CENTS = Decimal("0.01")
_CURRENCY_SPLIT = re.compile(r"[\s\d]+")


def parse_decimal(text: str) -> Decimal | None:
    """
    Parse the digits and decimal point of ``text`` at full precision.

    Every other character (currency symbols, thousands separators) is dropped.

        "$312.03"      -> Decimal("312.03")
        "312"          -> Decimal("312")
        "13,096,340.3" -> Decimal("13096340.3")
        "8.8.4.4"      -> None
    """
    kept = "".join(c for c in text if c.isdigit() or c == ".")
    if not kept or kept.count(".") > 1:
        return None
    try:
        value = Decimal(kept)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def parse_cents(text: str) -> Decimal | None:
    """Like parse_decimal, but truncated to two places after the decimal point."""
    value = parse_decimal(text)
    if value is None:
        return None
    return value.quantize(_CENTS, rounding=ROUND_DOWN)


def parse_number(value: object, convert: Callable[[str], T]) -> T | None:
    """
    Convert a JSON value that may be a number or a string with thousands separators.

    Returns None instead of raising when the value cannot be converted.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        # 8.0 in an integer column
        value = int(value)
    if isinstance(value, (int, float)):
        value = repr(value)
    text = str(value).replace(",", "").strip()
    if not text:
        return None
    try:
        return convert(text)
    except (TypeError, ValueError, ArithmeticError):
        return None


def currency_from_text(text: str) -> Currency | None:
    """Find the first recognisable currency abbreviation in a price string."""
    for token in _CURRENCY_SPLIT.split(text):
        if not token:
            continue
        currency = Currency.from_abbreviation(token)
        if currency is not None:
            return currency
    return None


def money_from_text(
    text: str,
    default_currency: Currency = Currency.USD,
    truncate_to_cents: bool = False,
) -> Money:
    """
    Parse a price written as free text.

    The currency is the first recognised abbreviation, else ``default_currency``.
    The amount is the first whitespace-separated token containing a parseable
    number.

    Raises:
        ParseFailure: if no token yields an amount.
    """
    parse = parse_cents if truncate_to_cents else parse_decimal
    currency = currency_from_text(text) or default_currency

    for token in text.split():
        amount = parse(token)
        if amount is not None:
            return Money(currency, amount)

    raise ParseFailure(text, "price")


def money_from_scope(
    scope: Scope,
    default_currency: Currency = Currency.USD,
) -> Money:
    """
    Read a price from a microdata scope (an Offer or similar).

    Raises:
        ParseFailure: if the scope has no ``price`` or it cannot be parsed.
    """
    price = scope.get_value("price")
    if price is None:
        raise ParseFailure(None, "price")

    currency_text = scope.get_value("priceCurrency")
    currency = Currency.from_abbreviation(currency_text) if currency_text else None
    if currency is None:
        return money_from_text(price, default_currency)

    amount = parse_decimal(price)
    if amount is None:
        raise ParseFailure(price, "price")
    return Money(currency, amount)


def resolve_currency(code: str) -> Currency:
    """Map a configured currency code onto a Currency, falling back to USD."""
    return Currency.from_abbreviation(code) or Currency.USD
