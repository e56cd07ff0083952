"""
Core data models for datacollect.

Records are plain aggregates of optional fields: partial extraction is the
normal case. None of them keeps a reference to the client or the document it
was built from.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any


# =============================================================================
# Money
# =============================================================================


class Currency(str, Enum):
    """Currencies recognised in prices."""

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CAD = "CAD"
    AUD = "AUD"

    @classmethod
    def from_abbreviation(cls, text: str) -> "Currency | None":
        """
        Map an abbreviation to a currency.

        Only alphabetic characters are compared, case-insensitively, so
        ``"US $"`` reads as ``us``. Symbols alone compare as the empty string and
        do not match anything.
        """
        key = "".join(c for c in text.lower() if c.isalpha())
        return _ABBREVIATIONS.get(key)


_ABBREVIATIONS: dict[str, Currency] = {
    "us": Currency.USD,
    "usd": Currency.USD,
    "eur": Currency.EUR,
    "euro": Currency.EUR,
    "gbp": Currency.GBP,
    "c": Currency.CAD,
    "cad": Currency.CAD,
    "au": Currency.AUD,
    "aud": Currency.AUD,
}


@dataclass(frozen=True)
class Money:
    """An amount of some currency. The amount is never negative."""

    currency: Currency
    amount: Decimal

    def __post_init__(self) -> None:
        if not self.amount.is_finite() or self.amount < 0:
            raise ValueError(f"invalid money amount: {self.amount}")

    def __str__(self) -> str:
        return f"{self.currency.value} {self.amount}"

    def to_dict(self) -> dict[str, Any]:
        return {"currency": self.currency.value, "amount": float(self.amount)}


# =============================================================================
# eBay
# =============================================================================


@dataclass
class Rating:
    """A numeric rating aggregated from many users."""

    fraction: float
    reviewers: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"fraction": self.fraction, "reviewers": self.reviewers}


@dataclass
class Seller:
    """Seller of a listing."""

    name: str
    feedback: float | None = None
    link: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "feedback": self.feedback,
            "link": self.link,
        }


@dataclass
class Product:
    """A product listing."""

    id: int
    name: str
    link: str | None = None
    seller: Seller | None = None
    price: Money | None = None
    rating: Rating | None = None
    # Only set on records produced by a search
    sponsored: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "link": self.link,
            "seller": self.seller.to_dict() if self.seller else None,
            "price": self.price.to_dict() if self.price else None,
            "rating": self.rating.to_dict() if self.rating else None,
            "sponsored": self.sponsored,
        }


@dataclass(frozen=True)
class ListingEntry:
    """One result row of a search listing page."""

    id: int
    sponsored: bool = False


# =============================================================================
# Passmark
# =============================================================================


@dataclass
class CPU:
    """A processor row from the Passmark CPU list."""

    id: int
    name: str
    price: Money | None = None
    cpumark: int | None = None
    thread: int | None = None
    socket: str | None = None
    cat: str | None = None
    cores: int | None = None
    logicals: int | None = None
    tdp: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price.to_dict() if self.price else None,
            "cpumark": self.cpumark,
            "thread": self.thread,
            "socket": self.socket,
            "cat": self.cat,
            "cores": self.cores,
            "logicals": self.logicals,
            "tdp": self.tdp,
        }


# =============================================================================
# RDAP
# =============================================================================


@dataclass(frozen=True)
class Event:
    """A timestamped domain lifecycle action (RFC 9083 section 4.5)."""

    action: str
    date: datetime
    actor: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "eventAction": self.action,
            "eventActor": self.actor,
            "eventDate": self.date.isoformat(),
        }


@dataclass(frozen=True)
class DomainRecord:
    """RDAP registration data for a domain. Events are kept in response order."""

    events: tuple[Event, ...] = field(default_factory=tuple)
    handle: str | None = None
    ldh_name: str | None = None
    status: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "handle": self.handle,
            "ldhName": self.ldh_name,
            "status": list(self.status),
            "events": [event.to_dict() for event in self.events],
        }
