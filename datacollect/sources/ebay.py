"""
eBay product pages and keyword search.

Product pages are parsed field by field: a field whose anchor is missing from
the page is left as None and logged, only a missing title fails the record.
Both the legacy item layout (``#itemTitle``, ``.si-content``) and the current
one (``.x-item-title``, ``.x-sellercard-atf``) are recognised.
"""

import re
from collections.abc import AsyncIterator, Callable
from dataclasses import replace
from typing import TypeVar

from bs4 import BeautifulSoup, NavigableString, Tag

from datacollect.config import SearchConfig
from datacollect.core.client import Client
from datacollect.core.interfaces import PaginatedSource
from datacollect.core.paginator import Paginator
from datacollect.exceptions import MissingFieldError, ParseFailure
from datacollect.extraction.microdata import Scope
from datacollect.extraction.money import money_from_scope, money_from_text, parse_decimal
from datacollect.extraction.obfuscation import has_hidden_word
from datacollect.models import Currency, ListingEntry, Money, Product, Rating, Seller
from datacollect.utils import metrics
from datacollect.utils.logging import DatacollectLogger
from datacollect.utils.url_utils import build_url, get_domain

T = TypeVar("T")

SPONSORED_LABEL = "Sponsored"

AGGREGATE_RATING_TYPES = (
    "https://schema.org/AggregateRating",
    "http://schema.org/AggregateRating",
)

# Selector chains: the first match wins
TITLE_SELECTORS = ("#itemTitle", "h1.x-item-title__mainTitle", "h1[itemprop=name]")
SELLER_SELECTORS = (".si-content", ".x-sellercard-atf", ".ux-seller-section")
FEEDBACK_SELECTORS = ("#si-fb", ".x-sellercard-atf__data-item", ".ux-seller-section__item")
PRICE_SELECTORS = (".mainPrice", ".vi-price", ".x-price-primary", "[itemprop=offers]")

RESULT_SELECTORS = ("li.s-item", "div.s-item", "li.s-card")
RESULT_LINK_SELECTORS = ("a.s-item__link[href]", "a.su-link[href]", "a[href*='/itm/']")
DETAIL_SELECTORS = ".s-item__sep, .s-item__detail--primary, .s-card__footer"

RE_SELLER = re.compile(r"(?:https?://(?:www\.)?ebay\.[a-z.]+)?/(?:usr|str)/([A-Za-z0-9_.\-]+)")
RE_PERCENT = re.compile(r"([0-9]+(?:\.[0-9]+)?)\s*%")
RE_ITEM_ID = re.compile(r"/itm/(?:[^/?#]+/)?(\d+)")


class EbaySource(PaginatedSource[Product]):
    """eBay as a record source: product pages by item id and keyword search."""

    name = "ebay"

    def __init__(
        self,
        client: Client,
        base_url: str = "https://www.ebay.com",
        default_currency: Currency = Currency.USD,
        logger: DatacollectLogger | None = None,
    ):
        """
        Initialize the source.

        Args:
            client: HTTP client; eBay does not need cookies.
            base_url: Site root, e.g. ``https://www.ebay.com``.
            default_currency: Currency assumed when a price names none.
            logger: Logger instance.
        """
        self.client = client
        self.base_url = base_url
        self.default_currency = default_currency
        self.logger = logger or DatacollectLogger("ebay")

    @property
    def domain(self) -> str:
        return get_domain(self.base_url)

    def item_url(self, item_id: int) -> str:
        return build_url(self.base_url, f"itm/{item_id}")

    def search_url(self) -> str:
        return build_url(self.base_url, "sch/i.html")

    async def by_id(self, record_id: int) -> Product:
        """
        Fetch a product page and extract it.

        Raises:
            FetchError: if the page could not be fetched.
            MissingFieldError: if the page has no title.
        """
        link = self.item_url(record_id)
        html = await self.client.get_text(link)
        return parse_product(
            html,
            record_id,
            link,
            default_currency=self.default_currency,
            logger=self.logger,
        )

    async def fetch_listing(self, query: str, page: int) -> list[ListingEntry]:
        html = await self.client.get_text(
            self.search_url(),
            params={"_nkw": query, "_pgn": page},
        )
        return parse_listing(html)

    def tag_sponsored(self, record: Product, sponsored: bool) -> Product:
        return replace(record, sponsored=sponsored)

    def search(
        self,
        query: str,
        config: SearchConfig | None = None,
    ) -> AsyncIterator[Product]:
        """
        Stream products matching ``query`` across result pages.

        Each call keeps its own paging state, but requests go through this
        source's client, which is shared by every search on the source. Use a
        stateless client so that no cookies carry over between searches.

        See Paginator.search for ordering and termination.
        """
        return Paginator(self, config, logger=self.logger).search(query)


# =============================================================================
# Product page extraction
# =============================================================================


def parse_product(
    html: str,
    item_id: int,
    link: str | None = None,
    default_currency: Currency = Currency.USD,
    logger: DatacollectLogger | None = None,
) -> Product:
    """
    Build a Product from a fetched item page.

    Raises:
        MissingFieldError: if no title can be found.
    """
    logger = logger or DatacollectLogger("ebay")
    url = link or str(item_id)
    document = BeautifulSoup(html, "lxml")

    name = _extract_title(document)
    metrics.record_field("ebay", "name", name is not None)
    if name is None:
        logger.extraction_result(url=url, success=False, fields_extracted=[])
        raise MissingFieldError(url, "name")

    def optional(field_name: str, extract: Callable[[], T]) -> T | None:
        try:
            value = extract()
        except ParseFailure as e:
            logger.field_missing(url=url, field=field_name, reason=e.message)
            metrics.record_field("ebay", field_name, False)
            return None
        metrics.record_field("ebay", field_name, True)
        return value

    product = Product(
        id=item_id,
        name=name,
        link=link,
        seller=optional("seller", lambda: _extract_seller(document)),
        price=optional("price", lambda: _extract_price(document, default_currency)),
        rating=optional("rating", lambda: _extract_rating(document)),
    )

    logger.extraction_result(
        url=url,
        success=True,
        fields_extracted=[
            key for key, value in product.to_dict().items() if value is not None
        ],
    )
    return product


def _select_first(root: Tag, selectors: tuple[str, ...]) -> Tag | None:
    for selector in selectors:
        node = root.select_one(selector)
        if node is not None:
            return node
    return None


def _extract_title(document: BeautifulSoup) -> str | None:
    node = _select_first(document, TITLE_SELECTORS)
    if node is None:
        return None

    # The legacy title hides a "Details about" prefix in a child span
    for child in node.children:
        if type(child) is NavigableString:
            text = child.strip()
            if text:
                return text

    text = node.get_text(" ", strip=True)
    return text or None


def _extract_seller(document: BeautifulSoup) -> Seller:
    info = _select_first(document, SELLER_SELECTORS)
    if info is None:
        raise ParseFailure(None, "seller")

    name = None
    link = None
    for anchor in info.select("a[href]"):
        match = RE_SELLER.match(str(anchor["href"]))
        if match:
            name = match.group(1)
            link = str(anchor["href"])
            break

    if name is None:
        raise ParseFailure(info.get_text(" ", strip=True), "seller")

    return Seller(name=name, feedback=_extract_feedback(info), link=link)


def _extract_feedback(info: Tag) -> float | None:
    for selector in FEEDBACK_SELECTORS:
        for node in info.select(selector):
            match = RE_PERCENT.search(node.get_text(" ", strip=True))
            if match:
                return float(match.group(1)) * 0.01
    return None


def _extract_price(document: BeautifulSoup, default_currency: Currency) -> Money:
    node = _select_first(document, PRICE_SELECTORS)
    if node is None:
        raise ParseFailure(None, "price")

    scope = Scope(node)
    if scope.get_value("price") is not None:
        return money_from_scope(scope, default_currency)
    return money_from_text(node.get_text(" ", strip=True), default_currency)


def _extract_rating(document: BeautifulSoup) -> Rating:
    scope = None
    for item_type in AGGREGATE_RATING_TYPES:
        scope = Scope.find(document, item_type)
        if scope is not None:
            break
    if scope is None:
        raise ParseFailure(None, "rating")

    value_text = scope.get_value("ratingValue")
    value = parse_decimal(value_text) if value_text else None
    if value is None:
        raise ParseFailure(value_text, "rating")

    best_text = scope.get_value("bestRating")
    best = parse_decimal(best_text) if best_text else None
    if not best:
        best = 5

    count_text = scope.get_value("ratingCount") or scope.get_value("reviewCount")
    count = parse_decimal(count_text) if count_text else None

    return Rating(
        fraction=float(value / best),
        reviewers=int(count) if count is not None else None,
    )


# =============================================================================
# Search listing extraction
# =============================================================================


def parse_listing(html: str) -> list[ListingEntry]:
    """
    Read the result entries of a search page in document order.

    Duplicate item ids are dropped, keeping the first occurrence.
    """
    document = BeautifulSoup(html, "lxml")

    results: list[Tag] = []
    for selector in RESULT_SELECTORS:
        results = document.select(selector)
        if results:
            break

    entries: list[ListingEntry] = []
    seen: set[int] = set()
    for result in results:
        item_id = _result_item_id(result)
        if item_id is None or item_id in seen:
            continue
        seen.add(item_id)
        entries.append(ListingEntry(id=item_id, sponsored=is_sponsored(result)))
    return entries


def _result_item_id(result: Tag) -> int | None:
    anchor = _select_first(result, RESULT_LINK_SELECTORS)
    if anchor is None:
        return None
    match = RE_ITEM_ID.search(str(anchor["href"]))
    return int(match.group(1)) if match else None


def is_sponsored(result: Tag) -> bool:
    """Whether a search result carries the (possibly obfuscated) sponsored label."""
    return any(
        has_hidden_word(SPONSORED_LABEL, node.get_text())
        for node in result.select(DETAIL_SELECTORS)
    )
