"""
Tests for eBay product and search extraction.
"""

from decimal import Decimal

import httpx
import pytest

from datacollect.config import SearchConfig
from datacollect.exceptions import HTTPStatusError, MissingFieldError
from datacollect.models import Currency, ListingEntry, Money
from datacollect.sources.ebay import EbaySource, parse_listing, parse_product


class TestParseProduct:
    """Tests for product page extraction."""

    def test_legacy_layout(self, sample_product_html):
        """Test extracting every field from the legacy item layout."""
        product = parse_product(sample_product_html, 254625474154, "https://www.ebay.com/itm/254625474154")

        assert product.id == 254625474154
        assert product.name == "The Rust Programming Language by Steve Klabnik"
        assert product.link == "https://www.ebay.com/itm/254625474154"
        assert product.seller is not None
        assert product.seller.name == "bookseller_42"
        assert product.seller.feedback == pytest.approx(0.995)
        assert product.seller.link.startswith("https://www.ebay.com/usr/bookseller_42")
        assert product.price == Money(Currency.USD, Decimal("31.99"))
        assert product.rating is not None
        assert product.rating.fraction == pytest.approx(0.9)
        assert product.rating.reviewers == 12
        assert product.sponsored is None

    def test_current_layout(self, sample_product_html_current):
        """Test the current item layout, which has no rating."""
        product = parse_product(sample_product_html_current, 1)

        assert product.name == "Rust in Action, paperback"
        assert product.seller is not None
        assert product.seller.name == "rustbooks"
        assert product.seller.feedback == pytest.approx(1.0)
        assert product.price == Money(Currency.GBP, Decimal("24.50"))
        assert product.rating is None

    def test_default_currency(self):
        """Test that a bare dollar price takes the configured currency."""
        html = '<h1 id="itemTitle">Widget</h1><div class="x-price-primary">$7.25</div>'

        product = parse_product(html, 2, default_currency=Currency.CAD)

        assert product.price == Money(Currency.CAD, Decimal("7.25"))

    def test_missing_optional_fields(self):
        """Test that absent optional fields are left empty."""
        product = parse_product('<h1 id="itemTitle">Widget</h1>', 3)

        assert product.name == "Widget"
        assert product.seller is None
        assert product.price is None
        assert product.rating is None

    def test_unparseable_price(self):
        """Test that a price without digits is treated as missing."""
        html = '<h1 id="itemTitle">Widget</h1><div class="x-price-primary">See price in cart</div>'

        assert parse_product(html, 4).price is None

    def test_missing_title(self):
        """Test that a page without a title fails the record."""
        with pytest.raises(MissingFieldError) as exc_info:
            parse_product("<html><body><p>Item not found</p></body></html>", 5)

        assert exc_info.value.field == "name"

    def test_to_dict(self, sample_product_html):
        """Test serialising a product."""
        data = parse_product(sample_product_html, 6).to_dict()

        assert data["price"] == {"currency": "USD", "amount": 31.99}
        assert data["seller"]["name"] == "bookseller_42"
        assert data["sponsored"] is None


class TestParseListing:
    """Tests for search result extraction."""

    def test_entries_in_document_order(self, sample_search_html):
        """Test that results are read in order, with duplicates dropped."""
        entries = parse_listing(sample_search_html)

        assert entries == [
            ListingEntry(id=111, sponsored=False),
            ListingEntry(id=222, sponsored=True),
        ]

    def test_empty_page(self, sample_empty_search_html):
        """Test that a page with no results lists nothing."""
        assert parse_listing(sample_empty_search_html) == []


class TestEbaySource:
    """Tests for EbaySource against a mock transport."""

    @pytest.mark.asyncio
    async def test_by_id(self, make_client, sample_product_html):
        """Test fetching a product by item id."""
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, text=sample_product_html)

        async with make_client(handler) as client:
            product = await EbaySource(client).by_id(254625474154)

        assert requested == ["https://www.ebay.com/itm/254625474154"]
        assert product.link == "https://www.ebay.com/itm/254625474154"
        assert product.seller.name == "bookseller_42"

    @pytest.mark.asyncio
    async def test_by_id_http_error(self, make_client):
        """Test that a failing item page raises."""
        async with make_client(lambda request: httpx.Response(404)) as client:
            with pytest.raises(HTTPStatusError):
                await EbaySource(client).by_id(1)

    @pytest.mark.asyncio
    async def test_search(
        self,
        make_client,
        sample_search_html,
        sample_empty_search_html,
        sample_product_html_current,
    ):
        """Test a search across a result page and an empty one."""
        listing_pages: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/sch/i.html":
                assert request.url.params["_nkw"] == "rust book"
                page = request.url.params["_pgn"]
                listing_pages.append(page)
                html = sample_search_html if page == "1" else sample_empty_search_html
                return httpx.Response(200, text=html)
            if request.url.path == "/itm/222":
                return httpx.Response(500)
            return httpx.Response(200, text=sample_product_html_current)

        source_config = SearchConfig(delay_seconds=0.0)
        async with make_client(handler) as client:
            source = EbaySource(client, base_url="https://www.ebay.com")
            products = [product async for product in source.search("rust book", source_config)]

        assert listing_pages == ["1", "2"]
        assert [product.id for product in products] == [111]
        assert products[0].sponsored is False

    @pytest.mark.asyncio
    async def test_search_tags_sponsored(self, make_client, sample_search_html, sample_empty_search_html):
        """Test that sponsored results are flagged on the product."""
        item_html = '<h1 id="itemTitle">Rust book</h1>'

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/sch/i.html":
                first = request.url.params["_pgn"] == "1"
                return httpx.Response(200, text=sample_search_html if first else sample_empty_search_html)
            return httpx.Response(200, text=item_html)

        async with make_client(handler) as client:
            source = EbaySource(client)
            products = [p async for p in source.search("rust", SearchConfig(delay_seconds=0.0))]

        assert [(p.id, p.sponsored) for p in products] == [(111, False), (222, True)]

    @pytest.mark.asyncio
    async def test_searches_share_client_without_cookies(self, make_client, sample_empty_search_html):
        """Test that repeated searches on one stateless client send no cookies."""
        cookies_seen: list[str | None] = []

        def handler(request: httpx.Request) -> httpx.Response:
            cookies_seen.append(request.headers.get("cookie"))
            return httpx.Response(
                200,
                text=sample_empty_search_html,
                headers={"Set-Cookie": "dp1=tracking; Path=/"},
            )

        async with make_client(handler, cookies=False) as client:
            source = EbaySource(client)
            for query in ("rust", "python"):
                assert [p async for p in source.search(query, SearchConfig(delay_seconds=0.0))] == []

        assert cookies_seen == [None, None]
