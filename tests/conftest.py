"""
Pytest configuration and shared fixtures.
"""

from collections.abc import Callable

import httpx
import pytest

from datacollect.config import ClientConfig
from datacollect.core.client import Client

Handler = Callable[[httpx.Request], httpx.Response]


# =============================================================================
# HTTP client backed by httpx.MockTransport
# =============================================================================


@pytest.fixture
def make_client() -> Callable[..., Client]:
    """
    Build a Client whose requests are answered by a handler function.

    Usage:
        client = make_client(handler, cookies=True)
    """

    def factory(handler: Handler, cookies: bool = False, **config_kwargs) -> Client:
        config = ClientConfig(cookies=cookies, **config_kwargs)
        return Client(config, transport=httpx.MockTransport(handler))

    return factory


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_product_html() -> str:
    """Item page in the legacy layout, with offer and rating microdata."""
    return """
<!DOCTYPE html>
<html lang="en">
<head><title>The Rust Programming Language | eBay</title></head>
<body>
    <h1 class="it-ttl" id="itemTitle"><span class="g-hdn">Details about  &nbsp;</span>The Rust Programming Language by Steve Klabnik</h1>
    <div class="si-content">
        <a href="https://www.ebay.com/usr/bookseller_42?_trksid=p2047675.l2559">
            <span class="mbg-nw">bookseller_42</span>
        </a>
        <div id="si-fb">99.5%&nbsp;Positive feedback</div>
    </div>
    <div class="mainPrice" itemprop="offers" itemscope itemtype="http://schema.org/Offer">
        <span id="prcIsum" itemprop="price" content="31.99">US $31.99</span>
        <span itemprop="priceCurrency" content="USD"></span>
    </div>
    <div itemprop="aggregateRating" itemscope itemtype="http://schema.org/AggregateRating">
        <span itemprop="ratingValue" content="4.5">4.5</span> out of 5 stars
        <span itemprop="ratingCount" content="12">12 product ratings</span>
    </div>
</body>
</html>
    """.strip()


@pytest.fixture
def sample_product_html_current() -> str:
    """Item page in the current layout, without microdata or ratings."""
    return """
<!DOCTYPE html>
<html lang="en">
<body>
    <div class="x-item-title">
        <h1 class="x-item-title__mainTitle"><span class="ux-textspans ux-textspans--BOLD">Rust in Action, paperback</span></h1>
    </div>
    <div class="x-sellercard-atf">
        <a href="https://www.ebay.co.uk/str/rustbooks?_trksid=p4429486"><span>rustbooks</span></a>
        <ul>
            <li class="x-sellercard-atf__data-item"><span>100% positive</span></li>
        </ul>
    </div>
    <div class="x-price-primary"><span class="ux-textspans">GBP 24.50</span></div>
</body>
</html>
    """.strip()


def _sponsored_spans() -> str:
    # "Sponsored" with decoy letters the site hides through CSS
    letters = ["S", "Q", "p", "o", "X", "n", "s", "Z", "o", "r", "e", "d"]
    return "".join(f'<span class="s-{i}">{c}</span>' for i, c in enumerate(letters))


@pytest.fixture
def sample_search_html() -> str:
    """Search result page with one sponsored result and a repeated item."""
    return f"""
<!DOCTYPE html>
<html lang="en">
<body>
    <ul class="srp-results srp-list">
        <li class="s-item">
            <a class="s-item__link" href="https://www.ebay.com/itm/111?hash=item19">
                <div class="s-item__title">Programming Rust, 2nd edition</div>
            </a>
            <div class="s-item__detail s-item__detail--primary"><span>Buy It Now</span></div>
        </li>
        <li class="s-item">
            <a class="s-item__link" href="https://www.ebay.com/itm/rust-book-new/222?hash=item33">
                <div class="s-item__title">The Rust Programming Language</div>
            </a>
            <div class="s-item__detail s-item__detail--primary">{_sponsored_spans()}</div>
        </li>
        <li class="s-item">
            <a class="s-item__link" href="https://www.ebay.com/b/Books/267">
                <div class="s-item__title">Shop on eBay</div>
            </a>
        </li>
        <li class="s-item">
            <a class="s-item__link" href="https://www.ebay.com/itm/111?hash=item19">
                <div class="s-item__title">Programming Rust, 2nd edition</div>
            </a>
        </li>
    </ul>
</body>
</html>
    """.strip()


@pytest.fixture
def sample_empty_search_html() -> str:
    """Search result page listing nothing."""
    return """
<!DOCTYPE html>
<html lang="en">
<body>
    <div class="srp-save-null-search"><h3>No exact matches found</h3></div>
</body>
</html>
    """.strip()


@pytest.fixture
def sample_microdata_html() -> str:
    """Product microdata with a nested rating item."""
    return """
<html>
<body>
    <div itemscope itemtype="http://schema.org/Product">
        <span itemprop="name alternateName">Blend-O-Matic</span>
        <span itemprop="price">$19.95</span>
        <div itemprop="reviews" itemscope itemtype="http://schema.org/AggregateRating">
            <img src="four-stars.jpg" alt="four stars">
            <span itemprop="ratingValue" content="4">four</span> stars,
            based on <span itemprop="ratingCount">25</span> user ratings
        </div>
        <div itemprop="reviews" itemscope itemtype="http://schema.org/AggregateRating">
            <span itemprop="ratingValue" content="3">three</span> stars
        </div>
    </div>
</body>
</html>
    """.strip()


@pytest.fixture
def sample_rdap_payload() -> dict:
    """RDAP domain object as served by rdap.org."""
    return {
        "objectClassName": "domain",
        "handle": "2336799_DOMAIN_COM-VRSN",
        "ldhName": "EXAMPLE.COM",
        "status": ["client delete prohibited", "client transfer prohibited"],
        "events": [
            {"eventAction": "registration", "eventDate": "1995-08-14T04:00:00Z"},
            {"eventAction": "expiration", "eventDate": "2030-08-13T04:00:00Z"},
            {
                "eventAction": "last changed",
                "eventDate": "2024-08-14T07:01:34Z",
                "eventActor": "registrar",
            },
            {"eventAction": "last update of RDAP database", "eventDate": "not a date"},
            "garbage",
        ],
    }
