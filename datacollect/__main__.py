"""
CLI entry point for datacollect.

Usage:
    python -m datacollect ebay product id 254625474154
    python -m datacollect ebay product search "rust programming language" --limit 5
    python -m datacollect passmark cpu mega-list
    python -m datacollect rdap domain can-purchase example.com

Records are written to stdout as pretty-printed JSON; logs go to stderr.
"""

import asyncio
import json
import sys
from contextlib import aclosing
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, TypeVar

import click
from rich.console import Console

from datacollect.config import DatacollectSettings, load_config
from datacollect.core.client import Client
from datacollect.exceptions import DatacollectError, FetchError
from datacollect.extraction.money import resolve_currency
from datacollect.inference.domain_state import is_buyable_at, is_locked_at, is_registered_at
from datacollect.models import DomainRecord, Product
from datacollect.sources.ebay import EbaySource
from datacollect.sources.passmark import CPUMegaList
from datacollect.sources.rdap import DomainLookup
from datacollect.utils.logging import DatacollectLogger, setup_logging

T = TypeVar("T")

console = Console(stderr=True)


def _emit(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _run(coro: Awaitable[T], verbose: bool = False) -> T:
    """Run a coroutine, turning collection errors into a failed exit status."""
    try:
        return asyncio.run(coro)
    except DatacollectError as e:
        console.print(f"[bold red]Error: {e.message}[/bold red]")
        if verbose:
            console.print_exception()
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Log output format (default: from DATACOLLECT_LOG_FORMAT).",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, log_format: str | None) -> None:
    """Collect structured records from eBay, Passmark and RDAP."""
    settings = load_config()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        format_type=log_format or settings.log_format,
    )
    ctx.obj = {"settings": settings, "verbose": verbose}


# =============================================================================
# eBay
# =============================================================================


@main.group()
def ebay() -> None:
    """eBay listings."""


@ebay.group()
def product() -> None:
    """Products by item id or keyword search."""


def _ebay_source(settings: DatacollectSettings, client: Client) -> EbaySource:
    return EbaySource(
        client,
        base_url=settings.ebay_base_url,
        default_currency=resolve_currency(settings.default_currency),
    )


@product.command("id")
@click.argument("item_id", type=int)
@click.pass_obj
def product_id(obj: dict[str, Any], item_id: int) -> None:
    """Fetch a single product by its item id."""
    settings: DatacollectSettings = obj["settings"]

    async def fetch() -> Product:
        async with Client.stateless(settings.client_config()) as client:
            return await _ebay_source(settings, client).by_id(item_id)

    _emit(_run(fetch(), obj["verbose"]).to_dict())


@product.command("search")
@click.argument("query")
@click.option("--limit", "-l", type=int, default=10, show_default=True, help="Maximum products to return.")
@click.option("--delay", type=float, default=None, help="Seconds between detail page requests.")
@click.option("--max-pages", type=int, default=None, help="Stop after this many result pages.")
@click.pass_obj
def product_search(
    obj: dict[str, Any],
    query: str,
    limit: int,
    delay: float | None,
    max_pages: int | None,
) -> None:
    """Search products and print up to LIMIT results."""
    settings: DatacollectSettings = obj["settings"]
    config = settings.search_config()
    if delay is not None:
        config.delay_seconds = delay
    config.max_pages = max_pages
    logger = DatacollectLogger("cli")

    async def collect() -> list[Product]:
        products: list[Product] = []
        if limit <= 0:
            return products
        async with Client.stateless(settings.client_config()) as client:
            stream = _ebay_source(settings, client).search(query, config)
            try:
                async with aclosing(stream):
                    async for found in stream:
                        products.append(found)
                        if len(products) >= limit:
                            break
            except FetchError as e:
                logger.warning("search_stopped", query=query, error=e.message)
        return products

    _emit([found.to_dict() for found in _run(collect(), obj["verbose"])])


# =============================================================================
# Passmark
# =============================================================================


@main.group()
def passmark() -> None:
    """Passmark benchmark data."""


@passmark.group()
def cpu() -> None:
    """CPU benchmarks."""


@cpu.command("mega-list")
@click.pass_obj
def cpu_mega_list(obj: dict[str, Any]) -> None:
    """Download the full CPU benchmark table."""
    settings: DatacollectSettings = obj["settings"]

    async def fetch() -> list[dict[str, Any]]:
        async with Client.with_cookies(settings.client_config()) as client:
            cpus = await CPUMegaList(client, base_url=settings.passmark_base_url).get()
        return [entry.to_dict() for entry in cpus]

    _emit({"data": _run(fetch(), obj["verbose"])})


# =============================================================================
# RDAP
# =============================================================================


@main.group()
def rdap() -> None:
    """Registration data (RDAP)."""


@rdap.group()
def domain() -> None:
    """Domain name lookups."""


def _lookup(obj: dict[str, Any], name: str) -> DomainRecord | None:
    settings: DatacollectSettings = obj["settings"]

    async def fetch() -> DomainRecord | None:
        async with Client.stateless(settings.client_config()) as client:
            return await DomainLookup(client, base_url=settings.rdap_base_url).get(name)

    return _run(fetch(), obj["verbose"])


def _predicate_command(
    command_name: str,
    predicate: Callable[[DomainRecord | None, datetime], bool],
    help_text: str,
) -> None:
    @domain.command(command_name, help=help_text)
    @click.argument("name")
    @click.pass_obj
    def command(obj: dict[str, Any], name: str) -> None:
        record = _lookup(obj, name)
        _emit(predicate(record, datetime.now(timezone.utc)))


@domain.command("json")
@click.argument("name")
@click.pass_obj
def domain_json(obj: dict[str, Any], name: str) -> None:
    """Print the RDAP record for NAME (null if there is none)."""
    record = _lookup(obj, name)
    _emit(record.to_dict() if record is not None else None)


_predicate_command("is-registered", is_registered_at, "Whether NAME is registered now.")
_predicate_command("is-locked", is_locked_at, "Whether NAME is locked now.")
_predicate_command(
    "can-purchase",
    is_buyable_at,
    "Whether NAME is neither registered nor locked now.",
)


if __name__ == "__main__":
    main()
