"""
Tests for the command line interface.

Network access is replaced by patching the source methods the commands call.
"""

import json
from datetime import datetime, timezone

import pytest
from click.testing import CliRunner

from datacollect.__main__ import main
from datacollect.exceptions import FetchError, HTTPStatusError
from datacollect.models import DomainRecord, Event, Product
from datacollect.sources.ebay import EbaySource
from datacollect.sources.rdap import DomainLookup


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def patch_lookup(monkeypatch, result=None, error=None) -> None:
    async def fake_get(self, domain):
        if error is not None:
            raise error
        return result

    monkeypatch.setattr(DomainLookup, "get", fake_get)


class TestRdapCommands:
    """Tests for the rdap domain commands."""

    @pytest.mark.parametrize(
        "command,expected",
        [("is-registered", False), ("is-locked", False), ("can-purchase", True)],
    )
    def test_missing_record(self, runner, monkeypatch, command, expected) -> None:
        patch_lookup(monkeypatch, result=None)

        result = runner.invoke(main, ["rdap", "domain", command, "nobody-home.net"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) is expected

    def test_registered_domain(self, runner, monkeypatch) -> None:
        record = DomainRecord(
            events=(Event("registration", datetime(1995, 8, 14, tzinfo=timezone.utc)),),
            ldh_name="EXAMPLE.COM",
        )
        patch_lookup(monkeypatch, result=record)

        result = runner.invoke(main, ["rdap", "domain", "can-purchase", "example.com"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) is False

    def test_json(self, runner, monkeypatch) -> None:
        patch_lookup(monkeypatch, result=DomainRecord(handle="H1", ldh_name="EXAMPLE.COM"))

        result = runner.invoke(main, ["rdap", "domain", "json", "example.com"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["ldhName"] == "EXAMPLE.COM"

    def test_lookup_error_exit_status(self, runner, monkeypatch) -> None:
        patch_lookup(monkeypatch, error=HTTPStatusError("https://rdap.org/domain/x.com", 502))

        result = runner.invoke(main, ["rdap", "domain", "json", "x.com"])

        assert result.exit_code == 1


class TestEbayCommands:
    """Tests for the ebay product commands."""

    def test_search_limit(self, runner, monkeypatch) -> None:
        async def endless(self, query, config=None):
            item_id = 0
            while True:
                item_id += 1
                yield Product(id=item_id, name=f"{query} #{item_id}", sponsored=False)

        monkeypatch.setattr(EbaySource, "search", endless)

        result = runner.invoke(main, ["ebay", "product", "search", "rust", "--limit", "3"])

        assert result.exit_code == 0
        products = json.loads(result.stdout)
        assert [product["id"] for product in products] == [1, 2, 3]
        assert products[0]["name"] == "rust #1"

    def test_search_keeps_partial_results(self, runner, monkeypatch) -> None:
        async def failing(self, query, config=None):
            yield Product(id=1, name="first", sponsored=True)
            raise FetchError("https://www.ebay.com/sch/i.html", "connection reset")

        monkeypatch.setattr(EbaySource, "search", failing)

        result = runner.invoke(main, ["ebay", "product", "search", "rust"])

        assert result.exit_code == 0
        assert [product["id"] for product in json.loads(result.stdout)] == [1]
