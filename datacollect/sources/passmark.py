"""
Passmark CPU benchmark list.

The data endpoint only answers requests that carry the session cookie handed out
by the mega page, so a cookie-keeping client is required.
"""

from typing import Any

from datacollect.core.client import Client
from datacollect.exceptions import FetchError, ParseFailure
from datacollect.extraction.money import money_from_text, parse_number
from datacollect.models import CPU, Currency, Money
from datacollect.utils import metrics
from datacollect.utils.logging import DatacollectLogger
from datacollect.utils.url_utils import build_url

MEGA_PAGE_PATH = "CPU_mega_page.html"
DATA_PATH = "data/"
XHR_HEADERS = {"X-Requested-With": "XMLHttpRequest"}


class CPUMegaList:
    """Fetches the full Passmark CPU table."""

    name = "passmark"

    def __init__(
        self,
        client: Client,
        base_url: str = "https://www.cpubenchmark.net",
        logger: DatacollectLogger | None = None,
    ):
        if not client.keeps_cookies:
            raise ValueError("Passmark requires a client that keeps cookies")
        self.client = client
        self.base_url = base_url
        self.logger = logger or DatacollectLogger("passmark")

    async def get(self) -> list[CPU]:
        """
        Establish a session and download every CPU row.

        Rows without a usable id or name are dropped.

        Raises:
            FetchError: if either request fails or the body is not the expected JSON.
        """
        await self.client.get_text(build_url(self.base_url, MEGA_PAGE_PATH))

        data_url = build_url(self.base_url, DATA_PATH)
        payload = await self.client.get_json(data_url, headers=XHR_HEADERS)
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise FetchError(data_url, "unexpected JSON layout, expected {'data': [...]}")

        cpus = []
        for row in payload["data"]:
            cpu = parse_cpu(row)
            if cpu is None:
                metrics.record_field(self.name, "row", False)
                continue
            cpus.append(cpu)

        self.logger.info(
            "cpu_list_parsed",
            rows=len(payload["data"]),
            cpus=len(cpus),
        )
        return cpus


def parse_cpu(row: Any) -> CPU | None:
    """
    Convert a raw benchmark row into a CPU.

    Numeric fields may arrive as JSON numbers or strings with thousands
    separators; unparseable ones become None.
    """
    if not isinstance(row, dict):
        return None

    cpu_id = parse_number(row.get("id"), int)
    name = row.get("name")
    if cpu_id is None or not isinstance(name, str) or not name.strip():
        return None

    return CPU(
        id=cpu_id,
        name=name.strip(),
        price=_parse_price(row.get("price")),
        cpumark=parse_number(row.get("cpumark"), int),
        thread=parse_number(row.get("thread"), int),
        socket=_text(row.get("socket")),
        cat=_text(row.get("cat")),
        cores=parse_number(row.get("cores"), int),
        logicals=parse_number(row.get("logicals"), int),
        tdp=parse_number(row.get("tdp"), float),
    )


def _parse_price(value: Any) -> Money | None:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).replace(",", "").strip()
    if not text or text.upper() in {"NA", "N/A"}:
        return None
    try:
        return money_from_text(text, Currency.USD, truncate_to_cents=True)
    except ParseFailure:
        return None


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
