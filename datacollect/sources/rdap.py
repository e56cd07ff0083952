"""
RDAP domain registration lookups.

A 404 from the resolver means there is no record for the name (it was probably
never registered, or the TLD is unknown) and is returned as None.
"""

from datetime import datetime, timezone
from typing import Any

from dateutil import parser as dateutil_parser

from datacollect.core.client import Client, decode_json
from datacollect.exceptions import FetchError, HTTPStatusError
from datacollect.models import DomainRecord, Event
from datacollect.utils.logging import DatacollectLogger
from datacollect.utils.url_utils import build_url


class DomainLookup:
    """Looks up domain records through an RDAP resolver such as rdap.org."""

    name = "rdap"

    def __init__(
        self,
        client: Client,
        base_url: str = "https://rdap.org",
        logger: DatacollectLogger | None = None,
    ):
        self.client = client
        self.base_url = base_url
        self.logger = logger or DatacollectLogger("rdap")

    def domain_url(self, domain: str) -> str:
        return build_url(self.base_url, f"domain/{domain.strip().lower()}")

    async def get(self, domain: str) -> DomainRecord | None:
        """
        Fetch the record for ``domain``.

        Returns:
            The parsed record, or None if the resolver answered 404.

        Raises:
            HTTPStatusError: for any other non-success status.
            FetchError: on transport failure or an unreadable body.
        """
        url = self.domain_url(domain)
        response = await self.client.get(url)

        if response.status_code == 404:
            self.logger.info("domain_not_found", domain=domain)
            return None
        if not response.is_success:
            raise HTTPStatusError(url, response.status_code)

        payload = decode_json(url, response)
        if not isinstance(payload, dict):
            raise FetchError(url, "RDAP response is not a JSON object")

        record = parse_domain_record(payload)
        self.logger.debug("domain_record", domain=domain, events=len(record.events))
        return record


def parse_domain_record(payload: dict[str, Any]) -> DomainRecord:
    """Build a DomainRecord from an RDAP domain object. Malformed events are skipped."""
    events = []
    for raw in payload.get("events") or []:
        event = _parse_event(raw)
        if event is not None:
            events.append(event)

    status = payload.get("status") or []
    return DomainRecord(
        events=tuple(events),
        handle=payload.get("handle"),
        ldh_name=payload.get("ldhName"),
        status=tuple(str(s) for s in status if isinstance(s, str)),
    )


def _parse_event(raw: Any) -> Event | None:
    if not isinstance(raw, dict):
        return None
    action = raw.get("eventAction")
    date_text = raw.get("eventDate")
    if not isinstance(action, str) or not isinstance(date_text, str):
        return None
    date = parse_timestamp(date_text)
    if date is None:
        return None
    actor = raw.get("eventActor")
    return Event(action=action, date=date, actor=actor if isinstance(actor, str) else None)


def parse_timestamp(text: str) -> datetime | None:
    """Parse an RFC 3339 timestamp; values without an offset are taken as UTC."""
    try:
        value = dateutil_parser.isoparse(text)
    except (ValueError, OverflowError):
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
