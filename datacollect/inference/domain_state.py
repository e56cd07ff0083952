"""
Point-in-time state of a domain derived from its RDAP event log.

The event list of a record is unordered. To answer "was the domain X at time t"
the events strictly before t are walked from the most recent backwards and the
first event whose action decides the question wins. Actions that do not bear on
the question are skipped.
"""

from collections.abc import Mapping
from datetime import datetime, timezone

from datacollect.models import DomainRecord, Event

REGISTRATION_ACTIONS: Mapping[str, bool] = {
    "registration": True,
    "reregistration": True,
    "reinstantiation": True,
    "transfer": True,
    "expiration": False,
    "deletion": False,
}

LOCK_ACTIONS: Mapping[str, bool] = {
    "locked": True,
    "unlocked": False,
}


def _as_utc(instant: datetime) -> datetime:
    # Naive datetimes are taken to be UTC, like RDAP dates without an offset
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


def events_before(record: DomainRecord, instant: datetime) -> list[Event]:
    """Events strictly before ``instant``, most recent first."""
    instant = _as_utc(instant)
    ordered = sorted(record.events, key=lambda event: _as_utc(event.date), reverse=True)
    return [event for event in ordered if _as_utc(event.date) < instant]


def latest_outcome(
    record: DomainRecord,
    instant: datetime,
    actions: Mapping[str, bool],
    default: bool = False,
) -> bool:
    """
    Outcome of the most recent event before ``instant`` listed in ``actions``.

    Returns ``default`` when no such event exists.
    """
    for event in events_before(record, instant):
        outcome = actions.get(event.action)
        if outcome is not None:
            return outcome
    return default


def is_registered_at(record: DomainRecord | None, instant: datetime) -> bool:
    """Whether the domain is (or was) registered at ``instant``."""
    if record is None:
        return False
    return latest_outcome(record, instant, REGISTRATION_ACTIONS)


def is_locked_at(record: DomainRecord | None, instant: datetime) -> bool:
    """Whether the domain is (or was) locked at ``instant``."""
    if record is None:
        return False
    return latest_outcome(record, instant, LOCK_ACTIONS)


def is_buyable_at(record: DomainRecord | None, instant: datetime) -> bool:
    """
    Whether the domain is neither registered nor locked at ``instant``.

    A domain without any record (the lookup returned not-found) was never
    registered and counts as buyable. Whether the TLD accepts registrations
    from the public (``.gov`` does not) is not checked.
    """
    if record is None:
        return True
    return not (is_registered_at(record, instant) or is_locked_at(record, instant))
