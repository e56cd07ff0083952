"""Inference of point-in-time facts from collected records."""

from datacollect.inference.domain_state import (
    LOCK_ACTIONS,
    REGISTRATION_ACTIONS,
    events_before,
    is_buyable_at,
    is_locked_at,
    is_registered_at,
    latest_outcome,
)

__all__ = [
    "LOCK_ACTIONS",
    "REGISTRATION_ACTIONS",
    "events_before",
    "is_buyable_at",
    "is_locked_at",
    "is_registered_at",
    "latest_outcome",
]
