"""Seat accounting per (date, industry)."""
from datetime import date
from typing import Iterable, Mapping, Optional

from src.models.capacity import DEFAULT_CAPACITY, CapacityKey
from src.models.industry import Industry
from src.models.registration import Registration
from src.utils.date_utils import is_past_date


def total_capacity(
    overrides: Mapping[CapacityKey, int],
    session_date: date,
    industry: Industry,
) -> int:
    """Return the override for (industry, date), or DEFAULT_CAPACITY."""
    return overrides.get(CapacityKey(industry, session_date), DEFAULT_CAPACITY)


def booked_count(
    registrations: Iterable[Registration],
    session_date: date,
    industry: Industry,
) -> int:
    """Count registrations booked into (date, industry)."""
    return sum(
        1 for r in registrations
        if r.date == session_date and r.industry == industry
    )


def remaining_seats(
    registrations: Iterable[Registration],
    overrides: Mapping[CapacityKey, int],
    session_date: date,
    industry: Industry,
) -> int:
    """
    Seats left for (date, industry).

    Recomputed from the full ledger on every call and clamped at zero,
    so an override below the booked count yields 0, never a negative.
    """
    total = total_capacity(overrides, session_date, industry)
    return max(0, total - booked_count(registrations, session_date, industry))


def is_full(
    registrations: Iterable[Registration],
    overrides: Mapping[CapacityKey, int],
    session_date: date,
    industry: Industry,
) -> bool:
    """True when no seats remain."""
    return remaining_seats(registrations, overrides, session_date, industry) == 0


def is_past(session_date: date, today: Optional[date] = None) -> bool:
    """True if the session date is strictly before today (local day)."""
    return is_past_date(session_date, today)
