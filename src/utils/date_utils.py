"""Date and time utility functions."""
import re
import time
from datetime import date, datetime
from typing import Optional

_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

# 9999-12-31T00:00:00Z; later instants cannot be shown as local datetimes
MAX_TIMESTAMP_MS = 253402214400000


def parse_date(date_str: str) -> date:
    """
    Parse date string in YYYY-MM-DD format.

    Month and day must be zero-padded; "2024-6-1" is rejected.

    Args:
        date_str: Date string (e.g., "2025-11-15")

    Returns:
        date object

    Raises:
        ValueError: If date format is invalid
    """
    if not isinstance(date_str, str) or not _DATE_PATTERN.fullmatch(date_str):
        raise ValueError(f"Date must be in YYYY-MM-DD format: {date_str!r}")
    return datetime.strptime(date_str, "%Y-%m-%d").date()


def format_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.strftime("%Y-%m-%d")


def is_past_date(value: date, today: Optional[date] = None) -> bool:
    """
    Check if a session date lies strictly before today.

    Time of day is ignored; "today" is the local calendar day of the
    running process unless given explicitly.
    """
    if today is None:
        today = date.today()
    return value < today


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def format_timestamp(millis: int, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
    """
    Format epoch milliseconds in local time.

    Args:
        millis: Epoch milliseconds (e.g., 1717200000000)
        fmt: strftime format

    Returns:
        Formatted local time string
    """
    return datetime.fromtimestamp(millis / 1000).strftime(fmt)
