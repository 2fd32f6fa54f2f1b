"""Capacity override keys."""
from datetime import date
from typing import NamedTuple

from src.models.industry import Industry
from src.utils.date_utils import format_date, parse_date

DEFAULT_CAPACITY = 30


class CapacityKey(NamedTuple):
    """Composite (industry, date) key of the capacity override map."""

    industry: Industry
    date: date

    def to_storage_key(self) -> str:
        """Render as "<industry>_<YYYY-MM-DD>" for JSON storage."""
        return f"{self.industry.value}_{format_date(self.date)}"

    @classmethod
    def from_storage_key(cls, key: str) -> "CapacityKey":
        """
        Parse "<industry>_<YYYY-MM-DD>".

        Splits on the last underscore, so the date part never contains one.

        Raises:
            ValueError: If the key is malformed
        """
        if not isinstance(key, str) or "_" not in key:
            raise ValueError(f"Malformed capacity key: {key!r}")
        industry_label, date_str = key.rsplit("_", 1)
        return cls(Industry(industry_label), parse_date(date_str))
