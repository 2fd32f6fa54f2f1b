"""Registration data model for safety-training bookings."""
import secrets
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict

from src.models.industry import Industry
from src.utils.date_utils import MAX_TIMESTAMP_MS, format_date, parse_date


def new_registration_id() -> str:
    """Generate a collision-resistant registration id."""
    return secrets.token_urlsafe(12)


@dataclass
class Registration:
    """One applicant booked into a session (date + industry)."""

    id: str
    date: date
    industry: Industry
    company: str
    applicant: str
    phone: str
    created_at: int  # epoch milliseconds

    def __post_init__(self):
        """Validate registration data."""
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("Registration id cannot be empty")

        if not isinstance(self.date, date):
            raise ValueError(f"Invalid session date: {self.date!r}")

        # Accept the plain label as stored in JSON
        self.industry = Industry(self.industry)

        for field_name in ("company", "applicant", "phone"):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"{field_name} cannot be empty")

        # NaN fails the range comparison as well as infinities
        if (
            isinstance(self.created_at, bool)
            or not isinstance(self.created_at, (int, float))
            or not 0 <= self.created_at <= MAX_TIMESTAMP_MS
        ):
            raise ValueError(f"Invalid creation timestamp: {self.created_at!r}")
        self.created_at = int(self.created_at)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON layout shared by storage and sync codes."""
        return {
            "id": self.id,
            "date": format_date(self.date),
            "industry": self.industry.value,
            "company": self.company,
            "applicant": self.applicant,
            "phone": self.phone,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Registration":
        """
        Build a registration from its JSON layout.

        Raises:
            ValueError: If a field is missing or malformed
        """
        if not isinstance(data, dict):
            raise ValueError("Registration must be an object")

        try:
            return cls(
                id=data["id"],
                date=parse_date(data["date"]),
                industry=data["industry"],
                company=data["company"],
                applicant=data["applicant"],
                phone=data["phone"],
                created_at=data["createdAt"],
            )
        except KeyError as e:
            raise ValueError(f"Missing registration field: {e.args[0]}") from e
        except TypeError as e:
            raise ValueError(f"Malformed registration: {e}") from e
