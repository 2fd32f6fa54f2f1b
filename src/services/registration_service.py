"""Registration service for admitting, editing and removing bookings."""
import logging
from datetime import date
from typing import List, Optional, Union

from src.models.capacity import CapacityKey
from src.models.industry import Industry
from src.models.registration import Registration, new_registration_id
from src.services.booking_store import BookingStore
from src.utils.date_utils import now_millis
from src.utils.exceptions import CapacityExceededError, ValidationError
from src.utils.validation import (
    coerce_date,
    coerce_industry,
    normalize_name,
    normalize_phone,
    validate_capacity,
    validate_contact_fields,
)

logger = logging.getLogger(__name__)


def register(
    store: BookingStore,
    session_date: Union[str, date],
    industry: Union[str, Industry],
    company: str,
    applicant: str,
    phone: str,
) -> Registration:
    """
    Admit an applicant into a training session.

    Args:
        store: Booking store to append to
        session_date: Session date (date or "YYYY-MM-DD")
        industry: Industry or its label
        company, applicant, phone: Contact fields (trimmed before saving)

    Returns:
        The new Registration

    Raises:
        ValidationError: If any field is missing or malformed
        CapacityExceededError: If no seats remain for (date, industry)

    Behavior:
        - Seats are counted on the data file reloaded under its lock, so
          concurrent sessions cannot overbook
        - A rejected admission changes nothing and consumes no id
        - Past dates are not rejected here; the calendar disables them
        - The same person may book more than once
    """
    session_date = coerce_date(session_date)
    industry = coerce_industry(industry)
    fields = validate_contact_fields(company, applicant, phone)

    with store.locked():
        if store.remaining(session_date, industry) <= 0:
            logger.info("Rejected admission for %s %s: session full", industry.value, session_date)
            raise CapacityExceededError("마감되었습니다")

        existing_ids = store.ids()
        registration_id = new_registration_id()
        while registration_id in existing_ids:
            registration_id = new_registration_id()

        registration = Registration(
            id=registration_id,
            date=session_date,
            industry=industry,
            created_at=now_millis(),
            **fields,
        )
        store.append(registration)
    return registration


def update_registration(
    store: BookingStore,
    registration_id: str,
    company: str,
    applicant: str,
    phone: str,
) -> bool:
    """
    Replace the contact fields of an existing registration.

    Date, industry, id and creation time never change.

    Returns:
        True if updated, False if the id is unknown (no-op)

    Raises:
        ValidationError: If any field is missing or malformed
    """
    fields = validate_contact_fields(company, applicant, phone)

    with store.locked():
        registration = store.get(registration_id)
        if registration is None:
            logger.warning("Edit ignored, registration %s not found", registration_id)
            return False

        registration.company = fields["company"]
        registration.applicant = fields["applicant"]
        registration.phone = fields["phone"]
        store.persist()
    return True


def delete_registration(store: BookingStore, registration_id: str) -> bool:
    """
    Remove a registration by id.

    Returns:
        True if removed, False if it did not exist. Deleting twice is fine.
    """
    return store.remove(registration_id)


def set_capacity(
    store: BookingStore,
    industry: Union[str, Industry],
    session_date: Union[str, date],
    total: int,
) -> None:
    """
    Set the total seats for (industry, date).

    The value may be lower than the current booked count; remaining
    seats then read as zero.

    Raises:
        ValidationError: If total is not a non-negative integer
    """
    is_valid, error_msg = validate_capacity(total)
    if not is_valid:
        raise ValidationError(error_msg)

    key = CapacityKey(coerce_industry(industry), coerce_date(session_date))
    store.set_override(key, total)


def clear_capacity(
    store: BookingStore,
    industry: Union[str, Industry],
    session_date: Union[str, date],
) -> None:
    """Drop the override for (industry, date) so the default applies again."""
    key = CapacityKey(coerce_industry(industry), coerce_date(session_date))
    store.set_override(key, None)


def registrations_for_industry(
    store: BookingStore,
    industry: Union[str, Industry],
    session_date: Optional[date] = None,
) -> List[Registration]:
    """
    List registrations of one industry, newest first.

    Args:
        session_date: Optionally restrict to a single session date
    """
    industry = coerce_industry(industry)
    matches = [
        r for r in store.registrations
        if r.industry == industry and (session_date is None or r.date == session_date)
    ]
    return sorted(matches, key=lambda r: r.created_at, reverse=True)


def find_registrations(store: BookingStore, applicant: str, phone: str) -> List[Registration]:
    """
    Look up an applicant's own bookings.

    Applicant names are compared trimmed and case-insensitively; phone
    numbers on their digits only, so "010-1234-5678" matches "01012345678".
    Results are ordered by session date.
    """
    if not applicant or not applicant.strip():
        return []
    phone_digits = normalize_phone(phone)
    if not phone_digits:
        return []

    name_key = normalize_name(applicant)
    matches = [
        r for r in store.registrations
        if normalize_name(r.applicant) == name_key and normalize_phone(r.phone) == phone_digits
    ]
    return sorted(matches, key=lambda r: (r.date, r.created_at))
