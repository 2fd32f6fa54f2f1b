"""Data validation utilities."""
import re
from datetime import date, datetime
from typing import Any, Dict, Tuple, Union

from src.models.industry import Industry
from src.utils.date_utils import parse_date
from src.utils.exceptions import ValidationError

MAX_FIELD_LENGTH = 50
MIN_PHONE_DIGITS = 7

FIELD_LABELS = {
    "company": "회사명",
    "applicant": "신청자명",
    "phone": "연락처",
}

_PHONE_PATTERN = re.compile(r"^[0-9+\-() ]+$")


def coerce_date(value: Union[str, date]) -> date:
    """
    Accept a date or a YYYY-MM-DD string and return a date.

    Raises:
        ValidationError: If the value is not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    try:
        return parse_date(value)
    except ValueError as e:
        raise ValidationError("날짜 형식이 올바르지 않습니다") from e


def coerce_industry(value: Union[str, Industry]) -> Industry:
    """
    Accept an Industry or its label and return the Industry.

    Raises:
        ValidationError: If the label is not one of the known industries
    """
    if isinstance(value, Industry):
        return value
    try:
        return Industry(value)
    except ValueError as e:
        raise ValidationError(f"알 수 없는 산업군입니다: {value}") from e


def validate_text_field(value: str, label: str) -> Tuple[bool, str]:
    """
    Validate a free-text contact field.

    Args:
        value: Field value
        label: Display label used in error messages

    Returns:
        Tuple of (is_valid: bool, error_message: str)
        - (True, "") if valid
        - (False, "<label>을(를) 입력해 주세요") if empty
        - (False, "<label>은(는) 50자를 넘을 수 없습니다") if too long
    """
    if not isinstance(value, str) or not value.strip():
        return False, f"{label}을(를) 입력해 주세요"
    if len(value.strip()) > MAX_FIELD_LENGTH:
        return False, f"{label}은(는) {MAX_FIELD_LENGTH}자를 넘을 수 없습니다"
    return True, ""


def validate_phone(phone: str) -> Tuple[bool, str]:
    """
    Validate a phone number.

    Accepts digits, spaces, '+', '-' and parentheses, with at least
    seven digits ("010-1234-5678", "02 123 4567", "+82 10-1234-5678").
    """
    is_valid, error_msg = validate_text_field(phone, FIELD_LABELS["phone"])
    if not is_valid:
        return is_valid, error_msg

    stripped = phone.strip()
    if not _PHONE_PATTERN.match(stripped):
        return False, "연락처에는 숫자와 - 만 입력할 수 있습니다"
    if len(normalize_phone(stripped)) < MIN_PHONE_DIGITS:
        return False, "연락처 자릿수가 너무 짧습니다"
    return True, ""


def normalize_phone(phone: str) -> str:
    """
    Reduce a phone number to its digits for comparison.

    Example: "010-1234-5678" → "01012345678"
    """
    return re.sub(r"\D", "", phone or "")


def normalize_name(name: str) -> str:
    """
    Normalize name for lookup comparison.

    Args:
        name: Name to normalize

    Returns:
        Normalized name (trimmed, lowercased)

    Behavior:
        - Trims leading/trailing whitespace
        - Converts to lowercase (for Latin chars)
        - Preserves internal spacing
        - Example: " 홍길동 " → "홍길동", "John Doe" → "john doe"
    """
    return name.strip().lower()


def validate_contact_fields(company: str, applicant: str, phone: str) -> Dict[str, str]:
    """
    Validate and trim the three contact fields of a registration.

    Returns:
        Dict with trimmed "company", "applicant" and "phone"

    Raises:
        ValidationError: On the first invalid field
    """
    for key, value in (("company", company), ("applicant", applicant)):
        is_valid, error_msg = validate_text_field(value, FIELD_LABELS[key])
        if not is_valid:
            raise ValidationError(error_msg)

    is_valid, error_msg = validate_phone(phone)
    if not is_valid:
        raise ValidationError(error_msg)

    return {
        "company": company.strip(),
        "applicant": applicant.strip(),
        "phone": phone.strip(),
    }


def validate_capacity(capacity: Any) -> Tuple[bool, str]:
    """
    Validate a capacity override.

    Args:
        capacity: Desired total seats

    Returns:
        Tuple of (is_valid: bool, error_message: str)
        - (True, "") if capacity is a non-negative integer
        - (False, "정원은 0 이상의 정수여야 합니다") otherwise

    Note:
        The value is not compared against the booked count; an override
        below it simply leaves zero seats.
    """
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
        return False, "정원은 0 이상의 정수여야 합니다"
    return True, ""
