import re
from datetime import date, datetime
from typing import Any, Optional

from chauffeur_api.core.errors import (
    DateInPastError,
    InvalidDateError,
    InvalidEmailError,
    MissingFieldError,
)
from chauffeur_api.core.logger import get_logger
from chauffeur_api.models.inquiry_request import InquiryRequest, ValidatedInquiry

logger = get_logger(__name__)

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# Calendar dates only: no basic (20261020) or week (2026-W43-2) forms
ISO_DATE_PREFIX = re.compile(r"\d{4}-\d{2}-\d{2}(?:[T ]|$)")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return not value


def parse_requested_date(value: str) -> Optional[date]:
    """Parse an ISO-8601 date or datetime; ``None`` when it is not one."""
    text = value.strip()
    if not ISO_DATE_PREFIX.match(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def coerce_vehicle_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = re.match(r"^\s*([+-]?\d+)", str(value))
    return int(match.group(1)) if match else None


def validate_inquiry(raw: InquiryRequest, today: date, allow_past_dates: bool = False) -> ValidatedInquiry:
    """
    Check an inquiry in a fixed order and raise on the first problem:
    vehicleId, purpose, date (presence then format), email (presence then
    format) and finally that the date is not before ``today``.

    With ``allow_past_dates`` a past date is only logged, which keeps manual
    testing outside production practical.
    """
    if _is_blank(raw.vehicle_id):
        raise MissingFieldError("vehicleId")

    if _is_blank(raw.purpose):
        raise MissingFieldError("purpose")

    if _is_blank(raw.date):
        raise MissingFieldError("date")
    requested_date = parse_requested_date(raw.date)
    if requested_date is None:
        raise InvalidDateError(raw.date)

    if _is_blank(raw.email):
        raise MissingFieldError("email")
    if not EMAIL_REGEX.fullmatch(raw.email):
        raise InvalidEmailError(raw.email)

    if requested_date < today:
        if not allow_past_dates:
            raise DateInPastError(raw.date)
        logger.warning(f"Accepting past date {raw.date} outside production")

    return ValidatedInquiry(
        **raw.model_dump(),
        requested_date=requested_date,
        vehicle_number=coerce_vehicle_id(raw.vehicle_id),
    )
