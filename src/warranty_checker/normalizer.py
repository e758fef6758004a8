"""Date parsing and warranty status classification.

Both the structured and the scrape source turn raw vendor fields into a
WarrantyRecord through ``build_record`` so the classification rules exist
in exactly one place.
"""

import logging
import re
from datetime import date, datetime
from typing import Optional

from warranty_checker.models import WarrantyRecord, WarrantyStatus

logger = logging.getLogger(__name__)

DEFAULT_EXPIRING_SOON_DAYS = 30

DATE_TOKEN_PATTERN = re.compile(r"\d{1,2}/\d{1,2}/\d{4}|\d{4}-\d{2}-\d{2}")

_DATE_FORMATS = ("%m/%d/%Y", "%Y-%m-%d")


def extract_date_token(text: Optional[str]) -> Optional[str]:
    """Return the first date-shaped token in ``text``, if any.

    Recognizes ``MM/DD/YYYY`` (one or two digit month/day) and
    ``YYYY-MM-DD``.
    """
    if not text:
        return None
    match = DATE_TOKEN_PATTERN.search(text)
    return match.group(0) if match else None


def parse_date(text: Optional[str]) -> Optional[date]:
    """Parse a vendor date string.

    Args:
        text: Date string, possibly surrounded by other text.

    Returns:
        The parsed date, or None if no valid date could be read.
    """
    token = extract_date_token(text)
    if token is None:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(token, fmt).date()
        except ValueError:
            continue
    return None


def classify(
    end_date: Optional[date],
    has_error: bool,
    today: Optional[date] = None,
    expiring_within_days: int = DEFAULT_EXPIRING_SOON_DAYS,
) -> tuple[Optional[int], WarrantyStatus]:
    """Derive days remaining and status from a warranty end date.

    Whole-day arithmetic on calendar dates equals the ceiling of the
    fractional difference between the end date (midnight) and now.

    Args:
        end_date: Warranty end date, or None if unknown.
        has_error: True if the source reported an error indicator.
        today: Reference date (defaults to the local current date).
        expiring_within_days: Inclusive upper bound for "Expiring Soon".

    Returns:
        Tuple of (days_remaining, status). days_remaining is None when
        there is no end date.
    """
    if end_date is None:
        if has_error:
            return None, WarrantyStatus.ERROR
        return None, WarrantyStatus.NOT_FOUND

    today = today or date.today()
    days_remaining = (end_date - today).days

    if days_remaining < 0:
        return days_remaining, WarrantyStatus.EXPIRED
    if days_remaining <= expiring_within_days:
        return days_remaining, WarrantyStatus.EXPIRING_SOON
    return days_remaining, WarrantyStatus.ACTIVE


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_record(
    serial_number: str,
    *,
    product_name: Optional[str] = None,
    product_type: Optional[str] = None,
    warranty_start_date: Optional[str] = None,
    warranty_end_date: Optional[str] = None,
    warranty_type: Optional[str] = None,
    error_message: Optional[str] = None,
    today: Optional[date] = None,
    expiring_within_days: int = DEFAULT_EXPIRING_SOON_DAYS,
) -> WarrantyRecord:
    """Normalize raw vendor fields into a WarrantyRecord.

    Empty strings are treated as absent. An end date that is present but
    cannot be parsed yields an ``Error`` record that keeps the raw text.

    Args:
        serial_number: Normalized serial number.
        product_name: Raw product name.
        product_type: Raw product type.
        warranty_start_date: Raw start date text.
        warranty_end_date: Raw end date text.
        warranty_type: Raw coverage type.
        error_message: Vendor error indicator text.
        today: Reference date for classification.
        expiring_within_days: Inclusive upper bound for "Expiring Soon".

    Returns:
        The classified record.
    """
    error_message = _clean(error_message)
    end_text = _clean(warranty_end_date)
    end_date = parse_date(end_text)
    if end_text and end_date is None:
        logger.debug("Unparseable end date %r for %s", end_text, serial_number)
        error_message = error_message or f"Unparseable warranty end date {end_text!r}"
        days_remaining, status = None, WarrantyStatus.ERROR
    else:
        days_remaining, status = classify(
            end_date,
            has_error=error_message is not None,
            today=today,
            expiring_within_days=expiring_within_days,
        )

    return WarrantyRecord(
        serial_number=serial_number,
        warranty_status=status,
        product_name=_clean(product_name),
        product_type=_clean(product_type),
        warranty_start_date=_clean(warranty_start_date),
        warranty_end_date=end_text,
        days_remaining=days_remaining,
        warranty_type=_clean(warranty_type),
        error_message=error_message,
    )
