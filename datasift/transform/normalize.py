"""Per-field value normalizers.

Each normalizer maps one raw value to a canonical value, or None when the
value is absent or cannot be normalized. Normalizers never raise.
"""

import logging
import re
from datetime import date, datetime, timezone
from typing import Any, Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

DATE_OUTPUT_FORMAT = "%Y-%m-%d"

# Epoch values above this (year 3000 in seconds) are taken as milliseconds
EPOCH_MILLIS_CUTOFF = 32503680000

_NON_NAME_CHARS = re.compile(r"[^A-Za-z\s]")
_NON_DIGITS = re.compile(r"[^0-9]")


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _format_utc(value: datetime) -> Optional[str]:
    # Offsets near datetime.min/max overflow on conversion
    try:
        return _to_utc(value).strftime(DATE_OUTPUT_FORMAT)
    except (ValueError, OverflowError):
        logger.debug(f"Date out of range after UTC conversion: {value!r}")
        return None


def normalize_date(value: Any) -> Optional[str]:
    """Normalize a date-like value to YYYY-MM-DD (UTC).

    Args:
        value: datetime/date, epoch number (seconds or milliseconds),
            or free-form date text

    Returns:
        Date string, or None if the value cannot be parsed
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return _format_utc(value)

    if isinstance(value, date):
        return value.strftime(DATE_OUTPUT_FORMAT)

    if isinstance(value, (int, float)):
        if value > EPOCH_MILLIS_CUTOFF:
            value = value / 1000
        try:
            dt = datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.debug(f"Epoch value out of range: {value}")
            return None
        return dt.strftime(DATE_OUTPUT_FORMAT)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            dt = date_parser.parse(text)
        except (ValueError, OverflowError):
            logger.debug(f"Could not parse date: {value}")
            return None
        return _format_utc(dt)

    return None


def normalize_name(value: Any) -> Optional[str]:
    """Keep ASCII letters and whitespace, then title-case each word.

    "jOHN   o'brien3" -> "John Obrien"
    """
    if not isinstance(value, str):
        return None

    cleaned = _NON_NAME_CHARS.sub("", value).strip()
    if not cleaned:
        return None

    return " ".join(word[0].upper() + word[1:].lower() for word in cleaned.split())


def normalize_contact(value: Any, min_digits: int = 6) -> Optional[str]:
    """Reduce a phone number to its digits.

    Args:
        value: Raw phone value (text or number)
        min_digits: Shorter digit strings are rejected

    Returns:
        Digit string, or None if absent or too short
    """
    if value is None or isinstance(value, bool):
        return None

    # Spreadsheet cells hold phone numbers as floats
    if isinstance(value, float) and value.is_integer():
        value = int(value)

    digits = _NON_DIGITS.sub("", str(value))
    if len(digits) < min_digits:
        return None

    return digits


def normalize_address(value: Any) -> Optional[Any]:
    """Addresses pass through unchanged."""
    return value
