"""Trip date normalization.

Trip dates are stored and queried as canonical ``YYYY-MM-DD`` strings. Any
accepted representation is reduced to the UTC calendar day it denotes.
"""

import re
from datetime import UTC, date, datetime
from email.utils import parsedate_to_datetime

from pob_tracker.errors import ValidationFailed

CANONICAL_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

INVALID_DATE_MESSAGE = "Invalid trip date format. Use YYYY-MM-DD format or a valid date string"

# Non-ISO layouts accepted from clients, tried in order
_FALLBACK_FORMATS = (
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


def _utc_day(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.date().isoformat()


def _parse_string(value: str) -> str:
    text = value.strip()
    if not text:
        raise ValidationFailed(INVALID_DATE_MESSAGE)

    if CANONICAL_DATE.match(text):
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            raise ValidationFailed(INVALID_DATE_MESSAGE) from None

    try:
        return _utc_day(datetime.fromisoformat(text))
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue

    # RFC 2822 style, e.g. "Fri, 05 Jan 2024 00:00:00 GMT"
    try:
        return _utc_day(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError):
        pass

    raise ValidationFailed(INVALID_DATE_MESSAGE)


def normalize_trip_date(value: str | date | datetime | int | float) -> str:
    """Convert any accepted date representation to ``YYYY-MM-DD``.

    Numbers are read as epoch milliseconds. Raises ``ValidationFailed`` when the
    value cannot be understood as a date.
    """
    if isinstance(value, datetime):
        return _utc_day(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool):
        raise ValidationFailed(INVALID_DATE_MESSAGE)
    if isinstance(value, int | float):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC).date().isoformat()
        except (OverflowError, OSError, ValueError):
            raise ValidationFailed(INVALID_DATE_MESSAGE) from None
    if isinstance(value, str):
        return _parse_string(value)
    raise ValidationFailed(INVALID_DATE_MESSAGE)
