"""Calendar-date helpers shared by the inputs, the compiler and the summary.

Timestamps are integer milliseconds since the Unix epoch. A calendar date
maps to its UTC midnight so that conversions never depend on the host zone.
"""

import math
import re
from datetime import UTC, date, datetime, timedelta

from .logging import get_logger

logger = get_logger(__name__)

UNSET = -1

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# Longest tokens first so "MMMM" wins over "MM"
_FORMAT_TOKENS = re.compile(r"YYYY|YY|MMMM|MMM|MM|M|DD|D")


def timestamp_from_date(value: date) -> int:
    """UTC-midnight timestamp (ms) of a calendar date."""
    midnight = datetime(value.year, value.month, value.day, tzinfo=UTC)
    return (midnight - EPOCH) // timedelta(milliseconds=1)


def date_from_timestamp(timestamp: int) -> date:
    """Calendar date (UTC) of a timestamp in ms.

    Raises:
        OverflowError: If the timestamp is outside the representable range
    """
    return (EPOCH + timedelta(milliseconds=timestamp)).date()


def is_valid_timestamp(value: object) -> bool:
    """Check that ``value`` is an integral ms timestamp with a calendar date."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    try:
        date_from_timestamp(value)
    except OverflowError:
        return False
    return True


def coerce_number(value: object) -> int | None:
    """Normalize a persisted numeric field to an int.

    Accepts ints, integral floats and numeric strings. Returns None for
    anything else (booleans, NaN, infinities, fractional or non-numeric values).
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            value = float(text) if any(c in text for c in ".eE") else int(text)
        except ValueError:
            return None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        return int(value)
    if isinstance(value, int):
        return value
    return None


def date_for_query(timestamp: int) -> str:
    """Locale-independent calendar-date literal used in filter expressions."""
    return date_from_timestamp(timestamp).isoformat()


def format_display(value: date, fmt: str = "YYYY-MM-DD") -> str:
    """Render a date with a moment-style format string."""

    def _token(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "YYYY":
            return f"{value.year:04d}"
        if token == "YY":
            return f"{value.year % 100:02d}"
        if token == "MMMM":
            return MONTH_NAMES[value.month - 1]
        if token == "MMM":
            return MONTH_NAMES[value.month - 1][:3]
        if token == "MM":
            return f"{value.month:02d}"
        if token == "M":
            return str(value.month)
        if token == "DD":
            return f"{value.day:02d}"
        return str(value.day)

    return _FORMAT_TOKENS.sub(_token, fmt)


def parse_input(text: str) -> int:
    """Map an input control's query value to a timestamp.

    Empty text means the bound is unset. Any time part is truncated to the
    calendar date. Unparseable text degrades to UNSET.
    """
    text = text.strip()
    if not text:
        return UNSET
    try:
        parsed = datetime.fromisoformat(text).date()
    except ValueError:
        logger.warning("unparseable_input_value", value=text)
        return UNSET
    return timestamp_from_date(parsed)
