"""Calendar-day keys used to partition meals."""

from datetime import date, datetime


def date_key(value: date | datetime) -> str:
    """Return the ISO ``YYYY-MM-DD`` key for a date or datetime."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def parse_date_key(raw: str) -> date:
    """Parse an ISO day key, raising ValueError when malformed."""
    return date.fromisoformat(raw.strip())


def is_same_day(first: date | datetime, second: date | datetime) -> bool:
    """Return True when both values fall on the same calendar day."""
    return date_key(first) == date_key(second)
