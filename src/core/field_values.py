"""Field value helpers shared by validation, search, and sorting."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any


def is_empty_value(value: Any) -> bool:
    """Return whether a value counts as missing for required-field checks."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def is_number(value: Any) -> bool:
    """Return whether a value is a real number (booleans excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_date_value(value: Any) -> datetime | None:
    """Parse a date-like value into an aware UTC datetime.

    Args:
        value: datetime, date, or ISO-8601 string.

    Returns:
        Parsed datetime, or None when the value is not a date.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_search_text(value: Any) -> str:
    """Render a field value as the text free-text search compares against."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()
