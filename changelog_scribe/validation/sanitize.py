# changelog_scribe/validation/sanitize.py
"""
Timestamp parsing for user-supplied and GitHub-supplied dates.

Accepts anything ``datetime.fromisoformat`` accepts (date-only strings,
offsets, a trailing ``Z``). Naive values are treated as UTC.
"""

import logging
from datetime import datetime, timezone

from changelog_scribe.errors import InvalidDateError

logger = logging.getLogger(__name__)


def parse_timestamp(value: str | datetime, field: str = "date") -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Args:
        value: ISO string (e.g. "2024-01-01", "2024-01-05T10:00:00Z") or datetime
        field: Parameter name used in the error message

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        InvalidDateError: If value is empty or not a valid timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip() if isinstance(value, str) else ""
        if not text:
            raise InvalidDateError(f"{field} is required")
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidDateError(f"Invalid {field} '{value}': expected an ISO-8601 timestamp")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def normalize_timestamp(value: str | datetime, field: str = "date") -> str:
    """Canonical sortable form: UTC, microsecond precision, ``+00:00`` suffix."""
    return parse_timestamp(value, field).isoformat(timespec="microseconds")


def to_github_iso(value: str | datetime, field: str = "date") -> str:
    """Format a timestamp the way the GitHub API expects (``YYYY-MM-DDTHH:MM:SSZ``)."""
    return parse_timestamp(value, field).strftime("%Y-%m-%dT%H:%M:%SZ")
