"""
UTC datetime utilities for consistent timezone handling.

All timestamps written to the backend are ISO-8601 UTC strings.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (the backend's timestamp format)."""
    return utc_now().isoformat()


def timestamp_ms() -> int:
    """
    Current Unix time in milliseconds.
    Used as a collision-resistant prefix for uploaded object names.
    """
    return int(utc_now().timestamp() * 1000)
