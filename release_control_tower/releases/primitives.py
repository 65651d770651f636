"""
Time helpers for release records.

Timestamps are stored and compared in UTC. SQLite drops tzinfo on the way
back out, so every value read from the store goes through ``ensure_utc``
before it is rendered.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """RFC 3339 with a trimmed fractional part and a ``Z`` suffix.

    Examples:
        2025-01-02 03:04:05.120000 -> "2025-01-02T03:04:05.12Z"
        2025-01-02 03:04:05        -> "2025-01-02T03:04:05Z"
    """
    if value is None:
        return None
    value = ensure_utc(value)
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    # datetime resolution is microseconds; pad to nanoseconds then trim.
    fraction = f"{value.microsecond * 1000:09d}".rstrip("0")
    if fraction:
        text += "." + fraction
    return text + "Z"


def format_release_date(value: datetime) -> str:
    """RFC 3339 to the second, e.g. ``2025-01-02T03:04:05Z``."""
    return ensure_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")
