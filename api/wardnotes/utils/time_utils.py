"""
Utility functions for timestamps.
"""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Current time as a timezone-aware UTC datetime.

    SQLModel stores datetime fields as UTC and rejects naive values, so every
    timestamp written or compared against the database goes through here or to_utc.
    """
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Convert a datetime to aware UTC; naive values are assumed to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
