"""Helpers for naive UTC timestamps."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time without ``tzinfo``.

    Every timestamp column stores naive UTC so comparisons behave the same on
    SQLite and PostgreSQL.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def ensure_naive_utc(value: datetime | None) -> datetime | None:
    """Convert an offset-bearing ``value`` to naive UTC; naive values are taken as UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
