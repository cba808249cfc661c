"""
UTC datetime helpers.

Every timestamp written by the service (approval, push, audit entries) is
timezone-aware UTC. Use these helpers instead of datetime.now().
"""

from datetime import UTC, datetime
from typing import overload


def utc_now() -> datetime:
    """
    Return the current time as a timezone-aware UTC datetime.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


@overload
def ensure_utc(dt: datetime) -> datetime: ...
@overload
def ensure_utc(dt: None) -> None: ...
def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Normalize a datetime to UTC.

    SQLite (used in tests) returns naive datetimes for DateTime(timezone=True)
    columns; PostgreSQL returns aware ones. Repositories call this at the
    boundary so DTOs always carry aware values.

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive: stored as UTC
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)
