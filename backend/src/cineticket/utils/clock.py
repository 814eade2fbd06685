"""Time helpers. All booking timestamps are UTC."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """
    Normalise a datetime read back from storage.

    Some backends (SQLite) return naive datetimes; those are stored as UTC, so
    the zone is attached rather than converted.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
