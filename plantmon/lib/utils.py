"""Shared utility functions."""
from datetime import UTC, datetime

# SQLite datetime format (space separator, not T)
_SQLITE_DATETIME_FMT = "%Y-%m-%d %H:%M:%S"


def utcnow() -> datetime:
    """Return current time as an aware UTC datetime."""
    return datetime.now(UTC)


def to_db_timestamp(dt: datetime) -> str:
    """Format a datetime for storage.

    Naive datetimes are taken to be UTC. The fixed-width format keeps string
    comparison in SQL equivalent to chronological comparison.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC)
    return dt.strftime(_SQLITE_DATETIME_FMT)


def parse_db_timestamp(value: str) -> datetime:
    """Parse a stored timestamp back into an aware UTC datetime.

    Accepts both the storage format and ISO-8601 strings.
    """
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
