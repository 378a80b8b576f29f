"""UTC time helpers.

Stored timestamps (entity created_at/updated_at, audit created_at) are epoch
milliseconds in UTC; services take a clock callable defaulting to
epoch_millis so tests can pin time.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def to_epoch_millis(dt: datetime) -> int:
    """Convert a datetime (naive = UTC) to a millisecond Unix timestamp."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


def epoch_millis() -> int:
    """Return the current time as a millisecond Unix timestamp."""
    return to_epoch_millis(utc_now())
