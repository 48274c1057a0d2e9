"""Utility functions for textmarks."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Get the current time as a naive UTC datetime.

    Returns:
        Naive datetime in UTC

    """
    return datetime.now(UTC).replace(tzinfo=None)


def to_utc_iso(dt: datetime | None) -> str | None:
    """
    Convert datetime to UTC ISO format string.

    Args:
        dt: Datetime object to convert, or None

    Returns:
        ISO format string with UTC timezone, or None

    """
    if dt is None:
        return None
    # Naive datetimes are assumed to already be UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    dt_utc = dt.astimezone(UTC)
    return dt_utc.isoformat()


def from_utc_iso(iso_str: str | None) -> datetime | None:
    """
    Parse UTC ISO format string to datetime.

    Args:
        iso_str: ISO format string, or None

    Returns:
        Naive datetime object (UTC), or None

    """
    if iso_str is None:
        return None
    dt = datetime.fromisoformat(iso_str)
    dt = dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)
    # SQLite doesn't handle timezone-aware datetimes well
    return dt.replace(tzinfo=None)


def from_timestamp(value: str | int | float | None) -> datetime | None:
    """
    Parse a timestamp that is either an ISO string or epoch milliseconds.

    Browser exports store ``createdAt`` as milliseconds since the epoch,
    while our own exports use ISO strings.

    Args:
        value: ISO string, epoch milliseconds, or None

    Raises:
        ValueError: If ``value`` is not a valid timestamp, or is outside the
            range the platform can represent

    Returns:
        Naive datetime object (UTC), or None

    """
    if value is None:
        return None
    if isinstance(value, bool):
        msg = f"Invalid timestamp: {value!r}"
        raise ValueError(msg)
    if isinstance(value, int | float):
        try:
            dt = datetime.fromtimestamp(value / 1000, UTC)
        except (OverflowError, OSError) as e:
            msg = f"Timestamp out of range: {value!r}"
            raise ValueError(msg) from e
        return dt.replace(tzinfo=None)
    return from_utc_iso(value)
