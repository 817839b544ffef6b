"""Time helpers shared by the queue services."""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from app.config import settings


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    SQLite hands timestamps back without tzinfo; those are stored as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def queue_date(now: datetime) -> date:
    """Calendar date of ``now`` in the pharmacy's timezone."""
    return ensure_utc(now).astimezone(ZoneInfo(settings.queue_timezone)).date()
