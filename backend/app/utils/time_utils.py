"""
Time helpers.

All timestamps are produced and compared in UTC. The database stores them as
timezone-aware columns; naive input is assumed to already be UTC.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_from_now(days: int, now: Optional[datetime] = None) -> datetime:
    """Cutoff `days` days after `now` (defaults to the current UTC time)."""
    return (now or utc_now()) + timedelta(days=days)
