# app/utils/dates.py
"""
Date helpers shared by the registration workflow and the dashboards.

All timestamps stored by the service are naive UTC datetimes.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(moment: datetime) -> datetime:
    """Normalizes an aware datetime to naive UTC; naive values pass through."""
    if moment.tzinfo is not None:
        return moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


def hours_until(moment: datetime, now: Optional[datetime] = None) -> float:
    now = now or utcnow()
    return (moment - now).total_seconds() / 3600


def is_event_ongoing(
    start: datetime, end: datetime, now: Optional[datetime] = None
) -> bool:
    now = now or utcnow()
    return start <= now <= end


def get_event_status(
    start: datetime, end: datetime, now: Optional[datetime] = None
) -> str:
    """Returns 'upcoming', 'ongoing' or 'finished' for an event window."""
    now = now or utcnow()
    if now < start:
        return "upcoming"
    if now <= end:
        return "ongoing"
    return "finished"


def day_bounds(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """[start of today, start of tomorrow)"""
    now = now or utcnow()
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def month_start(now: Optional[datetime] = None, offset: int = 0) -> datetime:
    """First instant of the month `offset` months away from `now`."""
    now = now or utcnow()
    month_index = now.year * 12 + (now.month - 1) + offset
    year, month = divmod(month_index, 12)
    return datetime(year, month + 1, 1)
