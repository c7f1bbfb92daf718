"""UTC day/month boundaries for date filters and monthly buckets."""

from datetime import date, datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def day_start(day: date) -> datetime:
    return datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc)


def day_end_exclusive(day: date) -> datetime:
    """First instant after day, so an end-date filter includes the whole day."""
    return day_start(day) + timedelta(days=1)


def month_start(moment: Optional[datetime] = None, months_back: int = 0) -> datetime:
    moment = moment or utcnow()
    year, month = moment.year, moment.month - months_back
    while month < 1:
        month += 12
        year -= 1
    return datetime(year, month, 1, tzinfo=timezone.utc)


def month_key(moment: datetime) -> str:
    return f"{moment.year:04d}-{moment.month:02d}"
