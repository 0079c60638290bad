"""Day/week boundary helpers.

All values are naive local datetimes; every boundary computation in the
package goes through these functions so month/year rollovers are handled by
``datetime`` arithmetic instead of ad hoc subtraction.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

MONDAY = 0
SUNDAY = 6


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def start_of_week(value: datetime, *, anchor_weekday: int = SUNDAY) -> datetime:
    """Local midnight of the most recent ``anchor_weekday`` on or before ``value``."""
    offset = (value.weekday() - anchor_weekday) % 7
    return start_of_day(value) - timedelta(days=offset)


def days_between(earlier: datetime | date, later: datetime | date) -> int:
    """Whole calendar days from ``earlier`` to ``later`` (negative if reversed)."""
    if isinstance(earlier, datetime):
        earlier = earlier.date()
    if isinstance(later, datetime):
        later = later.date()
    return (later - earlier).days


def is_same_day(a: Optional[datetime], b: Optional[datetime]) -> bool:
    if a is None or b is None:
        return False
    return a.date() == b.date()


def deadline_for(now: datetime, *, hour: int, minute: int) -> datetime:
    return datetime.combine(now.date(), time(hour=hour, minute=minute))


def next_occurrence(now: datetime, *, hour: int, minute: int) -> datetime:
    """Next instant strictly after ``now`` whose local time is ``hour:minute``."""
    candidate = deadline_for(now, hour=hour, minute=minute)
    if candidate <= now:
        candidate = datetime.combine(now.date() + timedelta(days=1), time(hour=hour, minute=minute))
    return candidate
