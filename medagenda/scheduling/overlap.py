"""
Interval primitives shared by slot generation, exclusion and the booking
conflict check. All intervals are half-open: [start, end).
"""

from datetime import date, datetime, time, timedelta


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Touching endpoints do not count as an overlap."""
    return start_a < end_b and end_a > start_b


def contains_instant(start: datetime, end: datetime, instant: datetime) -> bool:
    return start <= instant < end


def covers_date(start_date: date, end_date: date | None, target_date: date) -> bool:
    """Inclusive date-range coverage; a missing end date means a single day."""
    last_day = end_date or start_date
    return start_date <= target_date <= last_day


def day_bounds(target_date: date) -> tuple[datetime, datetime]:
    start_of_day = datetime.combine(target_date, time.min)
    return start_of_day, start_of_day + timedelta(days=1)


def at(target_date: date, time_of_day: time) -> datetime:
    return datetime.combine(target_date, time_of_day)
