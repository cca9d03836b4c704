"""
Date arithmetic for calendar windows and recurrence.

All functions are pure and operate on naive local wall-clock datetimes.
Weeks start on Sunday (day-of-week index 0), matching the campus calendar
grid.
"""

import calendar
from datetime import datetime, date, timedelta, time as dt_time


def start_of_day(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), dt_time.min)


def end_of_day(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), dt_time.max)


def day_of_week_index(d: date) -> int:
    """Day-of-week index with Sunday = 0 ... Saturday = 6."""
    # date.weekday() is Monday = 0
    return (d.weekday() + 1) % 7


def start_of_week(dt: datetime) -> datetime:
    """Midnight of the Sunday on or before dt."""
    return start_of_day(dt) - timedelta(days=day_of_week_index(dt.date()))


def end_of_week(dt: datetime) -> datetime:
    """Last instant of the Saturday closing dt's week."""
    return end_of_day(start_of_week(dt) + timedelta(days=6))


def week_days(dt: datetime) -> list[date]:
    """The seven dates (Sunday first) of the week containing dt."""
    first = start_of_week(dt).date()
    return [first + timedelta(days=i) for i in range(7)]


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def start_of_month(dt: datetime) -> datetime:
    return datetime(dt.year, dt.month, 1)


def end_of_month(dt: datetime) -> datetime:
    last_day = date(dt.year, dt.month, days_in_month(dt.year, dt.month))
    return datetime.combine(last_day, dt_time.max)


def add_days(dt: datetime, days: int) -> datetime:
    # Naive datetimes: timedelta arithmetic keeps the wall-clock time of day
    return dt + timedelta(days=days)


def add_weeks(dt: datetime, weeks: int) -> datetime:
    return add_days(dt, weeks * 7)


def add_months(dt: datetime, months: int) -> datetime:
    """
    Shift dt by whole calendar months, keeping the time of day.

    The day of month is clamped to the length of the target month, so
    Jan 31 + 1 month is Feb 28 (or 29), never an overflow into March.
    """
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, days_in_month(year, month))
    return dt.replace(year=year, month=month, day=day)


def shift_range(start: datetime, end: datetime, new_start: datetime) -> tuple[datetime, datetime]:
    """Move the range [start, end] to begin at new_start, preserving its duration."""
    return new_start, new_start + (end - start)


def same_day(a: datetime, b: datetime) -> bool:
    return a.date() == b.date()
