"""
Calendar-date helpers shared by the recurrence engine and the schedule service.

All arithmetic works on naive local calendar dates. Datetimes are truncated to
their date part; no timezone conversion is applied.
"""
from datetime import date, datetime, timedelta
from typing import Iterator, Union

DateLike = Union[date, datetime, str]


def to_date(value: DateLike) -> date:
    """
    Normalize a date, datetime or ISO string to a calendar date.

    Args:
        value: A ``date``, ``datetime`` or ISO-8601 string ("YYYY-MM-DD" or a full timestamp)

    Returns:
        The calendar date (midnight-normalized)
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) > 10:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    raise TypeError(f"Unsupported date value: {value!r}")


def start_of_day(value: DateLike) -> date:
    return to_date(value)


def days_between(target: DateLike, baseline: DateLike) -> int:
    """
    Whole days from ``baseline`` to ``target`` (negative when target is earlier).
    """
    return (start_of_day(target) - start_of_day(baseline)).days


def week_start_for(value: DateLike) -> date:
    """
    Return the Sunday that starts the week containing ``value``.
    """
    day = to_date(value)
    # date.weekday() is Monday=0 .. Sunday=6; shift so Sunday=0
    return day - timedelta(days=(day.weekday() + 1) % 7)


def day_of_week(value: DateLike) -> int:
    """Sunday-based weekday index (0 = Sunday .. 6 = Saturday)."""
    return (to_date(value).weekday() + 1) % 7


def week_key(week_start: DateLike) -> str:
    return to_date(week_start).isoformat()


def add_days(value: DateLike, days: int) -> date:
    return to_date(value) + timedelta(days=days)


def iter_week_starts(start: DateLike, end: DateLike) -> Iterator[date]:
    """
    Yield the Sunday of every week that overlaps the inclusive range [start, end].
    """
    current = week_start_for(start)
    last = to_date(end)
    while current <= last:
        yield current
        current += timedelta(days=7)
