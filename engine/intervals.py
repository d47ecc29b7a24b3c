"""
Calendar-day interval helpers.

All computations happen on whole days in UTC so that daylight-saving
transitions never shift a day count.
"""

from collections.abc import Iterable, Iterator
from datetime import date, datetime, timedelta, timezone

DayLike = date | datetime | str


def to_day(value: DayLike) -> date:
    """
    Normalize a date, datetime or ISO-8601 string to a calendar day.

    Aware datetimes are converted to UTC before the time of day is dropped;
    naive datetimes are taken to already be in UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        # Python < 3.11 does not accept a trailing "Z"
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return to_day(datetime.fromisoformat(text))
    raise TypeError(f"Cannot interpret {value!r} as a calendar day")


def days_between(start: DayLike, end: DayLike) -> int:
    """Whole days from start to end (negative when end precedes start)."""
    return (to_day(end) - to_day(start)).days


def shift_days(day: DayLike, n: int) -> date:
    """Return the day n days after `day` (n may be negative)."""
    return to_day(day) + timedelta(days=n)


def overlaps(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Inclusive overlap test for two day ranges."""
    return a_start <= b_end and a_end >= b_start


def iter_days(start: DayLike, end: DayLike) -> Iterator[date]:
    """Yield every day of the inclusive span [start, end]."""
    current = to_day(start)
    last = to_day(end)
    while current <= last:
        yield current
        current += timedelta(days=1)


def coalesce_days(days: Iterable[date]) -> list[tuple[date, date]]:
    """Collapse days into sorted, contiguous, inclusive (start, end) ranges."""
    ranges: list[tuple[date, date]] = []
    for day in sorted(set(days)):
        if ranges and (day - ranges[-1][1]).days == 1:
            ranges[-1] = (ranges[-1][0], day)
        else:
            ranges.append((day, day))
    return ranges
