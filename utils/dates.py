"""
utils/dates.py
--------------
Calendar helpers: day/week differencing, ISO week numbering,
week-range reconstruction and filter membership.

All functions are pure. Instants are naive local datetimes; plain
`date` values are treated as midnight of that day.
"""

import calendar
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Union

from dateutil.relativedelta import relativedelta

from models.filter import (
    FILTER_ALL,
    FILTER_MONTH,
    FILTER_WEEK,
    FILTER_YEAR,
    FilterState,
)

DateLike = Union[date, datetime]

_SECONDS_PER_DAY = 86_400
_END_OF_DAY = time(23, 59, 59, 999_000)

MONTH_NAMES = [f"Tháng {m}" for m in range(1, 13)]
WEEKDAY_NAMES = ["Thứ 2", "Thứ 3", "Thứ 4", "Thứ 5", "Thứ 6", "Thứ 7", "Chủ nhật"]


@dataclass(frozen=True)
class WeekSpan:
    """One selectable week of a year."""
    week: int
    start: datetime
    end: datetime


def as_datetime(value: DateLike) -> datetime:
    """Promote a `date` to midnight; leave a `datetime` untouched."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_date(value: DateLike) -> str:
    """Format as dd/mm/yyyy."""
    return value.strftime("%d/%m/%Y")


def format_datetime(value: datetime) -> str:
    """Format as dd/mm/yyyy HH:MM."""
    return value.strftime("%d/%m/%Y %H:%M")


def days_between(a: DateLike, b: DateLike) -> int:
    """
    Absolute number of days between two instants, rounded to the nearest day.

    Uses a fixed 24h day; daylight-saving shifts are not special-cased.
    """
    seconds = abs((as_datetime(a) - as_datetime(b)).total_seconds())
    return _round_half_up(seconds / _SECONDS_PER_DAY)


def days_until(now: DateLike, target: DateLike) -> int:
    """Signed, rounded day count from `now` to `target` (negative if past)."""
    seconds = (as_datetime(target) - as_datetime(now)).total_seconds()
    return _round_half_up(seconds / _SECONDS_PER_DAY)


def weeks_between(a: DateLike, b: DateLike) -> int:
    """Signed, rounded number of 7-day spans from `a` to `b`."""
    seconds = (as_datetime(b) - as_datetime(a)).total_seconds()
    return _round_half_up(seconds / (7 * _SECONDS_PER_DAY))


def week_number(value: DateLike) -> tuple[int, int]:
    """
    ISO-8601 (year, week) of a date.

    The week belongs to the year of its Thursday, so the returned year can
    differ from `value.year` around New Year.
    """
    iso = value.isocalendar()
    return iso[0], iso[1]


def week_range(year: int, week: int) -> tuple[datetime, datetime]:
    """
    Monday 00:00 .. Sunday 23:59:59.999 of the given week.

    Anchors on Jan 1 + (week - 1) * 7 days and rolls back to that week's
    Monday. This does not always round-trip through `week_number` at year
    boundaries.
    """
    anchor = datetime(year, 1, 1) + timedelta(days=(week - 1) * 7)
    start = anchor - timedelta(days=anchor.weekday())
    end = datetime.combine((start + timedelta(days=6)).date(), _END_OF_DAY)
    return start, end


def weeks_in_year(year: int) -> list[WeekSpan]:
    """Every week offered for a year, stopping once a week would start in the next year."""
    days = 366 if calendar.isleap(year) else 365
    weeks = []
    for week in range(1, math.ceil(days / 7) + 1):
        try:
            start, end = week_range(year, week)
        except OverflowError:
            break  # last week of year 9999
        if start.year > year:
            break
        weeks.append(WeekSpan(week=week, start=start, end=end))
    return weeks


def next_month(value: DateLike) -> DateLike:
    """
    Same day one calendar month later. A day the target month lacks spills
    over into the month after it: Jan 31 -> Mar 2 in a leap year, Mar 3 otherwise.
    """
    clamped = value + relativedelta(months=1)
    return clamped + timedelta(days=value.day - clamped.day)


def is_in_filter_range(value: DateLike, flt: FilterState) -> bool:
    """
    Whether a date falls inside the filter.

    A 'week' filter without a usable week number matches nothing.
    """
    moment = as_datetime(value)

    if flt.type == FILTER_ALL:
        return True
    if flt.type == FILTER_YEAR:
        return moment.year == flt.year
    if flt.type == FILTER_MONTH:
        return moment.year == flt.year and moment.month == flt.month
    if flt.type == FILTER_WEEK:
        if not flt.week or flt.week < 1:
            return False
        try:
            start, end = week_range(flt.year, flt.week)
        except (OverflowError, ValueError):
            return False
        return start <= moment <= end
    return False


def describe_filter(flt: FilterState) -> str:
    """Human label for the active filter."""
    if flt.type == FILTER_WEEK and flt.week:
        try:
            start, end = week_range(flt.year, flt.week)
        except (OverflowError, ValueError):
            return f"Tuần {flt.week}, {flt.year}"
        return f"Tuần {flt.week} ({format_date(start)} - {format_date(end)})"
    if flt.type == FILTER_MONTH:
        return f"{MONTH_NAMES[flt.month - 1]}, {flt.year}"
    if flt.type == FILTER_YEAR:
        return f"Năm {flt.year}"
    return "Tất cả"


def same_day(a: DateLike, b: DateLike) -> bool:
    return as_datetime(a).date() == as_datetime(b).date()
