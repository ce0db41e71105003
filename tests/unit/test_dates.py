"""Tests for calendar helpers in utils/dates.py."""

from datetime import date, datetime, timedelta

import pytest

from models.filter import FilterState
from utils.dates import (
    days_between,
    days_until,
    describe_filter,
    format_date,
    is_in_filter_range,
    next_month,
    week_number,
    week_range,
    weeks_between,
    weeks_in_year,
)


def test_format_date_vietnamese_order():
    assert format_date(datetime(2024, 3, 5, 14, 30)) == "05/03/2024"


def test_days_between_is_absolute_and_rounded():
    a = datetime(2024, 3, 1, 0, 0)
    b = datetime(2024, 3, 4, 13, 0)  # 3.54 days
    assert days_between(a, b) == 4
    assert days_between(b, a) == 4


def test_days_between_rounds_half_up():
    a = datetime(2024, 3, 1, 0, 0)
    assert days_between(a, a + timedelta(days=2, hours=12)) == 3


def test_days_until_is_signed():
    now = datetime(2024, 3, 10)
    assert days_until(now, datetime(2024, 3, 17)) == 7
    assert days_until(now, datetime(2024, 3, 3)) == -7


def test_weeks_between():
    assert weeks_between(datetime(2024, 1, 1), datetime(2024, 1, 22)) == 3


@pytest.mark.parametrize(
    "day, expected",
    [
        (date(2024, 3, 13), (2024, 11)),
        (date(2021, 1, 1), (2020, 53)),   # Friday belongs to last year's week
        (date(2024, 12, 30), (2025, 1)),  # Monday already in next year's week 1
        (date(2026, 1, 1), (2026, 1)),
    ],
)
def test_week_number_iso_rule(day, expected):
    assert week_number(day) == expected


@pytest.mark.parametrize("year", [2020, 2023, 2024, 2025, 2026])
@pytest.mark.parametrize("week", [1, 2, 10, 26, 52])
def test_week_range_spans_monday_to_sunday(year, week):
    start, end = week_range(year, week)
    assert start.weekday() == 0
    assert (start.hour, start.minute, start.second) == (0, 0, 0)
    assert end.weekday() == 6
    assert end == datetime(end.year, end.month, end.day, 23, 59, 59, 999000)
    assert (end.date() - start.date()).days == 6


def test_week_range_first_week_can_start_in_previous_year():
    # Jan 1 2025 is a Wednesday
    start, end = week_range(2025, 1)
    assert start == datetime(2024, 12, 30)
    assert end.date() == date(2025, 1, 5)


def test_week_range_sunday_new_year_rolls_back_six_days():
    # Jan 1 2023 is a Sunday
    start, _ = week_range(2023, 1)
    assert start == datetime(2022, 12, 26)


def test_weeks_in_year_counts():
    weeks = weeks_in_year(2024)
    assert [w.week for w in weeks] == list(range(1, len(weeks) + 1))
    assert len(weeks) in (52, 53)
    assert all(w.start.year <= 2024 for w in weeks)


def test_weeks_in_year_stops_before_next_year():
    # Week 53 is anchored on Dec 31 and starts Monday Dec 28, still inside the year
    weeks = weeks_in_year(2026)
    assert weeks[-1].start.year == 2026


def test_weeks_in_year_at_the_end_of_the_calendar():
    weeks = weeks_in_year(9999)
    assert weeks[-1].end.year == 9999


@pytest.mark.parametrize("value, expected", [
    (datetime(2024, 1, 15, 8, 30), datetime(2024, 2, 15, 8, 30)),
    (datetime(2024, 12, 15), datetime(2025, 1, 15)),
    (datetime(2024, 1, 31), datetime(2024, 3, 2)),
    (datetime(2023, 1, 31), datetime(2023, 3, 3)),
    (date(2024, 3, 31), date(2024, 5, 1)),
])
def test_next_month_rolls_over_missing_days(value, expected):
    assert next_month(value) == expected


class TestIsInFilterRange:
    def test_all_always_matches(self):
        assert is_in_filter_range(datetime(1999, 1, 1), FilterState(type="all", year=2024))

    def test_year(self):
        flt = FilterState(type="year", year=2024)
        assert is_in_filter_range(datetime(2024, 12, 31, 23, 59), flt)
        assert not is_in_filter_range(datetime(2025, 1, 1), flt)

    def test_month_uses_one_based_months(self):
        flt = FilterState(type="month", year=2024, month=3)
        assert is_in_filter_range(date(2024, 3, 1), flt)
        assert not is_in_filter_range(date(2024, 4, 1), flt)
        assert not is_in_filter_range(date(2023, 3, 15), flt)

    def test_week_includes_last_millisecond_of_sunday(self):
        flt = FilterState(type="week", year=2024, week=11)
        start, end = week_range(2024, 11)
        assert is_in_filter_range(start, flt)
        assert is_in_filter_range(datetime(2024, 3, 17, 23, 59, 59, 999000), flt)
        assert not is_in_filter_range(end + timedelta(milliseconds=1), flt)
        assert not is_in_filter_range(start - timedelta(microseconds=1), flt)

    @pytest.mark.parametrize("week", [None, 0, -2])
    def test_week_without_usable_number_matches_nothing(self, week):
        flt = FilterState(type="week", year=2024, week=week)
        assert not is_in_filter_range(datetime(2024, 3, 13), flt)

    @pytest.mark.parametrize("week", [54, 10**8, 10**9])
    def test_week_number_past_the_year_matches_nothing(self, week):
        flt = FilterState(type="week", year=2024, week=week)
        assert not is_in_filter_range(datetime(2024, 3, 13), flt)

    def test_last_week_of_year_9999_matches_nothing(self):
        flt = FilterState(type="week", year=9999, week=53)
        assert not is_in_filter_range(datetime(9999, 12, 31), flt)

    @pytest.mark.parametrize("year", [0, -1, 10_000])
    def test_year_outside_the_calendar_rejected_at_construction(self, year):
        with pytest.raises(ValueError):
            FilterState(type="week", year=year, week=5)

    def test_unknown_type_rejected_at_construction(self):
        with pytest.raises(ValueError):
            FilterState(type="decade", year=2024)


def test_describe_filter_labels():
    assert describe_filter(FilterState(type="all", year=2024)) == "Tất cả"
    assert describe_filter(FilterState(type="year", year=2024)) == "Năm 2024"
    assert describe_filter(FilterState(type="month", year=2024, month=3)) == "Tháng 3, 2024"
    assert describe_filter(FilterState(type="week", year=2024, week=11)) == "Tuần 11 (11/03/2024 - 17/03/2024)"
    assert describe_filter(FilterState(type="week", year=2024, week=10**8)) == "Tuần 100000000, 2024"
