"""
models/filter.py
----------------
Date filter used to bucket logs (fuel refills, misc spending) for display.
"""

from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, datetime
from typing import Optional

FILTER_ALL = "all"
FILTER_YEAR = "year"
FILTER_MONTH = "month"
FILTER_WEEK = "week"
FILTER_TYPES = (FILTER_ALL, FILTER_YEAR, FILTER_MONTH, FILTER_WEEK)


@dataclass(frozen=True)
class FilterState:
    """
    Which dates a log listing should show.

    Attributes:
        type: One of 'all', 'year', 'month', 'week'.
        year: Calendar year the filter applies to.
        month: Month number 1-12 (only for 'month').
        week: ISO-style week number, 1-based (only for 'week'). Any value is
            accepted; one that names no real week simply matches nothing.
    """
    type: str
    year: int
    month: Optional[int] = None
    week: Optional[int] = None

    def __post_init__(self) -> None:
        if self.type not in FILTER_TYPES:
            raise ValueError(f"Unknown filter type: {self.type!r}")
        if not MINYEAR <= self.year <= MAXYEAR:
            raise ValueError(f"Year must be {MINYEAR}-{MAXYEAR}, got {self.year!r}")
        if self.type == FILTER_MONTH and not (self.month and 1 <= self.month <= 12):
            raise ValueError(f"Month filter needs a month 1-12, got {self.month!r}")

    @classmethod
    def current_week(cls, now: datetime) -> "FilterState":
        """The dashboard's default filter: the week containing `now`."""
        # The calendar year is kept alongside the ISO week, as the dashboard does.
        _, week = now.isocalendar()[:2]
        return cls(type=FILTER_WEEK, year=now.year, week=week)
