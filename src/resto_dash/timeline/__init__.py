"""Calendar helpers and date range expansion."""

from .dates import (
    WEEKDAYS_MONDAY_FIRST,
    is_leap_year,
    iso_week_of,
    parse_local_date,
    weekday_monday_first,
    weekday_name,
)
from .ranges import DateRange, DateSpan, expand, iter_dates

__all__ = [
    "WEEKDAYS_MONDAY_FIRST",
    "DateRange",
    "DateSpan",
    "expand",
    "is_leap_year",
    "iso_week_of",
    "iter_dates",
    "parse_local_date",
    "weekday_monday_first",
    "weekday_name",
]
