"""Calendar arithmetic for daily restaurant metrics.

Every helper works on naive :class:`datetime.date` values so a date string
always maps to the same calendar day regardless of the host timezone.
"""

import re
from datetime import date, datetime, timedelta

from ..errors import ParseError

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$", re.ASCII)

WEEKDAYS_MONDAY_FIRST = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# Sakamoto's month offsets, January first.
_SAKAMOTO_OFFSETS = (0, 3, 2, 5, 0, 3, 5, 1, 4, 6, 2, 4)

_EPOCH = date(1970, 1, 1)


def _split_iso(value: str) -> tuple[int, int, int]:
    """Split ``YYYY-MM-DD`` into integer parts or raise :class:`ParseError`."""
    if not isinstance(value, str):
        raise ParseError(f"Expected an ISO date string, got {type(value).__name__}.")
    match = _ISO_DATE.match(value.strip())
    if match is None:
        raise ParseError(f"Invalid date {value!r}. Expected format YYYY-MM-DD.")
    year, month, day = (int(part) for part in match.groups())
    return year, month, day


def parse_local_date(value: str | date) -> date:
    """Parse ``YYYY-MM-DD`` into a calendar date anchored at local midnight."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    year, month, day = _split_iso(value)
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise ParseError(f"Invalid date {value!r}: {exc}.") from exc


def is_leap_year(year: int) -> bool:
    """Return True for Gregorian leap years."""
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in ``month`` of ``year``."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must lie in 1..12, got {month}.")
    if month == 2:
        return 29 if is_leap_year(year) else 28
    if month in (4, 6, 9, 11):
        return 30
    return 31


def day_of_year(value: date) -> int:
    """Return the 1-based ordinal of ``value`` within its calendar year."""
    return (value - date(value.year, 1, 1)).days + 1


def day_number(value: date) -> int:
    """Return the number of days elapsed since 1970-01-01."""
    return (value - _EPOCH).days


def iso_week_of(value: date) -> tuple[int, int]:
    """Return ``(week_year, week)`` following ISO-8601.

    Week 1 is the week holding the year's first Thursday, so the week year
    differs from the calendar year around New Year (2024-12-31 is 2025-W01).
    """
    week_year, week, _ = value.isocalendar()
    return week_year, week


def weekday_monday_first(value: str | date) -> int:
    """Return 0 (Monday) .. 6 (Sunday) for an ISO date string.

    Uses Sakamoto's closed form on the date digits, so no date object or
    timezone is involved. A trailing time part (``T...``) is ignored.
    """
    if isinstance(value, date):
        value = value.isoformat()
    year, month, day = _split_iso(str(value)[:10])
    if not 1 <= month <= 12 or not 1 <= day <= days_in_month(year, month):
        raise ParseError(f"Invalid date {value!r}.")
    if month < 3:
        year -= 1
    sunday_first = (
        year + year // 4 - year // 100 + year // 400 + _SAKAMOTO_OFFSETS[month - 1] + day
    ) % 7
    return 6 if sunday_first == 0 else sunday_first - 1


def weekday_name(value: str | date) -> str:
    """Return the English weekday name for a date or ISO string."""
    return WEEKDAYS_MONDAY_FIRST[weekday_monday_first(value)]


def week_start(value: date) -> date:
    """Return the Monday opening the ISO week of ``value``."""
    return value - timedelta(days=value.weekday())


def week_end(value: date) -> date:
    """Return the Sunday closing the ISO week of ``value``."""
    return week_start(value) + timedelta(days=6)


def month_start(value: date) -> date:
    return value.replace(day=1)


def month_end(value: date) -> date:
    return value.replace(day=days_in_month(value.year, value.month))


def year_start(value: date) -> date:
    return date(value.year, 1, 1)


def year_end(value: date) -> date:
    return date(value.year, 12, 31)


def format_week_key(week_year: int, week: int) -> str:
    """Format an ISO week as ``YYYY-Www``."""
    return f"{week_year}-W{week:02d}"


def format_month_key(year: int, month: int) -> str:
    return f"{year}-{month:02d}"


def format_date_label(value: date) -> str:
    """Render a date the way Dutch locale tooltips do (``d-m-yyyy``)."""
    return f"{value.day}-{value.month}-{value.year}"


__all__ = [
    "WEEKDAYS_MONDAY_FIRST",
    "day_number",
    "day_of_year",
    "days_in_month",
    "days_in_year",
    "format_date_label",
    "format_month_key",
    "format_week_key",
    "is_leap_year",
    "iso_week_of",
    "month_end",
    "month_start",
    "parse_local_date",
    "week_end",
    "week_start",
    "weekday_monday_first",
    "weekday_name",
    "year_end",
    "year_start",
]
