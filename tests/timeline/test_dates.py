"""Unit tests for the calendar helpers."""

from datetime import date, datetime

import pytest

from resto_dash.errors import ParseError
from resto_dash.timeline.dates import (
    day_number,
    day_of_year,
    days_in_month,
    days_in_year,
    format_date_label,
    format_week_key,
    is_leap_year,
    iso_week_of,
    month_end,
    month_start,
    parse_local_date,
    week_end,
    week_start,
    weekday_monday_first,
    weekday_name,
    year_end,
    year_start,
)


def test_parse_local_date():
    assert parse_local_date("2025-09-02") == date(2025, 9, 2)
    assert parse_local_date(" 2024-02-29 ") == date(2024, 2, 29)
    assert parse_local_date(date(2025, 1, 1)) == date(2025, 1, 1)
    assert parse_local_date(datetime(2025, 1, 1, 23, 30)) == date(2025, 1, 1)


@pytest.mark.parametrize(
    "value",
    ["2025-9-2", "02-09-2025", "2025-02-30", "2023-02-29", "", "yesterday", "٢٠٢٥-01-01", "2025-０１-01"],
)
def test_parse_local_date_rejects_malformed(value):
    with pytest.raises(ParseError):
        parse_local_date(value)


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse_local_date("not-a-date")


@pytest.mark.parametrize(
    "year, expected",
    [(2024, True), (2023, False), (1900, False), (2000, True), (2100, False)],
)
def test_is_leap_year(year, expected):
    assert is_leap_year(year) is expected
    assert days_in_year(year) == (366 if expected else 365)


def test_days_in_month():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2025, 2) == 28
    assert days_in_month(2025, 4) == 30
    assert days_in_month(2025, 12) == 31
    with pytest.raises(ValueError):
        days_in_month(2025, 13)


@pytest.mark.parametrize(
    "value, expected",
    [
        (date(2024, 12, 31), (2025, 1)),
        (date(2025, 1, 1), (2025, 1)),
        (date(2021, 1, 3), (2020, 53)),
        (date(2025, 9, 2), (2025, 36)),
        (date(2026, 12, 31), (2026, 53)),
    ],
)
def test_iso_week_of(value, expected):
    assert iso_week_of(value) == expected


def test_iso_week_key_of_new_years_eve():
    assert format_week_key(*iso_week_of(date(2024, 12, 31))) == "2025-W01"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2025-09-01", 0),
        ("2025-09-02", 1),
        ("2025-09-07", 6),
        ("2024-02-29", 3),
        ("2000-01-01", 5),
        ("2025-01-01T18:00:00", 2),
    ],
)
def test_weekday_monday_first(value, expected):
    assert weekday_monday_first(value) == expected


def test_weekday_matches_calendar_for_a_whole_leap_year():
    current = date(2024, 1, 1)
    while current.year == 2024:
        assert weekday_monday_first(current.isoformat()) == current.weekday()
        current = date.fromordinal(current.toordinal() + 1)


def test_weekday_name():
    assert weekday_name("2025-09-06") == "Saturday"
    assert weekday_name(date(2025, 9, 8)) == "Monday"


def test_weekday_rejects_impossible_day():
    with pytest.raises(ParseError):
        weekday_monday_first("2025-02-31")


def test_week_boundaries():
    assert week_start(date(2025, 9, 3)) == date(2025, 9, 1)
    assert week_end(date(2025, 9, 3)) == date(2025, 9, 7)
    assert week_start(date(2025, 9, 7)) == date(2025, 9, 1)
    assert month_end(date(2024, 2, 10)) == date(2024, 2, 29)
    assert month_start(date(2024, 2, 10)) == date(2024, 2, 1)
    assert year_start(date(2024, 7, 4)) == date(2024, 1, 1)
    assert year_end(date(2024, 7, 4)) == date(2024, 12, 31)


def test_day_counters():
    assert day_number(date(1970, 1, 1)) == 0
    assert day_number(date(1970, 1, 2)) == 1
    assert day_of_year(date(2024, 12, 31)) == 366
    assert day_of_year(date(2025, 1, 1)) == 1


def test_format_date_label():
    assert format_date_label(date(2025, 9, 2)) == "2-9-2025"
