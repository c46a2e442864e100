"""Inclusive date ranges and their expansion into calendar days."""

from collections.abc import Iterable, Iterator
from datetime import date, timedelta

from attrs import define, field

from ..errors import InvalidRangeError, ParseError
from .dates import format_date_label, parse_local_date

RANGE_SEPARATOR = ".."


@define(slots=True, frozen=True)
class DateRange:
    """Inclusive ``start``/``end`` pair of calendar dates."""

    start: date = field(converter=parse_local_date)
    end: date = field(converter=parse_local_date)

    def __attrs_post_init__(self) -> None:
        """Reject ranges that end before they start."""
        if self.start > self.end:
            raise InvalidRangeError(
                f"Range start {self.start.isoformat()} is after end {self.end.isoformat()}."
            )

    @classmethod
    def parse(cls, text: str) -> "DateRange":
        """Build a range from ``START..END``; a single date gives a one-day range."""
        raw = text.strip()
        if RANGE_SEPARATOR in raw:
            start, _, end = raw.partition(RANGE_SEPARATOR)
        else:
            start = end = raw
        if not start or not end:
            raise ParseError(f"Invalid range {text!r}. Expected START..END.")
        return cls(start=start.strip(), end=end.strip())

    @property
    def days(self) -> int:
        """Return the inclusive day count."""
        return (self.end - self.start).days + 1

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()}{RANGE_SEPARATOR}{self.end.isoformat()}"


@define(slots=True, frozen=True)
class DateSpan:
    """First and last date covered by a bucket, for tooltip display."""

    start: date
    end: date
    days: int

    @classmethod
    def from_dates(cls, dates: Iterable[date]) -> "DateSpan | None":
        """Return the span of ``dates`` or None when there are none."""
        unique = sorted(set(dates))
        if not unique:
            return None
        return cls(start=unique[0], end=unique[-1], days=len(unique))

    @property
    def label(self) -> str:
        if self.start == self.end:
            return format_date_label(self.start)
        return f"{format_date_label(self.start)} - {format_date_label(self.end)}"


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end`` inclusive."""
    current = start
    step = timedelta(days=1)
    while current <= end:
        yield current
        current += step


def expand(date_range: DateRange) -> list[date]:
    """Return the ordered list of days covered by ``date_range``."""
    return list(iter_dates(date_range.start, date_range.end))


__all__ = ["DateRange", "DateSpan", "RANGE_SEPARATOR", "expand", "iter_dates"]
