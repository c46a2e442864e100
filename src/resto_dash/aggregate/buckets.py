"""Group daily and intraday records into granularity buckets."""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any

import structlog
from attrs import define, field

from ..data.models import format_slot, minutes_of
from ..timeline.dates import (
    WEEKDAYS_MONDAY_FIRST,
    format_month_key,
    format_week_key,
    iso_week_of,
    parse_local_date,
    weekday_monday_first,
)
from ..timeline.ranges import DateSpan

logger = structlog.get_logger(__name__)

DEFAULT_INTERVAL_MINUTES = 15
DEFAULT_OPENING = "09:00"
DEFAULT_CLOSING = "24:00"


class Granularity(str, Enum):
    """Bucket sizes supported by the grouping step."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    WEEKDAY = "weekday"
    INTERVAL = "interval"


def bucket_key(record: Any, granularity: Granularity, *, interval_minutes: int = DEFAULT_INTERVAL_MINUTES) -> str:
    """Return the bucket key of ``record`` under ``granularity``."""
    day = record.date
    if granularity is Granularity.DAY:
        return day.isoformat()
    if granularity is Granularity.WEEK:
        return format_week_key(*iso_week_of(day))
    if granularity is Granularity.MONTH:
        return format_month_key(day.year, day.month)
    if granularity is Granularity.YEAR:
        return str(day.year)
    if granularity is Granularity.WEEKDAY:
        return WEEKDAYS_MONDAY_FIRST[weekday_monday_first(day.isoformat())]
    if granularity is Granularity.INTERVAL:
        minute_of_day = getattr(record, "minute_of_day", None)
        if minute_of_day is None:
            raise TypeError("Interval grouping requires intraday records with a slot time.")
        return format_slot((minute_of_day // interval_minutes) * interval_minutes)
    raise ValueError(f"Unsupported granularity: {granularity!r}")


def bucket_sort_key(key: str, granularity: Granularity) -> tuple[int, ...]:
    """Return a chronological sort key for a bucket key.

    Week keys compare by (week year, week) so ``2025-W9`` sorts before
    ``2025-W10`` even without zero padding.
    """
    try:
        if granularity is Granularity.DAY:
            return (parse_local_date(key).toordinal(),)
        if granularity is Granularity.WEEK:
            year, _, week = key.partition("-W")
            return (int(year), int(week))
        if granularity is Granularity.MONTH:
            year, _, month = key.partition("-")
            return (int(year), int(month))
        if granularity is Granularity.YEAR:
            return (int(key),)
        if granularity is Granularity.WEEKDAY:
            return (WEEKDAYS_MONDAY_FIRST.index(key),)
        if granularity is Granularity.INTERVAL:
            return (minutes_of(key),)
    except ValueError as exc:
        raise ValueError(f"Invalid {granularity.value} bucket key {key!r}.") from exc
    raise ValueError(f"Unsupported granularity: {granularity!r}")


def interval_slots(
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
    *,
    opening: str = DEFAULT_OPENING,
    closing: str = DEFAULT_CLOSING,
) -> list[str]:
    """Return every slot key from opening (floored to the interval) until closing."""
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be a positive integer.")
    first = (minutes_of(opening) // interval_minutes) * interval_minutes
    last = minutes_of(closing)
    return [format_slot(minute) for minute in range(first, last, interval_minutes)]


def _record_order(record: Any) -> tuple[int, int]:
    return (record.date.toordinal(), getattr(record, "minute_of_day", 0))


def group_by(
    records: Iterable[Any],
    granularity: Granularity | str,
    *,
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
    opening: str = DEFAULT_OPENING,
    closing: str = DEFAULT_CLOSING,
) -> dict[str, list[Any]]:
    """Map bucket keys to the records falling into them, in chronological key order.

    Weekday grouping always yields the seven weekdays and interval grouping
    always yields every slot between opening and closing; buckets without
    records are kept as empty lists.
    """
    granularity = Granularity(granularity)
    if granularity is Granularity.INTERVAL and interval_minutes <= 0:
        raise ValueError("interval_minutes must be a positive integer.")

    groups: dict[str, list[Any]] = defaultdict(list)
    if granularity is Granularity.WEEKDAY:
        for name in WEEKDAYS_MONDAY_FIRST:
            groups[name] = []
    elif granularity is Granularity.INTERVAL:
        for slot in interval_slots(interval_minutes, opening=opening, closing=closing):
            groups[slot] = []

    count = 0
    for record in records:
        key = bucket_key(record, granularity, interval_minutes=interval_minutes)
        groups[key].append(record)
        count += 1

    ordered = {
        key: sorted(members, key=_record_order)
        for key, members in sorted(groups.items(), key=lambda item: bucket_sort_key(item[0], granularity))
    }
    logger.debug("buckets.grouped", granularity=granularity.value, records=count, buckets=len(ordered))
    return ordered


@define(slots=True, frozen=True)
class Bucket:
    """A bucket key, its member records and the reduced value of the active metric."""

    key: str
    granularity: Granularity = field(converter=Granularity)
    records: tuple[Any, ...] = field(converter=tuple, factory=tuple)
    value: float = 0.0

    @property
    def span(self) -> DateSpan | None:
        """Return the dates covered by the member records (None when empty)."""
        return DateSpan.from_dates(record.date for record in self.records)

    @property
    def sort_key(self) -> tuple[int, ...]:
        return bucket_sort_key(self.key, self.granularity)

    @property
    def is_empty(self) -> bool:
        return not self.records


def sort_buckets(buckets: Sequence[Bucket]) -> list[Bucket]:
    """Return ``buckets`` in chronological order of their keys."""
    return sorted(buckets, key=lambda bucket: bucket.sort_key)


__all__ = [
    "Bucket",
    "DEFAULT_CLOSING",
    "DEFAULT_INTERVAL_MINUTES",
    "DEFAULT_OPENING",
    "Granularity",
    "bucket_key",
    "bucket_sort_key",
    "group_by",
    "interval_slots",
    "sort_buckets",
]
