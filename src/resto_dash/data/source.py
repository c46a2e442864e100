"""Daily-metric sources consumed by the aggregation engine."""

import math
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Protocol

import numpy as np
import structlog
from attrs import define, field

from ..timeline.dates import (
    day_of_year,
    day_number,
    days_in_month,
    parse_local_date,
    weekday_monday_first,
)
from .catalog import DEFAULT_CATALOG, MenuCatalog
from .models import DailyMetric, IntervalRecord, OrderItem, format_slot

logger = structlog.get_logger(__name__)

DEFAULT_YEARS = (2023, 2024, 2025)
BASE_INTERVAL_MINUTES = 15
OPENING_MINUTE = 9 * 60
FIRST_ORDER_MINUTE = 10 * 60
CLOSING_MINUTE = 24 * 60


class MetricSource(Protocol):
    """Read-only provider of daily and intraday restaurant records."""

    def get_records_for_range(self, start: date, end: date) -> list[DailyMetric]:
        ...

    def get_intervals_for_date(self, day: date) -> list[IntervalRecord]:
        ...


def _round_half_up(value: float) -> int:
    """Round half away from zero for non-negative values."""
    return int(math.floor(value + 0.5))


@define(slots=True)
class IntervalCache:
    """Memoized intraday series keyed by ``(date, interval_minutes)``."""

    _entries: dict[tuple[date, int], tuple[IntervalRecord, ...]] = field(factory=dict)
    hits: int = field(default=0, init=False)
    misses: int = field(default=0, init=False)

    def get(self, day: date, interval_minutes: int) -> tuple[IntervalRecord, ...] | None:
        entry = self._entries.get((day, interval_minutes))
        if entry is None:
            self.misses += 1
        else:
            self.hits += 1
        return entry

    def put(self, day: date, interval_minutes: int, records: Iterable[IntervalRecord]) -> None:
        self._entries[(day, interval_minutes)] = tuple(records)

    def invalidate(self) -> None:
        """Drop every cached series."""
        if self._entries:
            logger.debug("cache.invalidated", entries=len(self._entries))
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def _index_records(records: Iterable[DailyMetric]) -> dict[date, DailyMetric]:
    """Index records by date, keeping the first record seen for each day."""
    index: dict[date, DailyMetric] = {}
    for record in records:
        if record.date in index:
            continue
        index[record.date] = record
    return dict(sorted(index.items()))


def _select_range(index: dict[date, DailyMetric], start: date | str, end: date | str) -> list[DailyMetric]:
    first = parse_local_date(start)
    last = parse_local_date(end)
    return [record for day, record in index.items() if first <= day <= last]


@define(slots=True)
class InMemoryMetricSource:
    """Serve records held in memory, e.g. loaded from a file."""

    records: Sequence[DailyMetric] = field(factory=list)
    intervals: dict[date, list[IntervalRecord]] = field(factory=dict)
    _index: dict[date, DailyMetric] = field(factory=dict, init=False, repr=False)

    def __attrs_post_init__(self) -> None:
        """Build the per-date index, dropping duplicate days."""
        self._index = _index_records(self.records)
        if len(self._index) != len(self.records):
            logger.warning(
                "source.duplicate_days_dropped",
                dropped=len(self.records) - len(self._index),
            )

    def get_records_for_range(self, start: date | str, end: date | str) -> list[DailyMetric]:
        """Return the records between ``start`` and ``end`` inclusive, in date order."""
        return _select_range(self._index, start, end)

    def get_intervals_for_date(self, day: date) -> list[IntervalRecord]:
        return list(self.intervals.get(parse_local_date(day), ()))

    @property
    def coverage(self) -> tuple[date, date] | None:
        if not self._index:
            return None
        days = list(self._index)
        return days[0], days[-1]


def generate_daily_metrics(year: int) -> list[DailyMetric]:
    """Build one deterministic record per day of ``year``."""
    records: list[DailyMetric] = []
    ordinal = 0
    for month in range(1, 13):
        for day in range(1, days_in_month(year, month) + 1):
            ordinal += 1
            weekend = weekday_monday_first(f"{year:04d}-{month:02d}-{day:02d}") >= 5
            weekend_multiplier = 1.3 if weekend else 1.0
            seasonal_boost = 1.15 if 5 <= month <= 8 else 1.0
            week_cycle = math.sin((ordinal / 7) * math.pi) * 0.1 + 1.0

            base_orders = 100 + (ordinal % 50)
            orders = _round_half_up(base_orders * weekend_multiplier * seasonal_boost * week_cycle)
            avg_items = 2 + (ordinal % 3) * 0.5

            # Order value drifts independently of volume.
            base_value = 20 + month * 2
            daily_variation = math.sin((ordinal * 7) / 365 * math.pi * 2) * 3
            order_value = base_value + daily_variation + (5 if weekend else 0)

            records.append(
                DailyMetric(
                    date=date(year, month, day),
                    revenue=_round_half_up(orders * order_value),
                    order_count=orders,
                    avg_items_per_order=avg_items,
                    avg_order_value=round(order_value, 2),
                )
            )
    return records


def _demand_multiplier(hour: int, rng: np.random.Generator) -> float:
    """Return the share of peak demand for a slot starting at ``hour``."""
    if hour < 12:
        return 0.05 + rng.random() * 0.1
    if hour < 13:
        return 0.8 + rng.random() * 0.4
    if hour < 17:
        return 0.4 + rng.random() * 0.2
    if hour < 20:
        return 1.35 * (0.75 + rng.random() * 0.5)
    if hour < 22:
        return 0.6 * ((22 - hour) / 2) + rng.random() * 0.1
    return 0.05 + rng.random() * 0.05


def generate_intervals(
    day: date,
    catalog: MenuCatalog,
    *,
    interval_minutes: int = BASE_INTERVAL_MINUTES,
) -> list[IntervalRecord]:
    """Build the intraday series of ``day`` from opening until midnight.

    Variation is drawn from a generator seeded by the day number, so the same
    day always produces the same series.
    """
    rng = np.random.default_rng(day_number(day))
    ordinal = day_of_year(day)
    weekend = day.weekday() >= 5
    dishes = catalog.list_catalog("dish")
    drinks = catalog.list_catalog("drink")
    intervals: list[IntervalRecord] = []
    for minute_of_day in range(OPENING_MINUTE, CLOSING_MINUTE, interval_minutes):
        slot = format_slot(minute_of_day)
        if minute_of_day < FIRST_ORDER_MINUTE:
            intervals.append(IntervalRecord(date=day, time=slot, order_count=0, revenue=0.0))
            continue
        hour, minute = divmod(minute_of_day, 60)
        variation = 0.9 + rng.random() * 0.2
        period_bias = 0.9 if ordinal % 7 < 3 else 1.1
        multiplier = _demand_multiplier(hour, rng)
        base_orders = 8 + (ordinal % 4)
        weekend_boost = 1.25 if weekend else 1.0
        orders = max(0, _round_half_up(base_orders * multiplier * weekend_boost * variation * period_bias))

        items: list[OrderItem] = []
        for i in range(orders):
            seed = ordinal + hour + minute + i
            for d in range(1 + seed % 3):
                entry = dishes[(seed + d) % len(dishes)]
                items.append(OrderItem(name=entry.name, category="dish", price=entry.price))
            for d in range((seed + 1) % 3):
                entry = drinks[(seed + d) % len(drinks)]
                items.append(OrderItem(name=entry.name, category="drink", price=entry.price))
        revenue = round(sum(item.revenue for item in items), 2)
        intervals.append(
            IntervalRecord(date=day, time=slot, order_count=orders, revenue=revenue, items=items)
        )
    return intervals


@define(slots=True)
class SyntheticMetricSource:
    """Deterministic restaurant dataset covering whole calendar years."""

    years: tuple[int, ...] = field(default=DEFAULT_YEARS, converter=tuple)
    catalog: MenuCatalog = DEFAULT_CATALOG
    cache: IntervalCache = field(factory=IntervalCache)
    interval_minutes: int = BASE_INTERVAL_MINUTES
    _index: dict[date, DailyMetric] = field(factory=dict, init=False, repr=False)

    def __attrs_post_init__(self) -> None:
        """Generate the daily records for every configured year."""
        records: list[DailyMetric] = []
        for year in self.years:
            records.extend(generate_daily_metrics(year))
        self._index = _index_records(records)
        logger.debug("source.synthetic_generated", years=list(self.years), days=len(self._index))

    def get_records_for_range(self, start: date | str, end: date | str) -> list[DailyMetric]:
        """Return the records between ``start`` and ``end`` inclusive, in date order."""
        return _select_range(self._index, start, end)

    def get_intervals_for_date(self, day: date | str) -> list[IntervalRecord]:
        """Return the cached intraday series of ``day`` (empty outside coverage)."""
        day = parse_local_date(day)
        cached = self.cache.get(day, self.interval_minutes)
        if cached is not None:
            return list(cached)
        if day in self._index:
            series = generate_intervals(day, self.catalog, interval_minutes=self.interval_minutes)
        else:
            series = []
        self.cache.put(day, self.interval_minutes, series)
        return series

    def replace_records(self, records: Iterable[DailyMetric]) -> None:
        """Swap the daily dataset and drop every derived intraday series."""
        self._index = _index_records(records)
        self.cache.invalidate()

    @property
    def records(self) -> list[DailyMetric]:
        return list(self._index.values())


__all__ = [
    "BASE_INTERVAL_MINUTES",
    "DEFAULT_YEARS",
    "InMemoryMetricSource",
    "IntervalCache",
    "MetricSource",
    "SyntheticMetricSource",
    "generate_daily_metrics",
    "generate_intervals",
]
