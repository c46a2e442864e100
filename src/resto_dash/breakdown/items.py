"""Per-item breakdowns of daily orders across the menu catalog."""

import math
from collections.abc import Iterable, Sequence

import structlog
from attrs import define, evolve

from ..aggregate.charts import collect_records
from ..aggregate.reduce import Metric
from ..data.catalog import DEFAULT_CATALOG, ITEMS_PER_ORDER, MenuCatalog
from ..data.models import DailyMetric, IntervalRecord, minutes_of
from ..data.source import MetricSource
from ..timeline.dates import day_number, weekday_monday_first
from ..timeline.ranges import DateRange
from .palettes import palette_colors

logger = structlog.get_logger(__name__)

# Spreads consecutive units over the menu without clustering on one entry.
INDEX_STRIDE = 7.3


@define(slots=True, frozen=True)
class BreakdownRow:
    """Quantity and revenue of one menu item over a period."""

    name: str
    category: str
    qty: int
    revenue: float
    color: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "category": self.category,
            "qty": self.qty,
            "revenue": self.revenue,
            "color": self.color,
        }


def _ranking_field(metric: Metric | str) -> str:
    metric = Metric(metric)
    if metric is Metric.REVENUE:
        return "revenue"
    if metric in (Metric.ITEM_COUNT, Metric.ORDER_COUNT):
        return "qty"
    raise ValueError(f"Item breakdowns rank by revenue or quantity, not {metric.value!r}.")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def breakdown_by_category(
    records: Iterable[DailyMetric],
    metric: Metric | str,
    category: str,
    *,
    catalog: MenuCatalog = DEFAULT_CATALOG,
) -> list[BreakdownRow]:
    """Distribute each day's orders over the catalog and total them per item.

    Unit ``i`` of a day goes to entry ``floor((day_number + i) * 7.3) % n``,
    so the same range always yields the same totals. Items that sold nothing
    are left out; rows are ranked by ``metric``, highest first.
    """
    ranking = _ranking_field(metric)
    entries = catalog.list_catalog(category)
    if not entries:
        return []
    quantities = [0] * len(entries)
    revenues = [0.0] * len(entries)
    per_order = ITEMS_PER_ORDER[category]
    days = 0
    for record in records:
        days += 1
        offset = day_number(record.date)
        for unit in range(_round_half_up(record.order_count * per_order)):
            index = math.floor((offset + unit) * INDEX_STRIDE) % len(entries)
            bias = 0.95 + math.sin(offset + unit) * 0.1
            quantity = max(1, _round_half_up(bias))
            quantities[index] += quantity
            revenues[index] += entries[index].price * quantity

    rows = [
        BreakdownRow(name=entry.name, category=category, qty=qty, revenue=round(revenue, 2))
        for entry, qty, revenue in zip(entries, quantities, revenues)
        if qty > 0 or revenue > 0
    ]
    rows.sort(key=lambda row: getattr(row, ranking), reverse=True)
    logger.debug("breakdown.category_totals", category=category, days=days, items=len(rows))
    return rows


def breakdown_for_range(
    source: MetricSource,
    date_range: DateRange,
    metric: Metric | str,
    category: str,
    *,
    catalog: MenuCatalog = DEFAULT_CATALOG,
) -> list[BreakdownRow]:
    """Fetch ``date_range`` from ``source`` and break it down by item."""
    return breakdown_by_category(collect_records(source, date_range), metric, category, catalog=catalog)


def assign_palette(rows: Sequence[BreakdownRow], period: str) -> list[BreakdownRow]:
    """Attach the period's palette colours to ``rows`` in order."""
    colors = palette_colors(len(rows), period)
    return [evolve(row, color=color) for row, color in zip(rows, colors)]


def share_of_total(rows: Sequence[BreakdownRow], metric: Metric | str) -> dict[str, float]:
    """Return each item's percentage of the period total."""
    ranking = _ranking_field(metric)
    total = sum(getattr(row, ranking) for row in rows)
    if total <= 0:
        return {row.name: 0.0 for row in rows}
    return {row.name: getattr(row, ranking) / total * 100 for row in rows}


def top_items(
    rows: Sequence[BreakdownRow],
    metric: Metric | str,
    *,
    direction: str = "most",
    limit: int = 5,
) -> list[BreakdownRow]:
    """Return the best (``most``) or worst (``least``) selling items."""
    if direction not in ("most", "least"):
        raise ValueError(f"direction must be 'most' or 'least', got {direction!r}.")
    if limit < 0:
        raise ValueError("limit must be non-negative.")
    ranking = _ranking_field(metric)
    ordered = sorted(rows, key=lambda row: getattr(row, ranking), reverse=direction == "most")
    return ordered[:limit]


def items_sold(
    intervals: Iterable[IntervalRecord],
    *,
    time_start: str | None = None,
    time_end: str | None = None,
    weekday: int | None = None,
) -> list[BreakdownRow]:
    """Total the item lines of intraday records, for chart drill-downs.

    ``time_start``/``time_end`` form a half-open ``[start, end)`` window on
    the slot time; ``weekday`` (Monday=0) keeps only that day of the week.
    """
    if weekday is not None and not 0 <= weekday <= 6:
        raise ValueError("weekday must lie in 0..6 (Monday=0).")
    start = minutes_of(time_start) if time_start is not None else None
    end = minutes_of(time_end) if time_end is not None else None
    totals: dict[tuple[str, str], list[float]] = {}
    for interval in intervals:
        if start is not None and interval.minute_of_day < start:
            continue
        if end is not None and interval.minute_of_day >= end:
            continue
        if weekday is not None and weekday_monday_first(interval.date.isoformat()) != weekday:
            continue
        for item in interval.items:
            entry = totals.setdefault((item.name, item.category), [0, 0.0])
            entry[0] += item.qty
            entry[1] += item.revenue
    rows = [
        BreakdownRow(name=name, category=category, qty=int(qty), revenue=round(revenue, 2))
        for (name, category), (qty, revenue) in totals.items()
    ]
    rows.sort(key=lambda row: row.qty, reverse=True)
    return rows


__all__ = [
    "BreakdownRow",
    "assign_palette",
    "breakdown_by_category",
    "breakdown_for_range",
    "items_sold",
    "share_of_total",
    "top_items",
]
