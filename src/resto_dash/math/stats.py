"""Period level summaries and period-over-period changes."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

import numpy as np

from ..data.models import DailyMetric
from .utils import safe_ratio, to_numpy


@dataclass(frozen=True)
class PeriodSummary:
    """Headline figures of one selected period."""

    days: int
    revenue: float
    orders: int
    items: float
    avg_items_per_order: float
    avg_order_value: float
    mean_daily_revenue: float
    median_daily_revenue: float
    std_daily_revenue: float
    busiest_day: date | None

    def to_dict(self) -> dict[str, object]:
        return {
            "days": self.days,
            "revenue": self.revenue,
            "orders": self.orders,
            "items": self.items,
            "avg_items_per_order": self.avg_items_per_order,
            "avg_order_value": self.avg_order_value,
            "mean_daily_revenue": self.mean_daily_revenue,
            "median_daily_revenue": self.median_daily_revenue,
            "std_daily_revenue": self.std_daily_revenue,
            "busiest_day": self.busiest_day.isoformat() if self.busiest_day else None,
        }


EMPTY_SUMMARY = PeriodSummary(
    days=0,
    revenue=0.0,
    orders=0,
    items=0.0,
    avg_items_per_order=0.0,
    avg_order_value=0.0,
    mean_daily_revenue=0.0,
    median_daily_revenue=0.0,
    std_daily_revenue=0.0,
    busiest_day=None,
)


def summarize_period(records: Iterable[DailyMetric]) -> PeriodSummary:
    """Total a period and derive its ratios from the totals.

    Items per order and order value are ratios of sums, so a quiet day weighs
    in proportion to its orders rather than counting as much as a busy one.
    """
    rows = list(records)
    if not rows:
        return EMPTY_SUMMARY
    revenue = to_numpy(record.revenue for record in rows)
    orders = to_numpy(record.order_count for record in rows)
    items = to_numpy(record.item_count for record in rows)
    total_revenue = float(revenue.sum())
    total_orders = float(orders.sum())
    total_items = float(items.sum())
    return PeriodSummary(
        days=len(rows),
        revenue=total_revenue,
        orders=int(total_orders),
        items=total_items,
        avg_items_per_order=safe_ratio(total_items, total_orders),
        avg_order_value=safe_ratio(total_revenue, total_orders),
        mean_daily_revenue=float(np.mean(revenue)),
        median_daily_revenue=float(np.median(revenue)),
        std_daily_revenue=float(np.std(revenue)),
        busiest_day=rows[int(np.argmax(revenue))].date,
    )


@dataclass(frozen=True)
class ChangeIndicator:
    """Magnitude and direction of period B relative to period A."""

    percentage: float
    trend: str

    @property
    def signed(self) -> float:
        if self.trend == "down":
            return -self.percentage
        return self.percentage


NEUTRAL = ChangeIndicator(percentage=0.0, trend="neutral")


def percent_change(value_a: float, value_b: float) -> ChangeIndicator:
    """Return the absolute percentage change from ``value_a`` to ``value_b``."""
    if value_a == 0 or value_b == 0:
        return NEUTRAL
    change = (value_b - value_a) / value_a * 100
    if change > 0:
        trend = "up"
    elif change < 0:
        trend = "down"
    else:
        trend = "neutral"
    return ChangeIndicator(percentage=abs(change), trend=trend)


def compare_summaries(a: PeriodSummary, b: PeriodSummary) -> dict[str, ChangeIndicator]:
    """Change indicators for the four headline figures."""
    return {
        "revenue": percent_change(a.revenue, b.revenue),
        "orders": percent_change(a.orders, b.orders),
        "avg_items_per_order": percent_change(a.avg_items_per_order, b.avg_items_per_order),
        "avg_order_value": percent_change(a.avg_order_value, b.avg_order_value),
    }


__all__ = [
    "ChangeIndicator",
    "EMPTY_SUMMARY",
    "PeriodSummary",
    "compare_summaries",
    "percent_change",
    "summarize_period",
]
