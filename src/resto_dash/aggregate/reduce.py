"""Reduce bucket members to a single value for a metric."""

from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from enum import Enum
from typing import Any

from ..math.utils import safe_ratio
from .buckets import Bucket, Granularity


class Metric(str, Enum):
    """Metrics a bucket can be reduced to."""

    REVENUE = "revenue"
    ORDER_COUNT = "orders"
    AVG_ORDER_VALUE = "avg_order_value"
    ITEM_COUNT = "items"


class ReductionStrategy(str, Enum):
    """How bucket members combine.

    ``ADDITIVE`` sums the members (ratio metrics become a ratio of sums).
    ``MEAN_OF_OCCURRENCES`` averages one value per calendar date, answering
    "what does a typical day in this bucket look like".
    """

    ADDITIVE = "additive"
    MEAN_OF_OCCURRENCES = "mean_of_occurrences"


def _totals(records: Iterable[Any]) -> tuple[float, float, float]:
    """Return summed revenue, orders and items over ``records``."""
    revenue = 0.0
    orders = 0.0
    items = 0.0
    for record in records:
        revenue += record.revenue
        orders += record.order_count
        items += record.item_count
    return revenue, orders, items


def _additive(records: Sequence[Any], metric: Metric) -> float:
    revenue, orders, items = _totals(records)
    if metric is Metric.REVENUE:
        return revenue
    if metric is Metric.ORDER_COUNT:
        return orders
    if metric is Metric.ITEM_COUNT:
        return items
    if metric is Metric.AVG_ORDER_VALUE:
        # Ratio of sums; the stored per-day order value is never trusted.
        return safe_ratio(revenue, orders)
    raise ValueError(f"Unsupported metric: {metric!r}")


def _occurrences(records: Iterable[Any]) -> dict[date, list[Any]]:
    grouped: dict[date, list[Any]] = defaultdict(list)
    for record in records:
        grouped[record.date].append(record)
    return grouped


def _mean_of_occurrences(records: Sequence[Any], metric: Metric) -> float:
    occurrences = _occurrences(records)
    if not occurrences:
        return 0.0
    values = [_additive(members, metric) for members in occurrences.values()]
    return sum(values) / len(values)


def reduce(
    records: Sequence[Any],
    metric: Metric | str,
    strategy: ReductionStrategy | str,
) -> float:
    """Reduce bucket ``records`` to one value of ``metric``.

    The strategy is required: additive buckets (calendar periods) and
    mean-of-occurrences buckets (weekday profiles) answer different questions.
    An empty bucket reduces to 0 under both strategies.
    """
    metric = Metric(metric)
    strategy = ReductionStrategy(strategy)
    if not records:
        return 0.0
    if strategy is ReductionStrategy.ADDITIVE:
        return float(_additive(records, metric))
    if strategy is ReductionStrategy.MEAN_OF_OCCURRENCES:
        return float(_mean_of_occurrences(records, metric))
    raise ValueError(f"Unsupported reduction strategy: {strategy!r}")


def reduce_buckets(
    grouped: Mapping[str, Sequence[Any]],
    granularity: Granularity | str,
    metric: Metric | str,
    strategy: ReductionStrategy | str,
) -> list[Bucket]:
    """Turn a ``group_by`` mapping into reduced :class:`Bucket` objects."""
    return [
        Bucket(
            key=key,
            granularity=granularity,
            records=members,
            value=reduce(members, metric, strategy),
        )
        for key, members in grouped.items()
    ]


__all__ = ["Metric", "ReductionStrategy", "reduce", "reduce_buckets"]
