"""Time-of-day profiles over intraday interval records."""

from collections.abc import Iterable

from ..data.models import IntervalRecord
from .buckets import DEFAULT_CLOSING, DEFAULT_INTERVAL_MINUTES, DEFAULT_OPENING, Bucket, Granularity, group_by
from .reduce import Metric, ReductionStrategy, reduce_buckets

# Volumes describe a typical day; order value pools every day's slot.
PROFILE_STRATEGIES = {
    Metric.ITEM_COUNT: ReductionStrategy.MEAN_OF_OCCURRENCES,
    Metric.REVENUE: ReductionStrategy.MEAN_OF_OCCURRENCES,
    Metric.ORDER_COUNT: ReductionStrategy.MEAN_OF_OCCURRENCES,
    Metric.AVG_ORDER_VALUE: ReductionStrategy.ADDITIVE,
}


def time_of_day_profile(
    intervals: Iterable[IntervalRecord],
    metric: Metric | str,
    *,
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
    opening: str = DEFAULT_OPENING,
    closing: str = DEFAULT_CLOSING,
) -> list[Bucket]:
    """Return one reduced bucket per time-of-day slot across all given days."""
    metric = Metric(metric)
    grouped = group_by(
        intervals,
        Granularity.INTERVAL,
        interval_minutes=interval_minutes,
        opening=opening,
        closing=closing,
    )
    return reduce_buckets(grouped, Granularity.INTERVAL, metric, PROFILE_STRATEGIES[metric])


__all__ = ["PROFILE_STRATEGIES", "time_of_day_profile"]
