"""Chart presets binding granularity, reduction strategy and alignment policy."""

from enum import Enum

import structlog
from attrs import converters, define, field

from ..data.models import DailyMetric, IntervalRecord
from ..data.source import MetricSource
from ..timeline.ranges import DateRange, iter_dates
from .align import AlignmentPolicy, ComparisonRow, TruncationNotice, align, truncation_notice
from .buckets import DEFAULT_INTERVAL_MINUTES, Bucket, Granularity, group_by
from .reduce import Metric, ReductionStrategy, reduce_buckets
from .timeofday import time_of_day_profile

logger = structlog.get_logger(__name__)


class ChartKind(str, Enum):
    """Comparison charts offered by the dashboard."""

    DYNAMIC_AGGREGATED = "dynamic"
    PERIOD_BUCKETS = "buckets"
    WEEKDAY = "weekday"
    TIME_OF_DAY = "time-of-day"


@define(frozen=True)
class ChartSpec:
    """Fixed aggregation settings of one chart kind."""

    kind: ChartKind
    granularities: tuple[Granularity, ...]
    policy: AlignmentPolicy
    strategy: ReductionStrategy | None
    default_granularity: Granularity

    def resolve_granularity(self, granularity: Granularity | str | None) -> Granularity:
        """Return the requested granularity or the default, rejecting unsupported ones."""
        if granularity is None:
            return self.default_granularity
        resolved = Granularity(granularity)
        if resolved not in self.granularities:
            allowed = ", ".join(g.value for g in self.granularities)
            raise ValueError(
                f"The {self.kind.value} chart does not support {resolved.value!r}; use one of: {allowed}."
            )
        return resolved


CHART_SPECS: dict[ChartKind, ChartSpec] = {
    ChartKind.DYNAMIC_AGGREGATED: ChartSpec(
        kind=ChartKind.DYNAMIC_AGGREGATED,
        granularities=(Granularity.DAY, Granularity.WEEK, Granularity.MONTH, Granularity.YEAR),
        policy=AlignmentPolicy.UNION,
        strategy=ReductionStrategy.ADDITIVE,
        default_granularity=Granularity.MONTH,
    ),
    ChartKind.PERIOD_BUCKETS: ChartSpec(
        kind=ChartKind.PERIOD_BUCKETS,
        granularities=(Granularity.DAY, Granularity.WEEK, Granularity.MONTH),
        policy=AlignmentPolicy.POSITIONAL_TRUNCATE,
        strategy=ReductionStrategy.ADDITIVE,
        default_granularity=Granularity.DAY,
    ),
    ChartKind.WEEKDAY: ChartSpec(
        kind=ChartKind.WEEKDAY,
        granularities=(Granularity.WEEKDAY,),
        policy=AlignmentPolicy.UNION,
        strategy=ReductionStrategy.MEAN_OF_OCCURRENCES,
        default_granularity=Granularity.WEEKDAY,
    ),
    # Strategy depends on the metric, see timeofday.PROFILE_STRATEGIES.
    ChartKind.TIME_OF_DAY: ChartSpec(
        kind=ChartKind.TIME_OF_DAY,
        granularities=(Granularity.INTERVAL,),
        policy=AlignmentPolicy.UNION,
        strategy=None,
        default_granularity=Granularity.INTERVAL,
    ),
}


def chart_spec(kind: ChartKind | str) -> ChartSpec:
    return CHART_SPECS[ChartKind(kind)]


@define(slots=True, frozen=True)
class Comparison:
    """Result of comparing two periods on one chart."""

    kind: ChartKind
    metric: Metric
    granularity: Granularity
    rows: tuple[ComparisonRow, ...] = field(converter=tuple)
    buckets_a: tuple[Bucket, ...] = field(converter=tuple)
    buckets_b: tuple[Bucket, ...] | None = field(default=None, converter=converters.optional(tuple))
    notice: TruncationNotice | None = None


def collect_records(source: MetricSource, date_range: DateRange) -> list[DailyMetric]:
    """Expand ``date_range`` and return the records the source holds, in date order."""
    by_day = {
        record.date: record
        for record in source.get_records_for_range(date_range.start, date_range.end)
    }
    return [by_day[day] for day in iter_dates(date_range.start, date_range.end) if day in by_day]


def collect_intervals(source: MetricSource, date_range: DateRange) -> list[IntervalRecord]:
    """Return every intraday record of the days in ``date_range``."""
    intervals: list[IntervalRecord] = []
    for record in collect_records(source, date_range):
        intervals.extend(source.get_intervals_for_date(record.date))
    return intervals


def _period_buckets(
    source: MetricSource,
    spec: ChartSpec,
    date_range: DateRange,
    granularity: Granularity,
    metric: Metric,
    interval_minutes: int,
) -> list[Bucket]:
    if spec.kind is ChartKind.TIME_OF_DAY:
        return time_of_day_profile(
            collect_intervals(source, date_range), metric, interval_minutes=interval_minutes
        )
    records = collect_records(source, date_range)
    grouped = group_by(records, granularity)
    return reduce_buckets(grouped, granularity, metric, spec.strategy)


def compare_periods(
    source: MetricSource,
    kind: ChartKind | str,
    period_a: DateRange,
    period_b: DateRange | None,
    metric: Metric | str,
    *,
    granularity: Granularity | str | None = None,
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
) -> Comparison:
    """Run range expansion, grouping, reduction and alignment for one chart."""
    spec = chart_spec(kind)
    metric = Metric(metric)
    resolved = spec.resolve_granularity(granularity)
    log = logger.bind(chart=spec.kind.value, granularity=resolved.value, metric=metric.value)
    log.debug("compare.start", period_a=str(period_a), period_b=str(period_b) if period_b else None)

    buckets_a = _period_buckets(source, spec, period_a, resolved, metric, interval_minutes)
    buckets_b = (
        _period_buckets(source, spec, period_b, resolved, metric, interval_minutes)
        if period_b is not None
        else None
    )
    rows = align(buckets_a, buckets_b, spec.policy)
    notice = None
    if spec.policy is AlignmentPolicy.POSITIONAL_TRUNCATE:
        notice = truncation_notice(buckets_a, buckets_b)
    log.debug("compare.complete", rows=len(rows), truncated=notice is not None)
    return Comparison(
        kind=spec.kind,
        metric=metric,
        granularity=resolved,
        rows=rows,
        buckets_a=buckets_a,
        buckets_b=buckets_b,
        notice=notice,
    )


__all__ = [
    "CHART_SPECS",
    "ChartKind",
    "ChartSpec",
    "Comparison",
    "chart_spec",
    "collect_intervals",
    "collect_records",
    "compare_periods",
]
