"""Bucketing, reduction and dual-period alignment of restaurant metrics."""

from .align import AlignmentPolicy, ComparisonRow, TruncationNotice, align, truncation_notice
from .buckets import Bucket, Granularity, bucket_sort_key, group_by, interval_slots
from .charts import ChartKind, Comparison, chart_spec, collect_records, compare_periods
from .reduce import Metric, ReductionStrategy, reduce, reduce_buckets
from .timeofday import time_of_day_profile

__all__ = [
    "AlignmentPolicy",
    "Bucket",
    "ChartKind",
    "Comparison",
    "ComparisonRow",
    "Granularity",
    "Metric",
    "ReductionStrategy",
    "TruncationNotice",
    "align",
    "bucket_sort_key",
    "chart_spec",
    "collect_records",
    "compare_periods",
    "group_by",
    "interval_slots",
    "reduce",
    "reduce_buckets",
    "time_of_day_profile",
    "truncation_notice",
]
