"""Align Period A and Period B buckets into comparison rows."""

from collections.abc import Sequence
from enum import Enum

import structlog
from attrs import define

from ..timeline.ranges import DateSpan
from .buckets import Bucket, bucket_sort_key, sort_buckets

logger = structlog.get_logger(__name__)


class AlignmentPolicy(str, Enum):
    """How the two periods' bucket sequences are paired.

    ``UNION`` matches buckets by calendar key; ``POSITIONAL_TRUNCATE`` pairs
    them by index (day 3 of A against day 3 of B) and stops at the shorter
    sequence.
    """

    UNION = "union"
    POSITIONAL_TRUNCATE = "positional_truncate"


@define(slots=True, frozen=True)
class ComparisonRow:
    """One chart row; ``None`` values mean the period has no bar here."""

    label: str
    value_a: float | None
    value_b: float | None
    span_a: DateSpan | None = None
    span_b: DateSpan | None = None
    label_b: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Return a flat, JSON-friendly representation."""
        return {
            "label": self.label,
            "value_a": self.value_a,
            "value_b": self.value_b,
            "span_a": self.span_a.label if self.span_a else None,
            "span_b": self.span_b.label if self.span_b else None,
            "label_b": self.label_b,
        }


@define(slots=True, frozen=True)
class TruncationNotice:
    """Buckets left out by positional truncation."""

    side: str
    dropped: tuple[str, ...]

    @property
    def message(self) -> str:
        keys = ", ".join(self.dropped)
        return f"{keys} excluded: period {self.side} is longer"


def truncation_notice(
    buckets_a: Sequence[Bucket],
    buckets_b: Sequence[Bucket] | None,
) -> TruncationNotice | None:
    """Describe what positional truncation drops, or None when nothing is lost."""
    if not buckets_b:
        return None
    ordered_a = sort_buckets(buckets_a)
    ordered_b = sort_buckets(buckets_b)
    if len(ordered_a) > len(ordered_b):
        return TruncationNotice("A", tuple(b.key for b in ordered_a[len(ordered_b) :]))
    if len(ordered_b) > len(ordered_a):
        return TruncationNotice("B", tuple(b.key for b in ordered_b[len(ordered_a) :]))
    return None


def _union(buckets_a: Sequence[Bucket], buckets_b: Sequence[Bucket]) -> list[ComparisonRow]:
    by_key_a = {bucket.key: bucket for bucket in buckets_a}
    by_key_b = {bucket.key: bucket for bucket in buckets_b}
    granularities = {bucket.granularity for bucket in (*buckets_a, *buckets_b)}
    if len(granularities) > 1:
        raise ValueError("Cannot align buckets of different granularities.")
    if not granularities:
        return []
    granularity = granularities.pop()
    keys = sorted(by_key_a.keys() | by_key_b.keys(), key=lambda key: bucket_sort_key(key, granularity))
    rows: list[ComparisonRow] = []
    for key in keys:
        bucket_a = by_key_a.get(key)
        bucket_b = by_key_b.get(key)
        rows.append(
            ComparisonRow(
                label=key,
                value_a=bucket_a.value if bucket_a else None,
                value_b=bucket_b.value if bucket_b else None,
                span_a=bucket_a.span if bucket_a else None,
                span_b=bucket_b.span if bucket_b else None,
                label_b=key if bucket_b else None,
            )
        )
    return rows


def _positional(buckets_a: Sequence[Bucket], buckets_b: Sequence[Bucket] | None) -> list[ComparisonRow]:
    ordered_a = sort_buckets(buckets_a)
    ordered_b = sort_buckets(buckets_b or [])
    if not ordered_b:
        # Single-period mode: every A bucket, no B bars.
        return [
            ComparisonRow(label=bucket.key, value_a=bucket.value, value_b=None, span_a=bucket.span)
            for bucket in ordered_a
        ]
    notice = truncation_notice(ordered_a, ordered_b)
    if notice is not None:
        logger.warning(
            "align.positional_truncated",
            side=notice.side,
            dropped=list(notice.dropped),
        )
    return [
        ComparisonRow(
            label=bucket_a.key,
            value_a=bucket_a.value,
            value_b=bucket_b.value,
            span_a=bucket_a.span,
            span_b=bucket_b.span,
            label_b=bucket_b.key,
        )
        for bucket_a, bucket_b in zip(ordered_a, ordered_b)
    ]


def align(
    buckets_a: Sequence[Bucket],
    buckets_b: Sequence[Bucket] | None,
    policy: AlignmentPolicy | str,
) -> list[ComparisonRow]:
    """Combine both periods' buckets into chronologically ordered rows."""
    policy = AlignmentPolicy(policy)
    if policy is AlignmentPolicy.UNION:
        rows = _union(buckets_a, buckets_b or [])
    elif policy is AlignmentPolicy.POSITIONAL_TRUNCATE:
        rows = _positional(buckets_a, buckets_b)
    else:  # pragma: no cover - exhaustive enum
        raise ValueError(f"Unsupported alignment policy: {policy!r}")
    logger.debug("align.rows_built", policy=policy.value, rows=len(rows))
    return rows


__all__ = [
    "AlignmentPolicy",
    "ComparisonRow",
    "TruncationNotice",
    "align",
    "truncation_notice",
]
