"""Unit tests for dual-period alignment."""

import pytest

from resto_dash.aggregate import AlignmentPolicy, Bucket, ChartKind, align, compare_periods, truncation_notice
from resto_dash.data.source import InMemoryMetricSource
from resto_dash.timeline import DateRange
from tests.conftest import make_days


def _buckets(keys, granularity="day", start=1.0):
    return [Bucket(key=key, granularity=granularity, value=start + index) for index, key in enumerate(keys)]


def test_positional_truncation_example(memory_source):
    comparison = compare_periods(
        memory_source,
        ChartKind.PERIOD_BUCKETS,
        DateRange.parse("2025-09-02..2025-09-03"),
        DateRange.parse("2025-09-09..2025-09-11"),
        "revenue",
        granularity="day",
    )
    assert [row.label for row in comparison.rows] == ["2025-09-02", "2025-09-03"]
    assert [row.label_b for row in comparison.rows] == ["2025-09-09", "2025-09-10"]
    assert [row.value_a for row in comparison.rows] == [1100.0, 1200.0]
    assert [row.value_b for row in comparison.rows] == [1800.0, 1900.0]
    assert comparison.notice is not None
    assert comparison.notice.side == "B"
    assert comparison.notice.dropped == ("2025-09-11",)
    assert "2025-09-11 excluded" in comparison.notice.message


def test_positional_truncation_logs_warning(mocker):
    warning = mocker.patch("resto_dash.aggregate.align.logger.warning")
    rows = align(_buckets(["2025-09-01", "2025-09-02", "2025-09-03"]), _buckets(["2025-10-01"]), "positional_truncate")
    assert len(rows) == 1
    warning.assert_called_once()
    assert warning.call_args.kwargs["side"] == "A"


def test_positional_single_period_mode():
    rows = align(_buckets(["2025-09-02", "2025-09-01"]), None, AlignmentPolicy.POSITIONAL_TRUNCATE)
    assert [row.label for row in rows] == ["2025-09-01", "2025-09-02"]
    assert all(row.value_b is None for row in rows)


def test_positional_falls_back_when_period_b_is_empty(memory_source):
    comparison = compare_periods(
        memory_source,
        "buckets",
        DateRange.parse("2025-09-01..2025-09-03"),
        DateRange.parse("2026-01-01..2026-01-05"),
        "orders",
    )
    assert len(comparison.rows) == 3
    assert all(row.value_b is None for row in comparison.rows)
    assert comparison.notice is None


def test_union_example_partial_month_against_full_month():
    source = InMemoryMetricSource(make_days("2025-10-01", 61, revenue=1000.0, orders=40))
    comparison = compare_periods(
        source,
        ChartKind.DYNAMIC_AGGREGATED,
        DateRange.parse("2025-10-05..2025-10-20"),
        DateRange.parse("2025-11-01..2025-11-30"),
        "revenue",
        granularity="month",
    )
    assert [row.label for row in comparison.rows] == ["2025-10", "2025-11"]
    october, november = comparison.rows
    assert october.value_a == pytest.approx(16000.0)
    assert october.value_b is None
    assert november.value_a is None
    assert november.value_b == pytest.approx(30000.0)
    assert october.span_a.label == "5-10-2025 - 20-10-2025"


def test_union_overlapping_days():
    rows = align(
        _buckets(["2025-09-01", "2025-09-02", "2025-09-03"]),
        _buckets(["2025-09-02", "2025-09-03", "2025-09-04"], start=10.0),
        AlignmentPolicy.UNION,
    )
    assert [row.label for row in rows] == ["2025-09-01", "2025-09-02", "2025-09-03", "2025-09-04"]
    assert rows[0].value_b is None
    assert rows[1].value_a == 2.0 and rows[1].value_b == 10.0
    assert rows[3].value_a is None


def test_union_rejects_mixed_granularities():
    with pytest.raises(ValueError):
        align(_buckets(["2025-09"], granularity="month"), _buckets(["2025-09-01"]), "union")


def test_union_of_nothing():
    assert align([], None, "union") == []


def test_truncation_notice_none_when_equal():
    assert truncation_notice(_buckets(["2025-09-01"]), _buckets(["2025-10-01"])) is None
    assert truncation_notice(_buckets(["2025-09-01"]), None) is None


def test_row_to_dict():
    rows = align(_buckets(["2025-09-01"]), None, "union")
    assert rows[0].to_dict() == {
        "label": "2025-09-01",
        "value_a": 1.0,
        "value_b": None,
        "span_a": None,
        "span_b": None,
        "label_b": None,
    }
