"""Unit tests for metric reduction."""

import importlib

import pytest

from resto_dash.aggregate.buckets import Granularity, group_by
from resto_dash.aggregate.reduce import Metric, ReductionStrategy, reduce, reduce_buckets
from tests.conftest import make_days, make_interval, make_metric

# The package re-exports the `reduce` function under the submodule's name,
# so resolve the module object itself from the import system.
reduce_mod = importlib.import_module("resto_dash.aggregate.reduce")


def test_sum_invariant_across_granularities():
    records = make_days("2024-12-01", 95, revenue=1234.0, orders=41)
    total = sum(record.revenue for record in records)
    for granularity in (Granularity.DAY, Granularity.WEEK, Granularity.MONTH, Granularity.YEAR):
        buckets = reduce_buckets(
            group_by(records, granularity), granularity, Metric.REVENUE, ReductionStrategy.ADDITIVE
        )
        assert sum(bucket.value for bucket in buckets) == pytest.approx(total)


def test_order_value_is_ratio_of_sums():
    records = [
        make_metric("2025-09-01", revenue=100.0, orders=10),
        make_metric("2025-09-02", revenue=50000.0, orders=1000),
    ]
    pooled = reduce(records, Metric.AVG_ORDER_VALUE, ReductionStrategy.ADDITIVE)
    assert pooled == pytest.approx(50100 / 1010)
    assert pooled != pytest.approx(30.0)


def test_stored_order_value_is_ignored():
    records = [make_metric("2025-09-01", revenue=300.0, orders=10, order_value=99.0)]
    assert reduce(records, "avg_order_value", "additive") == pytest.approx(30.0)


def test_mean_of_occurrences_averages_per_day():
    records = [
        make_metric("2025-09-01", revenue=100.0, orders=10),
        make_metric("2025-09-08", revenue=50000.0, orders=1000),
    ]
    assert reduce(records, Metric.REVENUE, ReductionStrategy.MEAN_OF_OCCURRENCES) == pytest.approx(25050.0)
    assert reduce(records, Metric.AVG_ORDER_VALUE, ReductionStrategy.MEAN_OF_OCCURRENCES) == pytest.approx(30.0)


def test_mean_of_occurrences_pools_same_day_members():
    day_one = "2025-09-01"
    day_two = "2025-09-02"
    records = [
        make_interval(day_one, "12:00", orders=4),
        make_interval(day_one, "12:10", orders=2),
        make_interval(day_two, "12:00", orders=10),
    ]
    assert reduce(records, Metric.ORDER_COUNT, ReductionStrategy.MEAN_OF_OCCURRENCES) == pytest.approx(8.0)


def test_item_count_uses_items_per_order():
    records = [make_metric("2025-09-01", orders=40, items=2.5), make_metric("2025-09-02", orders=10, items=3.0)]
    assert reduce(records, Metric.ITEM_COUNT, ReductionStrategy.ADDITIVE) == pytest.approx(130.0)


@pytest.mark.parametrize("strategy", list(ReductionStrategy))
@pytest.mark.parametrize("metric", list(Metric))
def test_empty_bucket_reduces_to_zero(metric, strategy):
    assert reduce([], metric, strategy) == 0.0


def test_zero_orders_give_zero_order_value():
    records = [make_metric("2025-09-01", revenue=0.0, orders=0)]
    assert reduce(records, Metric.AVG_ORDER_VALUE, ReductionStrategy.ADDITIVE) == 0.0


def test_order_value_shares_the_guarded_ratio(mocker):
    spy = mocker.spy(reduce_mod, "safe_ratio")
    records = [make_metric("2025-09-01", revenue=80.0, orders=0, order_value=0.0)]
    assert reduce(records, Metric.AVG_ORDER_VALUE, ReductionStrategy.ADDITIVE) == 0.0
    spy.assert_called_once_with(80.0, 0.0)



def test_unknown_strategy_is_rejected():
    with pytest.raises(ValueError):
        reduce(make_days("2025-09-01", 1), Metric.REVENUE, "median")


def test_weekday_buckets_without_records_are_zero():
    records = make_days("2025-09-01", 3)
    buckets = reduce_buckets(
        group_by(records, Granularity.WEEKDAY),
        Granularity.WEEKDAY,
        Metric.REVENUE,
        ReductionStrategy.MEAN_OF_OCCURRENCES,
    )
    assert len(buckets) == 7
    assert [bucket.value for bucket in buckets[3:]] == [0.0, 0.0, 0.0, 0.0]
    assert buckets[0].value == pytest.approx(1000.0)
