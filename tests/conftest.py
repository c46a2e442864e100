"""Global test configuration and fixtures."""

from datetime import date, timedelta

import pytest
import structlog

from resto_dash.data.models import DailyMetric, IntervalRecord, OrderItem
from resto_dash.data.source import InMemoryMetricSource, SyntheticMetricSource


def make_metric(day, revenue=1000.0, orders=40, items=2.5, order_value=None):
    """Build a DailyMetric with consistent defaults."""
    if order_value is None:
        order_value = round(revenue / orders, 2) if orders else 0.0
    return DailyMetric(
        date=day,
        revenue=revenue,
        order_count=orders,
        avg_items_per_order=items,
        avg_order_value=order_value,
    )


def make_days(start, count, **kwargs):
    """Build ``count`` consecutive daily records starting at ``start``."""
    first = date.fromisoformat(start) if isinstance(start, str) else start
    return [make_metric(first + timedelta(days=offset), **kwargs) for offset in range(count)]


def make_interval(day, time, orders=2, items=()):
    lines = [OrderItem(name=name, category=category, price=price, qty=qty) for name, category, price, qty in items]
    return IntervalRecord(
        date=day,
        time=time,
        order_count=orders,
        revenue=sum(line.revenue for line in lines),
        items=lines,
    )


@pytest.fixture
def metric_factory():
    return make_metric


@pytest.fixture
def september_records():
    """Two full weeks of September 2025 with revenue rising by 100 a day."""
    first = date(2025, 9, 1)
    return [
        make_metric(first + timedelta(days=offset), revenue=1000.0 + offset * 100, orders=50)
        for offset in range(14)
    ]


@pytest.fixture
def memory_source(september_records):
    return InMemoryMetricSource(september_records)


@pytest.fixture(scope="session")
def synthetic_source():
    """Deterministic 2025 dataset shared across tests."""
    return SyntheticMetricSource(years=(2025,))


@pytest.fixture(autouse=True)
def reset_structlog():
    """Keep logger configuration and bound context from leaking between tests."""
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
