"""Top-level data module for restaurant metrics."""

from .catalog import DEFAULT_CATALOG, MenuCatalog, load_catalog
from .checks import integrity_errors
from .models import (
    DailyMetric,
    DailyMetricSchema,
    IntervalRecord,
    MenuCatalogEntry,
    OrderItem,
)
from .parser import load_daily_metrics, load_intervals
from .source import (
    InMemoryMetricSource,
    IntervalCache,
    MetricSource,
    SyntheticMetricSource,
)

__all__ = [
    "DEFAULT_CATALOG",
    "DailyMetric",
    "DailyMetricSchema",
    "InMemoryMetricSource",
    "IntervalCache",
    "IntervalRecord",
    "MenuCatalog",
    "MenuCatalogEntry",
    "MetricSource",
    "OrderItem",
    "SyntheticMetricSource",
    "integrity_errors",
    "load_catalog",
    "load_daily_metrics",
    "load_intervals",
]
