"""Numeric summaries of restaurant periods."""

from .stats import (  # noqa: F401
    ChangeIndicator,
    PeriodSummary,
    compare_summaries,
    percent_change,
    summarize_period,
)

__all__ = [
    "ChangeIndicator",
    "PeriodSummary",
    "compare_summaries",
    "percent_change",
    "summarize_period",
]
