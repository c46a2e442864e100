"""Shared helpers for rendering dashboard figures."""

from pathlib import Path

from ..aggregate.reduce import Metric

CURRENCY_SYMBOL = "€"


def ensure_directory(path: str | Path) -> Path:
    """Create the directory at ``path`` if needed and return its Path."""
    directory = Path(path)
    if not directory.exists():
        directory.mkdir(parents=True, exist_ok=True)
    return directory


def format_currency(amount: float) -> str:
    """Format euros without decimals, e.g. ``€1,235``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(amount):,.0f}"


def format_number(value: float) -> str:
    return f"{value:,.0f}"


def format_compact(value: float, *, currency: bool = False) -> str:
    """Shorten large axis values to ``1.2k`` (``€1.2k`` for money)."""
    prefix = CURRENCY_SYMBOL if currency else ""
    if abs(value) >= 1000:
        sign = "-" if value < 0 else ""
        return f"{sign}{prefix}{abs(value) / 1000:.1f}k"
    if currency:
        return format_currency(value)
    return format_number(value)


def format_percent(value: float, *, digits: int = 2) -> str:
    """Format a value expressed in fractions as a percentage string."""
    return f"{value * 100:.{digits}f}%"


def format_value(value: float | None, metric: Metric | str) -> str:
    """Render ``value`` the way the metric is shown on cards and tooltips."""
    if value is None:
        return "-"
    metric = Metric(metric)
    if metric in (Metric.REVENUE, Metric.AVG_ORDER_VALUE):
        return format_currency(value)
    return format_number(value)


__all__ = [
    "ensure_directory",
    "format_compact",
    "format_currency",
    "format_number",
    "format_percent",
    "format_value",
]
