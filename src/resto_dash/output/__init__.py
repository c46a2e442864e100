"""Formatting and export of dashboard results."""

from .export import export_rows, rows_to_frame
from .utils import format_compact, format_currency, format_percent, format_value

__all__ = [
    "export_rows",
    "format_compact",
    "format_currency",
    "format_percent",
    "format_value",
    "rows_to_frame",
]
