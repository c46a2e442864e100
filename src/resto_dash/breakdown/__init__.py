"""Menu item breakdowns and rankings."""

from .items import (
    BreakdownRow,
    assign_palette,
    breakdown_by_category,
    breakdown_for_range,
    items_sold,
    share_of_total,
    top_items,
)
from .palettes import palette_colors

__all__ = [
    "BreakdownRow",
    "assign_palette",
    "breakdown_by_category",
    "breakdown_for_range",
    "items_sold",
    "palette_colors",
    "share_of_total",
    "top_items",
]
