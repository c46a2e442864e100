"""Per-period colour palettes for item breakdown charts."""

PERIOD_A_COLORS = (
    "#22c55e", "#16a34a", "#15803d", "#10b981", "#059669",
    "#047857", "#065f46", "#064e3b", "#14b8a6", "#0d9488",
    "#0f766e", "#115e59", "#134e4a", "#166534", "#14532d",
)

PERIOD_B_COLORS = (
    "#3b82f6", "#2563eb", "#1d4ed8", "#1e40af", "#1e3a8a",
    "#6366f1", "#4f46e5", "#4338ca", "#3730a3", "#312e81",
    "#8b5cf6", "#7c3aed", "#6d28d9", "#5b21b6", "#4c1d95",
)

PALETTES = {"A": PERIOD_A_COLORS, "B": PERIOD_B_COLORS}


def palette_colors(count: int, period: str) -> list[str]:
    """Return ``count`` colours from the period's palette, cycling when exhausted."""
    try:
        palette = PALETTES[period.upper()]
    except KeyError as exc:
        raise ValueError(f"Unknown period {period!r}; expected 'A' or 'B'.") from exc
    return [palette[index % len(palette)] for index in range(count)]


__all__ = ["PALETTES", "PERIOD_A_COLORS", "PERIOD_B_COLORS", "palette_colors"]
