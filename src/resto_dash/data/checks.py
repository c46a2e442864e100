"""Integrity checks for daily metric datasets."""

import math
from collections.abc import Sequence

import structlog
from attrs import define

from .models import DailyMetric

logger = structlog.get_logger(__name__)


@define(frozen=True)
class Bounds:
    """Inclusive realistic range for one daily field."""

    low: float
    high: float

    def __contains__(self, value: float) -> bool:
        return self.low <= value <= self.high


REALISTIC_BOUNDS = {
    "revenue": Bounds(1500, 10000),
    "order_count": Bounds(80, 250),
    "avg_items_per_order": Bounds(2, 3.5),
    "avg_order_value": Bounds(15, 55),
}


def _expected_revenue(record: DailyMetric) -> int:
    return int(math.floor(record.order_count * record.avg_order_value + 0.5))


def integrity_errors(
    records: Sequence[DailyMetric],
    *,
    bounds: dict[str, Bounds] | None = None,
) -> list[str]:
    """Return human-readable integrity violations found in ``records``.

    The stored order value is only approximately consistent with
    revenue / orders, so a mismatch is reported, never corrected.
    """
    limits = REALISTIC_BOUNDS if bounds is None else bounds
    errors: list[str] = []
    for index, record in enumerate(records):
        day = record.date.isoformat()
        expected = _expected_revenue(record)
        if record.revenue != expected:
            errors.append(
                f"Row {index} ({day}): revenue mismatch. Expected {expected}, got {record.revenue:g}"
            )
        for name, bound in limits.items():
            value = getattr(record, name)
            if value not in bound:
                errors.append(
                    f"Row {index} ({day}): {name} {value:g} outside expected range "
                    f"({bound.low:g}-{bound.high:g})"
                )
    if errors:
        logger.warning("checks.failed", records=len(records), errors=len(errors))
    else:
        logger.debug("checks.passed", records=len(records))
    return errors


__all__ = ["Bounds", "REALISTIC_BOUNDS", "integrity_errors"]
