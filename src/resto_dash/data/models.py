"""Domain models for daily and intraday restaurant metrics."""

from datetime import date
from typing import Any

import marshmallow as ma
from attrs import asdict as attrs_asdict, define, field

from ..timeline.dates import parse_local_date

CATEGORIES = ("dish", "drink")


def _strip(value: str) -> str:
    """Trim surrounding whitespace from a field."""
    return value.strip()


def _category(value: str) -> str:
    """Normalize and validate a menu category."""
    normalized = str(value).strip().lower()
    if normalized not in CATEGORIES:
        raise ValueError(f"Unknown category {value!r}; expected one of {', '.join(CATEGORIES)}.")
    return normalized


def _non_negative(instance: object, attribute: Any, value: float) -> None:
    """Reject negative amounts and counts."""
    if value < 0:
        raise ValueError(f"{attribute.name} must be non-negative, got {value!r}.")


def _slot_time(value: str) -> str:
    """Normalize ``H:MM`` / ``HH:MM`` strings to zero-padded ``HH:MM``."""
    hours, _, minutes = str(value).strip().partition(":")
    if not (hours + minutes).isascii() or not hours.isdigit() or not minutes.isdigit():
        raise ValueError(f"Invalid slot time {value!r}. Expected HH:MM.")
    hour, minute = int(hours), int(minutes)
    if not (0 <= hour <= 24 and 0 <= minute < 60) or (hour == 24 and minute):
        raise ValueError(f"Slot time {value!r} is outside the day.")
    return f"{hour:02d}:{minute:02d}"


def minutes_of(time: str) -> int:
    """Return the minute-of-day for an ``HH:MM`` string."""
    hours, minutes = _slot_time(time).split(":")
    return int(hours) * 60 + int(minutes)


def format_slot(minute_of_day: int) -> str:
    """Render a minute-of-day as ``HH:MM``."""
    return f"{minute_of_day // 60:02d}:{minute_of_day % 60:02d}"


@define(slots=True, frozen=True)
class DailyMetric:
    """One calendar day of restaurant performance."""

    date: date = field(converter=parse_local_date)
    revenue: float = field(converter=float, validator=_non_negative)
    order_count: int = field(converter=int, validator=_non_negative)
    avg_items_per_order: float = field(converter=float)
    avg_order_value: float = field(converter=float, validator=_non_negative)

    @property
    def item_count(self) -> float:
        """Return the implied number of items sold that day."""
        return self.order_count * self.avg_items_per_order


class DailyMetricSchema(ma.Schema):
    """Marshmallow schema for :class:`DailyMetric`."""

    date = ma.fields.Date(required=True)
    revenue = ma.fields.Float(required=True, validate=ma.validate.Range(min=0))
    order_count = ma.fields.Int(required=True, validate=ma.validate.Range(min=0))
    avg_items_per_order = ma.fields.Float(required=True)
    avg_order_value = ma.fields.Float(required=True, validate=ma.validate.Range(min=0))

    @ma.post_load
    def make_metric(self, data: dict[str, Any], **kwargs: object) -> DailyMetric:
        """Convert validated payloads into :class:`DailyMetric` objects."""
        return DailyMetric(**data)


@define(slots=True, frozen=True)
class OrderItem:
    """A single menu line sold within an intraday interval."""

    name: str = field(converter=_strip)
    category: str = field(converter=_category)
    price: float = field(converter=float, validator=_non_negative)
    qty: int = field(converter=int, default=1, validator=_non_negative)

    @property
    def revenue(self) -> float:
        return self.price * self.qty


class OrderItemSchema(ma.Schema):
    """Marshmallow schema for :class:`OrderItem`."""

    name = ma.fields.Str(required=True)
    category = ma.fields.Str(required=True, validate=ma.validate.OneOf(CATEGORIES))
    price = ma.fields.Float(required=True)
    qty = ma.fields.Int(load_default=1)

    @ma.post_load
    def make_item(self, data: dict[str, Any], **kwargs: object) -> OrderItem:
        return OrderItem(**data)


def _items_tuple(value: Any) -> tuple[OrderItem, ...]:
    return tuple(value or ())


@define(slots=True, frozen=True)
class IntervalRecord:
    """Orders taken during one fixed time-of-day slot of one day."""

    date: date = field(converter=parse_local_date)
    time: str = field(converter=_slot_time)
    order_count: int = field(converter=int, validator=_non_negative)
    revenue: float = field(converter=float, validator=_non_negative)
    items: tuple[OrderItem, ...] = field(converter=_items_tuple, factory=tuple)

    @property
    def minute_of_day(self) -> int:
        return minutes_of(self.time)

    @property
    def item_count(self) -> int:
        """Return the number of item units sold in the slot."""
        return sum(item.qty for item in self.items)


class IntervalRecordSchema(ma.Schema):
    """Marshmallow schema for :class:`IntervalRecord`."""

    date = ma.fields.Date(required=True)
    time = ma.fields.Str(required=True)
    order_count = ma.fields.Int(required=True)
    revenue = ma.fields.Float(required=True)
    items = ma.fields.List(ma.fields.Nested(OrderItemSchema), load_default=list)

    @ma.post_load
    def make_interval(self, data: dict[str, Any], **kwargs: object) -> IntervalRecord:
        return IntervalRecord(**data)


@define(slots=True, frozen=True)
class MenuCatalogEntry:
    """Reference menu entry used to distribute orders across items."""

    id: str = field(converter=_strip)
    name: str = field(converter=_strip)
    category: str = field(converter=_category)
    price: float = field(converter=float, validator=_non_negative)


class MenuCatalogEntrySchema(ma.Schema):
    """Marshmallow schema for :class:`MenuCatalogEntry`."""

    id = ma.fields.Str(required=True)
    name = ma.fields.Str(required=True)
    category = ma.fields.Str(required=True, validate=ma.validate.OneOf(CATEGORIES))
    price = ma.fields.Float(required=True)

    @ma.post_load
    def make_entry(self, data: dict[str, Any], **kwargs: object) -> MenuCatalogEntry:
        return MenuCatalogEntry(**data)


def metric_to_dict(metric: DailyMetric) -> dict[str, object]:
    """Return a JSON-friendly representation of a daily record."""
    payload = attrs_asdict(metric)
    payload["date"] = metric.date.isoformat()
    return payload


__all__ = [
    "CATEGORIES",
    "DailyMetric",
    "DailyMetricSchema",
    "IntervalRecord",
    "IntervalRecordSchema",
    "MenuCatalogEntry",
    "MenuCatalogEntrySchema",
    "OrderItem",
    "OrderItemSchema",
    "format_slot",
    "metric_to_dict",
    "minutes_of",
]
