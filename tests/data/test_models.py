"""Unit tests for the data models."""

import json
from datetime import date

import marshmallow as ma
import pytest

from resto_dash.data.catalog import DEFAULT_CATALOG, MenuCatalog, load_catalog
from resto_dash.data.models import (
    DailyMetric,
    DailyMetricSchema,
    IntervalRecord,
    IntervalRecordSchema,
    OrderItem,
    format_slot,
    metric_to_dict,
    minutes_of,
)
from resto_dash.errors import ParseError


def test_daily_metric_converts_fields():
    metric = DailyMetric(
        date="2025-09-01",
        revenue="4567",
        order_count="150",
        avg_items_per_order="2.5",
        avg_order_value="30.45",
    )
    assert metric.date == date(2025, 9, 1)
    assert metric.revenue == 4567.0
    assert metric.order_count == 150
    assert metric.item_count == pytest.approx(375.0)


def test_daily_metric_rejects_negative_amounts():
    with pytest.raises(ValueError):
        DailyMetric(date="2025-09-01", revenue=-1, order_count=1, avg_items_per_order=2, avg_order_value=1)


def test_daily_metric_rejects_bad_date():
    with pytest.raises(ParseError):
        DailyMetric(date="01-09-2025", revenue=1, order_count=1, avg_items_per_order=2, avg_order_value=1)


def test_daily_metric_schema_round_trip():
    payload = {
        "date": "2024-02-29",
        "revenue": 3200.0,
        "order_count": 100,
        "avg_items_per_order": 3.0,
        "avg_order_value": 32.0,
    }
    metric = DailyMetricSchema().load(payload)
    assert isinstance(metric, DailyMetric)
    assert metric_to_dict(metric) == payload


def test_daily_metric_schema_validation():
    with pytest.raises(ma.ValidationError):
        DailyMetricSchema().load({"date": "2025-09-01", "revenue": 10})


def test_slot_helpers():
    assert minutes_of("9:05") == 545
    assert minutes_of("24:00") == 1440
    assert format_slot(545) == "09:05"
    with pytest.raises(ValueError):
        minutes_of("24:30")
    with pytest.raises(ValueError):
        minutes_of("noon")
    with pytest.raises(ValueError):
        minutes_of("١٢:00")


def test_interval_record():
    record = IntervalRecord(
        date="2025-09-01",
        time="9:30",
        order_count=2,
        revenue=31.0,
        items=[OrderItem(name=" Beer ", category="Drink", price=5.0, qty=2), OrderItem("Caesar Salad", "dish", 9.5)],
    )
    assert record.time == "09:30"
    assert record.minute_of_day == 570
    assert record.item_count == 3
    assert record.items[0].name == "Beer"
    assert record.items[0].category == "drink"
    assert record.items[0].revenue == 10.0


def test_interval_schema_loads_nested_items():
    record = IntervalRecordSchema().load(
        {
            "date": "2025-09-01",
            "time": "12:15",
            "order_count": 1,
            "revenue": 12.5,
            "items": [{"name": "Margherita Pizza", "category": "dish", "price": 12.5}],
        }
    )
    assert record.items[0].qty == 1
    assert record.item_count == 1


def test_order_item_rejects_unknown_category():
    with pytest.raises(ValueError):
        OrderItem(name="Tiramisu", category="dessert", price=6.0)


def test_default_catalog():
    assert len(DEFAULT_CATALOG.list_catalog("dish")) == 8
    assert len(DEFAULT_CATALOG.list_catalog("drink")) == 6
    assert DEFAULT_CATALOG.list_catalog("drink")[2].name == "Coffee"
    assert DEFAULT_CATALOG.list_catalog("drink")[2].price == 3.5
    with pytest.raises(ValueError):
        DEFAULT_CATALOG.list_catalog("dessert")


def test_catalog_merge_keeps_order():
    dishes = MenuCatalog.from_rows([("x1", "Soup", 6.0)], "dish")
    drinks = MenuCatalog.from_rows([("y1", "Tea", 2.5)], "drink")
    merged = dishes.merge(drinks)
    assert [entry.name for entry in merged.entries] == ["Soup", "Tea"]


CUSTOM_MENU = [
    {"id": "p1", "name": "Pho", "category": "dish", "price": 11.0},
    {"id": "p2", "name": "Banh Mi", "category": "dish", "price": 7.5},
    {"id": "t1", "name": "Iced Tea", "category": "drink", "price": 3.0},
]


def test_load_catalog_from_list(tmp_path):
    path = tmp_path / "menu.json"
    path.write_text(json.dumps(CUSTOM_MENU))
    catalog = load_catalog(path)
    assert [entry.name for entry in catalog.list_catalog("dish")] == ["Pho", "Banh Mi"]
    assert catalog.list_catalog("drink")[0].price == 3.0


def test_load_catalog_from_items_document(tmp_path):
    path = tmp_path / "menu.json"
    path.write_text(json.dumps({"items": CUSTOM_MENU}))
    assert len(load_catalog(path).entries) == 3


def test_load_catalog_requires_every_category(tmp_path):
    path = tmp_path / "menu.json"
    path.write_text(json.dumps(CUSTOM_MENU[:2]))
    with pytest.raises(ValueError, match="no drink entries"):
        load_catalog(path)


def test_load_catalog_rejects_invalid_entries(tmp_path):
    path = tmp_path / "menu.json"
    path.write_text(json.dumps([{"id": "x", "name": "Cake", "category": "dessert", "price": 4.0}]))
    with pytest.raises(ValueError, match="Invalid menu catalog"):
        load_catalog(path)
