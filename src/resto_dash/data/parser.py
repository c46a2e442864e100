"""Parsers for daily-metric exports (CSV and JSON) and intraday slot files."""

import csv
import io
import json
from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from pathlib import Path

import marshmallow as ma
import structlog

from .models import DailyMetric, DailyMetricSchema, IntervalRecord, IntervalRecordSchema

logger = structlog.get_logger(__name__)

# Header spellings produced by older dashboard exports.
HEADER_ALIASES = {
    "orders": "order_count",
    "avgordersize": "avg_items_per_order",
    "avg_order_size": "avg_items_per_order",
    "avgorderamount": "avg_order_value",
    "avg_order_amount": "avg_order_value",
}


def _normalize_key(key: str) -> str:
    """Normalize header names for case/whitespace inconsistencies."""
    normalized = key.strip().lower().replace(" ", "_")
    return HEADER_ALIASES.get(normalized, normalized)


def _read_csv(text: str) -> Iterable[dict[str, str]]:
    """Read a comma-separated payload into cleaned dictionaries."""
    reader = csv.DictReader(io.StringIO(text))
    for row in reader:
        if not row:
            continue
        # Skip blank lines that may appear at EOF.
        if all(value is None or value.strip() == "" for value in row.values()):
            continue
        yield {_normalize_key(key): (value or "").strip() for key, value in row.items()}


def parse_daily_metrics_csv(text: str) -> list[DailyMetric]:
    """Parse daily metric rows from CSV text."""
    return [
        DailyMetric(
            date=row["date"],
            revenue=row["revenue"],
            order_count=row["order_count"],
            avg_items_per_order=row.get("avg_items_per_order") or "0",
            avg_order_value=row.get("avg_order_value") or "0",
        )
        for row in _read_csv(text)
    ]


def parse_daily_metrics_json(text: str) -> list[DailyMetric]:
    """Parse a JSON list (or ``{"records": [...]}`` document) of daily metrics."""
    payload = json.loads(text)
    if isinstance(payload, dict):
        payload = payload.get("records", [])
    if isinstance(payload, list):
        payload = [
            {_normalize_key(key): value for key, value in row.items()}
            if isinstance(row, dict)
            else row
            for row in payload
        ]
    return DailyMetricSchema(many=True).load(payload)


def load_daily_metrics(path: Path) -> list[DailyMetric]:
    """Load daily metrics from a ``.csv`` or ``.json`` file."""
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return parse_daily_metrics_csv(text)
    if suffix == ".json":
        try:
            return parse_daily_metrics_json(text)
        except ma.ValidationError as exc:
            raise ValueError(f"Invalid daily metrics in {path}: {exc.messages}") from exc
    raise ValueError(f"Unsupported metrics file type {path.suffix!r}; use .csv or .json.")


def parse_intervals_json(text: str) -> dict[date, list[IntervalRecord]]:
    """Parse intraday slots, grouped by day and ordered by slot time.

    Accepts a JSON list or an ``{"intervals": [...]}`` document of
    ``{date, time, order_count, revenue, items}`` objects.
    """
    payload = json.loads(text)
    if isinstance(payload, dict):
        payload = payload.get("intervals", [])
    records = IntervalRecordSchema(many=True).load(payload)
    by_day: dict[date, list[IntervalRecord]] = defaultdict(list)
    for record in sorted(records, key=lambda record: (record.date, record.minute_of_day)):
        by_day[record.date].append(record)
    return dict(by_day)


def load_intervals(path: Path) -> dict[date, list[IntervalRecord]]:
    """Load intraday slots from a ``.json`` file."""
    if path.suffix.lower() != ".json":
        raise ValueError(f"Unsupported intervals file type {path.suffix!r}; use .json.")
    try:
        intervals = parse_intervals_json(path.read_text(encoding="utf-8"))
    except ma.ValidationError as exc:
        raise ValueError(f"Invalid intervals in {path}: {exc.messages}") from exc
    logger.debug(
        "parser.intervals_loaded",
        path=str(path),
        days=len(intervals),
        slots=sum(len(slots) for slots in intervals.values()),
    )
    return intervals


__all__ = [
    "load_daily_metrics",
    "load_intervals",
    "parse_daily_metrics_csv",
    "parse_daily_metrics_json",
    "parse_intervals_json",
]
