"""Unit tests for table export."""

import json

import pandas as pd
import pytest

from resto_dash.aggregate import align
from resto_dash.aggregate.buckets import Bucket
from resto_dash.output.export import export_rows, rows_to_frame


@pytest.fixture
def rows():
    buckets_a = [Bucket(key="2025-09", granularity="month", value=1000.0)]
    buckets_b = [Bucket(key="2025-10", granularity="month", value=1500.0)]
    return align(buckets_a, buckets_b, "union")


def test_rows_to_frame(rows):
    frame = rows_to_frame(rows)
    assert list(frame["label"]) == ["2025-09", "2025-10"]
    assert frame.loc[1, "value_b"] == 1500.0


def test_export_csv(rows, tmp_path):
    target = export_rows(rows, tmp_path / "out" / "comparison.csv")
    frame = pd.read_csv(target)
    assert list(frame.columns)[:3] == ["label", "value_a", "value_b"]
    assert len(frame) == 2


def test_export_json_from_mappings(tmp_path):
    target = export_rows([{"name": "Beer", "qty": 3}], tmp_path / "items.json")
    assert json.loads(target.read_text()) == [{"name": "Beer", "qty": 3}]


def test_export_rejects_unknown_suffix(rows, tmp_path):
    with pytest.raises(ValueError, match="Unsupported export format"):
        export_rows(rows, tmp_path / "comparison.xlsx")
