"""Write comparison and breakdown tables to disk."""

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import pandas as pd
import structlog

from .utils import ensure_directory

logger = structlog.get_logger(__name__)

EXPORT_FORMATS = (".csv", ".json")


def rows_to_frame(rows: Iterable[Any]) -> pd.DataFrame:
    """Build a DataFrame from rows exposing ``to_dict`` or plain mappings."""
    records = [row if isinstance(row, Mapping) else row.to_dict() for row in rows]
    return pd.DataFrame.from_records(records)


def export_rows(rows: Iterable[Any], path: str | Path) -> Path:
    """Write ``rows`` as CSV or JSON, chosen by the file suffix."""
    target = Path(path)
    suffix = target.suffix.lower()
    if suffix not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format {suffix or target.name!r}; use .csv or .json.")
    ensure_directory(target.parent)
    frame = rows_to_frame(rows)
    if suffix == ".csv":
        frame.to_csv(target, index=False)
    else:
        frame.to_json(target, orient="records", indent=2)
    logger.info("export.rows_written", path=str(target), rows=len(frame), format=suffix[1:])
    return target


__all__ = ["EXPORT_FORMATS", "export_rows", "rows_to_frame"]
