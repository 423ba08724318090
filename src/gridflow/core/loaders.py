"""Loading grid rows from tabular files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import polars as pl

from gridflow.core.utils import get_logger

logger = get_logger(__name__)

_READERS = {
    ".csv": pl.read_csv,
    ".json": pl.read_json,
    ".ndjson": pl.read_ndjson,
    ".jsonl": pl.read_ndjson,
    ".parquet": pl.read_parquet,
}


def supported_suffixes() -> list[str]:
    return sorted(_READERS)


def read_frame(path: str | Path) -> pl.DataFrame:
    """
    Read a tabular file into a DataFrame, choosing the reader by suffix.

    Raises:
        FileNotFoundError: If *path* does not exist
        ValueError: If the suffix is not supported
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Data file not found: {file_path}")

    reader = _READERS.get(file_path.suffix.lower())
    if reader is None:
        raise ValueError(
            f"Unsupported data file type {file_path.suffix!r}; "
            f"expected one of {supported_suffixes()}"
        )
    return reader(file_path)


def load_rows(path: str | Path) -> list[dict[str, Any]]:
    """Read *path* and return its rows as dictionaries."""
    frame = read_frame(path)
    logger.info("Loaded %d rows with columns %s from %s", frame.height, frame.columns, path)
    return frame.to_dicts()


def infer_column_types(frame: pl.DataFrame) -> dict[str, str]:
    """Map each frame column to the grid type that sorts and filters it correctly."""
    types: dict[str, str] = {}
    for name, dtype in frame.schema.items():
        if dtype.is_numeric():
            types[name] = "number"
        elif dtype == pl.Datetime or isinstance(dtype, pl.Datetime):
            types[name] = "datetime"
        elif dtype == pl.Date:
            types[name] = "date"
        else:
            types[name] = "string"
    return types
