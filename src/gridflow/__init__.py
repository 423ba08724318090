"""Gridflow: an event-driven engine for filtering, sorting and paging tabular data."""

__version__ = "0.1.0"

from gridflow.core.grid import DataGrid
from gridflow.core.schema import ColumnSpec, GridSettings

__all__ = [
    "DataGrid",
    "GridSettings",
    "ColumnSpec",
    "__version__",
]
