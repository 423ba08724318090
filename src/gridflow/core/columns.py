"""Ordered collection of grid columns."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from gridflow.core.schema import ColumnSpec


def _as_spec(column: ColumnSpec | Mapping[str, Any]) -> ColumnSpec:
    if isinstance(column, ColumnSpec):
        return column
    return ColumnSpec(**dict(column))


class ColumnManager:
    """Keeps columns in display order and answers questions about them."""

    def __init__(self, columns: Iterable[ColumnSpec | Mapping[str, Any]] = ()) -> None:
        self._columns: list[ColumnSpec] = [_as_spec(column) for column in columns]

    @property
    def columns(self) -> list[ColumnSpec]:
        return list(self._columns)

    def add_column(
        self, column: ColumnSpec | Mapping[str, Any], index: int | None = None
    ) -> ColumnSpec:
        """Insert *column* at *index*, or append it when no index is given."""
        spec = _as_spec(column)
        if index is None:
            self._columns.append(spec)
        else:
            self._columns.insert(index, spec)
        return spec

    def get(self, field: str) -> ColumnSpec:
        """Return the column bound to *field* or raise KeyError."""
        for column in self._columns:
            if column.field == field:
                return column
        raise KeyError(f"No column with field {field!r}")

    @property
    def filterable(self) -> list[ColumnSpec]:
        return [column for column in self._columns if column.has_filter]

    @property
    def sortable(self) -> list[ColumnSpec]:
        return [column for column in self._columns if column.is_sortable]

    def __iter__(self) -> Iterator[ColumnSpec]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)
