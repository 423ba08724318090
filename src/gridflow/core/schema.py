"""Configuration models for grids and their columns."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import Enum
from pathlib import Path
from typing import Any, Literal

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from gridflow.core.transport import build_url

SortDirection = Literal["asc", "desc"]


class FieldType(str, Enum):
    """Value types a column can declare."""

    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    DATETIME = "datetime"
    OBJECT = "object"

    def __str__(self) -> str:  # pragma: no cover - trivial wrapper
        return self.value

    @property
    def is_temporal(self) -> bool:
        return self in (FieldType.DATE, FieldType.DATETIME)


class FilterElement(str, Enum):
    """Kind of header control a filterable column renders."""

    INPUT = "input"
    SELECT = "select"
    MULTI = "multi"
    BETWEEN = "between"

    def __str__(self) -> str:  # pragma: no cover - trivial wrapper
        return self.value


class ColumnSpec(BaseModel):
    """
    Describes one grid column.

    Attributes:
        field: Row key the column reads (columns without one are display-only)
        label: Header text; defaults to the field name
        type: Declared value type used for filtering and sorting
        filter_type: Filter operator name or a predicate
            ``(filter_value, row_value, row, params) -> bool``
        filter_values: Select options as ``{value: text}``, a list of
            ``{"value", "text"}`` mappings, or a URL to fetch them from
        filter_multi_select: Render a multi-select (``in`` semantics)
        filter_params: Extra parameters handed to predicate filters
        filter_values_refresh: Reload remote options when the grid refreshes
        sortable: Allow header sorting on this column
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    field: str | None = None
    label: str | None = None
    type: FieldType = FieldType.STRING
    filter_type: str | Callable[..., bool] | None = None
    filter_values: dict[Any, Any] | list[Any] | str | None = None
    filter_multi_select: bool = False
    filter_params: dict[str, Any] = Field(default_factory=dict)
    filter_values_refresh: bool = False
    sortable: bool = True

    @model_validator(mode="after")
    def _default_label(self) -> ColumnSpec:
        if self.label is None and self.field is not None:
            self.label = self.field
        return self

    @property
    def has_filter(self) -> bool:
        return bool(self.field) and self.filter_type is not None

    @property
    def is_sortable(self) -> bool:
        return bool(self.field) and self.sortable

    @property
    def filter_values_remote_source(self) -> str | None:
        """URL of the option list when options come from a remote source."""
        if isinstance(self.filter_values, str):
            return self.filter_values
        return None

    @property
    def filter_element(self) -> FilterElement:
        if self.filter_multi_select:
            return FilterElement.MULTI
        if self.filter_values is not None:
            return FilterElement.SELECT
        if self.filter_type == "between":
            return FilterElement.BETWEEN
        return FilterElement.INPUT

    @property
    def operator(self) -> str | Callable[..., bool] | None:
        """Effective filter operator; multi-selects always test membership."""
        if self.filter_multi_select and not callable(self.filter_type):
            return "in"
        return self.filter_type


class GridSettings(BaseModel):
    """
    User options merged over the grid defaults.

    ``remote_processing`` accepts either a boolean or a mapping
    ``{"column": ..., "direction": ...}`` naming the initial remote sort.
    The remote sort default falls back to the first column with a field,
    sorted descending.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    base_id_name: str = "datagrid"
    data: list[dict[str, Any]] | None = None
    columns: list[ColumnSpec] = Field(default_factory=list)

    enable_paging: bool = True
    pager_pages_to_display: int = Field(default=5, ge=1)
    pager_rows_per_page: int = Field(default=25, ge=0)
    pager_center_offset: int | None = None

    enable_filter: bool = True
    enable_sort: bool = True
    sort_default_direction: SortDirection = "desc"

    remote_processing: bool = False
    remote_sort_default_column: str = ""
    remote_sort_default_direction: SortDirection = "desc"
    remote_url: str = ""
    remote_params: dict[str, Any] = Field(default_factory=dict)

    ajax_url: str = ""
    ajax_params: dict[str, Any] = Field(default_factory=dict)

    row_count_id: str = ""
    refreshable_id: str = ""
    date_format: str = "MM/dd/yyyy"

    @model_validator(mode="before")
    @classmethod
    def _expand_remote_processing(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        raw = data.get("remote_processing")
        if isinstance(raw, Mapping):
            data = dict(data)
            data["remote_processing"] = True
            data["remote_sort_default_column"] = raw.get("column", "")
            data["remote_sort_default_direction"] = raw.get("direction", "desc")
        return data

    @field_validator("columns", mode="before")
    @classmethod
    def _coerce_columns(cls, value: Any) -> Any:
        if value is None:
            return []
        return value

    @model_validator(mode="after")
    def _finalise(self) -> GridSettings:
        if self.remote_processing and not self.remote_sort_default_column:
            first = next((column.field for column in self.columns if column.field), "")
            self.remote_sort_default_column = first
        if self.ajax_url and self.ajax_params:
            self.ajax_url = build_url(self.ajax_url, self.ajax_params)
        return self

    @property
    def remote_source(self) -> str:
        """URL remote-processing grids request pages from."""
        return self.remote_url or self.ajax_url


def merge_settings(options: Mapping[str, Any] | None = None, **overrides: Any) -> GridSettings:
    """Build settings from user *options* without touching the defaults."""
    merged: dict[str, Any] = dict(options or {})
    merged.update(overrides)
    return GridSettings(**merged)


def load_settings(path: str | Path) -> GridSettings:
    """Load grid settings from a YAML file."""
    config_path = Path(path)
    with open(config_path) as f:
        config_dict = yaml.safe_load(f) or {}
    if not isinstance(config_dict, Mapping):
        raise ValueError(f"Settings file must contain a mapping: {config_path}")
    return merge_settings(config_dict)
