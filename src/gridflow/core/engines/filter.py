"""Filter engine: converts raw filter input into typed conditions and applies them."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from gridflow.core.dates import parse_date_only
from gridflow.core.engines.conditions import (
    DateCondition,
    FilterCondition,
    FunctionCondition,
    Predicate,
    ScalarCondition,
)
from gridflow.core.persistence import DataStore, Row
from gridflow.core.utils import get_logger, to_number

if TYPE_CHECKING:  # pragma: no cover - import for type checking only
    from gridflow.core.collaborators import FilterControl
    from gridflow.core.schema import ColumnSpec

logger = get_logger(__name__)

TEMPORAL_TYPES = frozenset({"date", "datetime"})


def _type_name(field_type: Any) -> str:
    return str(getattr(field_type, "value", field_type) or "string")


def convert_to_type(value: Any, field_type: Any) -> Any:
    """
    Convert a raw filter value to the column's declared type.

    Numbers that fail to parse and dates that cannot be read resolve to
    None. Lists are converted element by element. "" is returned as-is
    and means no filter was entered.

    Args:
        value: Raw value read from a control or passed programmatically
        field_type: Column type (``string``, ``number``, ``date``, ``datetime``, ``object``)

    Returns:
        Converted value, "" for blank input, or None when conversion failed
    """
    if value is None or value == "":
        return value

    if isinstance(value, (list, tuple)):
        return [convert_to_type(item, field_type) for item in value]

    type_name = _type_name(field_type)
    if type_name == "number":
        return to_number(value)
    if type_name in TEMPORAL_TYPES:
        return parse_date_only(value)
    return value


def _is_absent(value: Any) -> bool:
    if value is None or value == "":
        return True
    if isinstance(value, list):
        return any(item is None or item == "" for item in value)
    return False


class FilterEngine:
    """
    Builds filter conditions and applies them to a DataStore.

    Two condition sources feed a render cycle: header conditions, rebuilt
    from the live controls every cycle, and programmatic conditions that
    persist (one per field) until removed. Filtering always starts from the
    snapshot so re-applying the same conditions is idempotent.
    """

    def __init__(self, store: DataStore) -> None:
        self.store = store
        self._programmatic: dict[str, FilterCondition] = {}

    convert_to_type = staticmethod(convert_to_type)

    def create_condition(
        self,
        field: str,
        value: Any,
        operator: str | Predicate = "equals",
        field_type: Any = "string",
        params: Mapping[str, Any] | None = None,
    ) -> FilterCondition | None:
        """
        Build the condition variant matching *operator* and *field_type*.

        Returns None when the value is blank or failed type conversion, so
        an unusable input removes the filter instead of excluding every row.
        """
        type_name = _type_name(field_type)

        if callable(operator):
            if value is None or value == "":
                return None
            return FunctionCondition(
                field=field,
                value=value,
                field_type=type_name,
                predicate=operator,
                params=dict(params or {}),
            )

        converted = convert_to_type(value, type_name)
        if _is_absent(converted):
            return None

        if type_name in TEMPORAL_TYPES:
            return DateCondition(
                field=field, value=converted, field_type=type_name, operator=operator
            )
        return ScalarCondition(
            field=field, value=converted, field_type=type_name, operator=operator
        )

    def header_conditions(
        self,
        columns: Iterable[ColumnSpec],
        controls: Mapping[str, FilterControl],
    ) -> list[FilterCondition]:
        """Read each filterable column's control once and build its condition."""
        conditions: list[FilterCondition] = []
        for column in columns:
            if not column.has_filter or column.field not in controls:
                continue
            control = controls[column.field]
            condition = self.create_condition(
                column.field,
                control.value,
                column.operator,
                column.type,
                column.filter_params,
            )
            if condition is not None:
                conditions.append(condition)
        return conditions

    def apply_filters(self, conditions: Iterable[FilterCondition]) -> list[Row]:
        """Keep snapshot rows satisfying every condition and make them the working set."""
        active = list(conditions)
        rows = [
            row
            for row in self.store.snapshot
            if all(condition.matches(row) for condition in active)
        ]
        # Working rows are copies; snapshot rows are never handed out.
        self.store.data = [dict(row) for row in rows]
        logger.debug(
            "Applied %d filters: %d of %d rows kept",
            len(active),
            len(rows),
            len(self.store.snapshot),
        )
        return self.store.data

    # ------------------------------------------------------------------ #
    # Programmatic filters
    # ------------------------------------------------------------------ #
    def set_filter(
        self,
        field: str,
        value: Any,
        operator: str | Predicate = "equals",
        field_type: Any = "string",
        params: Mapping[str, Any] | None = None,
    ) -> FilterCondition | None:
        """Add or replace the programmatic filter for *field*; blank values remove it."""
        condition = self.create_condition(field, value, operator, field_type, params)
        if condition is None:
            self._programmatic.pop(field, None)
            logger.info("Programmatic filter on %s dropped (blank or invalid value)", field)
            return None

        self._programmatic[field] = condition
        logger.info("Programmatic filter set on %s", field)
        return condition

    def remove_filter(self, field: str) -> bool:
        """Remove the programmatic filter for *field*; True when one existed."""
        return self._programmatic.pop(field, None) is not None

    @property
    def programmatic_conditions(self) -> list[FilterCondition]:
        return list(self._programmatic.values())

    def __repr__(self) -> str:
        """String representation."""
        return f"FilterEngine(programmatic={sorted(self._programmatic)})"
