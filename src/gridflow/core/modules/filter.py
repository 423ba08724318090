"""Header and programmatic filtering."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from gridflow.core.collaborators import (
    BetweenControl,
    FilterControl,
    InputControl,
    MultiSelectControl,
    SelectControl,
)
from gridflow.core.engines.conditions import FilterCondition, FunctionCondition, Predicate
from gridflow.core.engines.filter import FilterEngine
from gridflow.core.events import Stage
from gridflow.core.modules.base import GridModule
from gridflow.core.schema import ColumnSpec, FilterElement
from gridflow.core.utils import get_logger

if TYPE_CHECKING:  # pragma: no cover - import for type checking only
    from gridflow.core.context import GridContext

logger = get_logger(__name__)


def build_control(column: ColumnSpec) -> FilterControl:
    """Create the in-memory control matching the column's filter element."""
    if column.field is None:
        raise ValueError("Filter controls require a column with a field")
    options = None if column.filter_values_remote_source else column.filter_values
    element = column.filter_element

    if element is FilterElement.MULTI:
        return MultiSelectControl(column.field, options)
    if element is FilterElement.SELECT:
        return SelectControl(column.field, options)
    if element is FilterElement.BETWEEN:
        return BetweenControl(column.field)
    return InputControl(column.field)


def _remote_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, list):
        return [_remote_value(item) for item in value]
    return value


class FilterModule(GridModule):
    """
    Filters rows before anything else touches them.

    Local mode rebuilds the working set from the snapshot on every render;
    remote mode copies the raw header values into the request parameters.
    """

    name = "filter"
    stage = Stage.FILTER

    def __init__(self, context: GridContext) -> None:
        super().__init__(context)
        self.engine = FilterEngine(context.persistence)

    def initialize(self) -> None:
        for column in self.context.columns.filterable:
            self.add_control(column)

        if self.remote:
            self.context.events.subscribe("remoteParams", self.remote_params, priority=self.stage)
        else:
            self.context.events.subscribe("render", self.handle_local, priority=self.stage)

    def add_control(self, column: ColumnSpec) -> FilterControl | None:
        """Create (or adopt) the control for *column* and register its option loaders."""
        if not column.has_filter or column.field is None:
            return None

        controls = self.context.controls
        control = controls.get(column.field)
        if control is None:
            control = build_control(column)
            controls[column.field] = control

        source = column.filter_values_remote_source
        set_options = getattr(control, "set_options", None)
        if source and set_options is not None:
            self.context.pipeline.add_step("init", set_options, source)
            if column.filter_values_refresh:
                self.context.pipeline.add_step("refresh", set_options, source)
        return control

    def conditions(self) -> list[FilterCondition]:
        """Header conditions for this cycle followed by the programmatic ones."""
        header = self.engine.header_conditions(self.context.columns, self.context.controls)
        return header + self.engine.programmatic_conditions

    def handle_local(self) -> None:
        conditions = self.conditions()
        if not conditions:
            self.context.persistence.restore_data()
            return
        self.engine.apply_filters(conditions)

    def remote_params(self, params: dict[str, Any]) -> dict[str, Any]:
        for column in self.context.columns.filterable:
            control = self.context.controls.get(column.field or "")
            if control is None:
                continue
            value = control.value
            if value is None or value == "":
                continue
            params[column.field] = value

        for condition in self.engine.programmatic_conditions:
            if isinstance(condition, FunctionCondition):
                continue
            params[condition.field] = _remote_value(condition.value)
        return params

    async def set_filter(
        self,
        field: str,
        value: Any,
        operator: str | Predicate = "equals",
        field_type: Any = "string",
        params: dict[str, Any] | None = None,
    ) -> None:
        self.engine.set_filter(field, value, operator, field_type, params)
        await self.context.events.trigger("render")

    async def remove_filter(self, field: str) -> None:
        if not self.engine.remove_filter(field):
            logger.debug("No programmatic filter on %s to remove", field)
        await self.context.events.trigger("render")
