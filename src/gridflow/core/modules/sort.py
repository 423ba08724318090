"""Single-column header sorting."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from gridflow.core.engines.sort import SortEngine, SortState
from gridflow.core.events import Stage
from gridflow.core.modules.base import GridModule
from gridflow.core.utils import get_logger

if TYPE_CHECKING:  # pragma: no cover - import for type checking only
    from gridflow.core.context import GridContext

logger = get_logger(__name__)


class SortModule(GridModule):
    """
    Sorts the filtered rows, or asks the server to.

    ``indicators`` mirrors the header sort arrows: the active column maps to
    its direction and every other sortable column to "".
    """

    name = "sort"
    stage = Stage.SORT

    def __init__(self, context: GridContext) -> None:
        super().__init__(context)
        self.engine = SortEngine(
            default_direction=self.settings.sort_default_direction,
            on_clear=self._clear_indicator,
        )
        self.indicators: dict[str, str] = {}

    def initialize(self) -> None:
        self.indicators = {
            column.field: "" for column in self.context.columns.sortable if column.field
        }
        if self.engine.state is not None:
            self.indicators[self.engine.state.column] = self.engine.state.direction
        if self.remote:
            self.context.events.subscribe("remoteParams", self.remote_params, priority=self.stage)
        else:
            self.context.events.subscribe("render", self.handle_local, priority=self.stage)

    def _clear_indicator(self, column: str) -> None:
        self.indicators[column] = ""

    async def sort_by(self, field: str, direction: str | None = None) -> SortState:
        """
        Activate sorting on *field* and re-render.

        Without *direction* the column toggles: a newly activated column
        starts at the default direction and an active one flips.
        """
        column = self.context.columns.get(field)
        if not column.is_sortable:
            raise ValueError(f"Column {field!r} is not sortable")

        if direction is None:
            state = self.engine.toggle(field, column.type)
        else:
            state = self.engine.set_state(field, direction, column.type)
        self.indicators[field] = state.direction
        logger.debug("Sorting by %s %s", state.column, state.direction)

        await self.context.events.trigger("render")
        return state

    def handle_local(self) -> None:
        self.engine.sort(self.context.persistence.data)

    def remote_params(self, params: dict[str, Any]) -> dict[str, Any]:
        return self.engine.remote_params(
            params,
            self.settings.remote_sort_default_column,
            self.settings.remote_sort_default_direction,
        )
