"""The grid: owns a context, wires its modules and drives render cycles."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from gridflow.core.collaborators import Notifier, PagerView, Renderer, Row, RowCountView
from gridflow.core.context import GridContext
from gridflow.core.engines.conditions import Predicate
from gridflow.core.events import Subscription
from gridflow.core.modules.base import GridModule
from gridflow.core.registry import ModuleRegistry, default_registry
from gridflow.core.schema import ColumnSpec, GridSettings, merge_settings
from gridflow.core.utils import get_logger

logger = get_logger(__name__)


class DataGrid:
    """
    A table grid driven by an event bus.

    Modules are chosen from the settings: filter and sort when enabled,
    the pager or the plain row module, and the row-count and refresh modules
    when their UI hooks are configured. ``init`` loads data and performs the
    first render; afterwards every user action ends in a ``render`` event
    whose stages run filter, sort, page/draw and then observers.

    Example:
        grid = DataGrid({"data": rows, "columns": [{"field": "id", "type": "number"}]})
        await grid.init()
        await grid.set_filter("id", 3, ">", "number")
    """

    def __init__(
        self,
        settings: GridSettings | Mapping[str, Any] | None = None,
        *,
        renderer: Renderer | None = None,
        pager_view: PagerView | None = None,
        row_count_view: RowCountView | None = None,
        notifier: Notifier | None = None,
        client: httpx.AsyncClient | None = None,
        registry: ModuleRegistry | None = None,
    ) -> None:
        if isinstance(settings, GridSettings):
            self.settings = settings
        else:
            self.settings = merge_settings(settings)

        self.context = GridContext.create(
            self.settings,
            renderer=renderer,
            pager_view=pager_view,
            row_count_view=row_count_view,
            notifier=notifier,
            client=client,
        )
        self.registry = registry or default_registry()
        self.is_initialized = False
        self._modules_initialized = False

        self.add_modules(*self._default_modules())

    def _default_modules(self) -> list[str]:
        settings = self.settings
        names: list[str] = []
        if settings.enable_filter:
            names.append("filter")
        if settings.enable_sort:
            names.append("sort")
        names.append("pager" if settings.enable_paging else "row")
        if settings.row_count_id:
            names.append("row_count")
        if settings.refreshable_id:
            names.append("refresh")
        return names

    def add_modules(self, *names: str) -> None:
        """Instantiate registered modules by name; modules already present are skipped."""
        for name in names:
            if name in self.context.modules:
                continue
            module = self.registry.create(name, self.context)
            self.context.modules[name] = module
            if self._modules_initialized:
                module.initialize()
            logger.debug("Added module %s", name)

    def module(self, name: str) -> Any:
        """Return the module registered as *name*."""
        try:
            return self.context.modules[name]
        except KeyError:
            raise KeyError(f"Module '{name}' is not enabled on this grid") from None

    @property
    def modules(self) -> list[GridModule]:
        return list(self.context.modules.values())

    def add_column(
        self, column: ColumnSpec | Mapping[str, Any], index: int | None = None
    ) -> ColumnSpec:
        """Add a column at *index* (appended by default)."""
        spec = self.context.columns.add_column(column, index)
        if self._modules_initialized and "filter" in self.context.modules:
            self.context.modules["filter"].add_control(spec)
        return spec

    async def init(self) -> None:
        """Load the initial data, initialise modules and render once."""
        if self.is_initialized:
            return

        settings = self.settings
        pipeline = self.context.pipeline
        if not self._modules_initialized:
            self._modules_initialized = True
            if not settings.remote_processing and settings.ajax_url:
                pipeline.add_step("init", self.context.persistence.set_data)
                pipeline.add_step("refresh", self.context.persistence.set_data)
            for module in self.context.modules.values():
                module.initialize()

        await pipeline.execute("init")
        self.is_initialized = True
        logger.info(
            "Grid %s initialised with modules %s",
            settings.base_id_name,
            list(self.context.modules),
        )
        await self.render()

    async def render(self) -> None:
        await self.context.events.trigger("render")

    async def set_data(self, rows: Any) -> None:
        """Replace the dataset and re-render."""
        self.context.persistence.set_data(rows)
        await self.render()

    async def refresh(self) -> None:
        """Re-run the refresh pipeline steps and re-render."""
        if not self.is_initialized:
            await self.init()
        self.add_modules("refresh")
        await self.context.events.trigger("refresh")

    async def set_filter(
        self,
        field: str,
        value: Any,
        operator: str | Predicate = "equals",
        field_type: Any = "string",
        params: dict[str, Any] | None = None,
    ) -> None:
        await self.module("filter").set_filter(field, value, operator, field_type, params)

    async def remove_filter(self, field: str) -> None:
        await self.module("filter").remove_filter(field)

    async def sort_by(self, field: str, direction: str | None = None) -> None:
        await self.module("sort").sort_by(field, direction)

    async def go_to_page(self, page: Any) -> int:
        return await self.module("pager").go_to(page)

    def stage_order(self, event: str = "render") -> tuple[Subscription, ...]:
        """Subscriptions of *event* in the order a trigger runs them."""
        return self.context.events.subscribers(event)

    @property
    def rows(self) -> list[Row]:
        """Working rows (filtered and sorted, not yet paged) after the last render."""
        return self.context.persistence.data

    @property
    def row_count(self) -> int:
        return self.context.renderer.row_count

    async def aclose(self) -> None:
        await self.context.loader.aclose()

    def __repr__(self) -> str:
        """String representation."""
        return f"DataGrid({self.settings.base_id_name!r}, modules={list(self.context.modules)})"
