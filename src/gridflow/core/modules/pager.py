"""Paged row drawing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from gridflow.core.engines.page import PageEngine
from gridflow.core.events import Stage
from gridflow.core.modules.base import GridModule
from gridflow.core.utils import get_logger, to_int

if TYPE_CHECKING:  # pragma: no cover - import for type checking only
    from gridflow.core.context import GridContext

logger = get_logger(__name__)


class PagerModule(GridModule):
    """
    Draws one page of the sorted rows and the pager buttons.

    A render always lands on page 1 because filters or sort may have
    changed; ``go_to`` moves between pages of the current result without
    re-running the earlier stages locally.
    """

    name = "pager"
    stage = Stage.PAGE

    def __init__(self, context: GridContext) -> None:
        super().__init__(context)
        self.engine = PageEngine(
            rows_per_page=self.settings.pager_rows_per_page,
            pages_to_display=self.settings.pager_pages_to_display,
            center_offset=self.settings.pager_center_offset,
        )

    def initialize(self) -> None:
        events = self.context.events
        if self.remote:
            events.subscribe("remoteParams", self.remote_params, priority=self.stage)
            events.subscribe("render", self.handle_remote, is_async=True, priority=self.stage)
        else:
            events.subscribe("render", self.handle_local, priority=self.stage)

    def handle_local(self, page: Any = 1) -> None:
        persistence = self.context.persistence
        self.engine.total_rows = persistence.row_count
        current = self.engine.go_to(page)

        rows = self.engine.slice(persistence.data, current)
        self.context.renderer.render_rows(rows, persistence.row_count)
        self.context.pager_view.render(self.engine.window())

    async def handle_remote(self, page: Any = 1) -> None:
        requested = to_int(page)
        self.engine.current_page = requested if requested is not None and requested > 0 else 1

        params = self.context.events.chain("remoteParams", dict(self.settings.remote_params))
        result = await self.context.loader.request_grid_data(self.settings.remote_source, params)

        self.engine.total_rows = result["rowCount"]
        self.engine.current_page = self.engine.validate_page(self.engine.current_page)
        self.context.persistence.set_data(result["data"])
        self.context.renderer.render_rows(self.context.persistence.data, to_int(result["rowCount"]))
        self.context.pager_view.render(self.engine.window())
        logger.debug(
            "Rendered remote page %d of %d", self.engine.current_page, self.engine.total_pages()
        )

    def remote_params(self, params: dict[str, Any]) -> dict[str, Any]:
        return self.engine.remote_params(params)

    async def go_to(self, page: Any) -> int:
        """Show *page* of the current result and return the page actually shown."""
        if self.remote:
            await self.handle_remote(page)
        else:
            self.handle_local(page)
        await self.context.events.trigger("pageChange")
        return self.engine.current_page
