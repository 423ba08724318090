"""Unpaged row drawing."""

from __future__ import annotations

from gridflow.core.events import Stage
from gridflow.core.modules.base import GridModule
from gridflow.core.utils import to_int


class RowModule(GridModule):
    """Draws every working row when paging is disabled."""

    name = "row"
    stage = Stage.PAGE

    def initialize(self) -> None:
        if self.remote:
            self.context.events.subscribe(
                "render", self.handle_remote, is_async=True, priority=self.stage
            )
        else:
            self.context.events.subscribe("render", self.handle_local, priority=self.stage)

    def handle_local(self) -> None:
        self.context.renderer.render_rows(self.context.persistence.data)

    async def handle_remote(self) -> None:
        params = self.context.events.chain("remoteParams", dict(self.settings.remote_params))
        result = await self.context.loader.request_grid_data(self.settings.remote_source, params)

        self.context.persistence.set_data(result["data"])
        self.context.renderer.render_rows(self.context.persistence.data, to_int(result["rowCount"]))
