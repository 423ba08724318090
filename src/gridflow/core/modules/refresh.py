"""Reloading data and option lists on demand."""

from __future__ import annotations

from gridflow.core.events import Stage
from gridflow.core.modules.base import GridModule
from gridflow.core.utils import get_logger

logger = get_logger(__name__)


class RefreshModule(GridModule):
    """Runs the pipeline's ``refresh`` steps, then a full render."""

    name = "refresh"
    stage = Stage.OBSERVE

    def initialize(self) -> None:
        self.context.events.subscribe("refresh", self.handle_refresh, is_async=True)

    async def handle_refresh(self) -> None:
        pipeline = self.context.pipeline
        if pipeline.has_pipeline("refresh"):
            logger.info("Refreshing %d pipeline steps", pipeline.count_steps("refresh"))
            await pipeline.execute("refresh")
        await self.context.events.trigger("render")
