"""Row count display."""

from __future__ import annotations

from gridflow.core.events import Stage
from gridflow.core.modules.base import GridModule


class RowCountModule(GridModule):
    """
    Publishes the drawn row count once everything else has rendered.

    The count is also refreshed on ``pageChange``, which page navigation
    triggers without running the render stages.
    """

    name = "row_count"
    stage = Stage.OBSERVE

    def initialize(self) -> None:
        self.context.events.subscribe("render", self.handle_count, priority=self.stage)
        self.context.events.subscribe("pageChange", self.handle_count, priority=self.stage)

    def handle_count(self) -> None:
        self.context.row_count_view.update(self.context.renderer.row_count)
