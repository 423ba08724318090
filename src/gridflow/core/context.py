"""Shared state handed to every grid module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from gridflow.core.collaborators import (
    FilterControl,
    LoggingNotifier,
    MemoryPagerView,
    MemoryRenderer,
    MemoryRowCountView,
    Notifier,
    PagerView,
    Renderer,
    RowCountView,
)
from gridflow.core.columns import ColumnManager
from gridflow.core.events import EventBus
from gridflow.core.persistence import DataStore
from gridflow.core.pipeline import DataPipeline
from gridflow.core.schema import GridSettings
from gridflow.core.transport import DataLoader


@dataclass
class GridContext:
    """
    Everything a module may touch, owned by one grid.

    Modules receive the context instead of reaching for module level state,
    so the single DataStore and its mutation points stay traceable.
    """

    settings: GridSettings
    events: EventBus
    persistence: DataStore
    pipeline: DataPipeline
    loader: DataLoader
    columns: ColumnManager
    notifier: Notifier
    renderer: Renderer
    pager_view: PagerView
    row_count_view: RowCountView
    controls: dict[str, FilterControl] = field(default_factory=dict)
    modules: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        settings: GridSettings,
        *,
        renderer: Renderer | None = None,
        pager_view: PagerView | None = None,
        row_count_view: RowCountView | None = None,
        notifier: Notifier | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> GridContext:
        """Wire a context from *settings*, using in-memory collaborators where none are given."""
        notifier = notifier or LoggingNotifier()
        loader = DataLoader(notifier, client=client)
        return cls(
            settings=settings,
            events=EventBus(),
            persistence=DataStore(settings.data),
            pipeline=DataPipeline(loader.fetch_json, notifier, default_locator=settings.ajax_url),
            loader=loader,
            columns=ColumnManager(settings.columns),
            notifier=notifier,
            renderer=renderer or MemoryRenderer(),
            pager_view=pager_view or MemoryPagerView(),
            row_count_view=row_count_view or MemoryRowCountView(),
        )
