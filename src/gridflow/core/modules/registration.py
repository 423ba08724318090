"""Registration of the built-in grid modules.

This module registers all built-in modules with the ModuleRegistry.
It can be called explicitly or discovered via entry points.
"""

from __future__ import annotations

from gridflow.core.modules.filter import FilterModule
from gridflow.core.modules.pager import PagerModule
from gridflow.core.modules.refresh import RefreshModule
from gridflow.core.modules.row import RowModule
from gridflow.core.modules.row_count import RowCountModule
from gridflow.core.modules.sort import SortModule
from gridflow.core.registry import ModuleRegistry


def register_builtin_modules(registry: ModuleRegistry) -> None:
    """Register every built-in module with *registry*."""
    registry.register(
        "filter",
        FilterModule,
        tags={"local", "remote", "ui"},
        description="Header and programmatic filters",
    )
    registry.register(
        "sort",
        SortModule,
        tags={"local", "remote", "ui"},
        description="Single-column header sorting",
    )
    registry.register(
        "pager",
        PagerModule,
        tags={"local", "remote", "ui"},
        description="Paged row drawing with a sliding window of page buttons",
    )
    registry.register(
        "row",
        RowModule,
        tags={"local", "remote"},
        description="Draws every row when paging is disabled",
    )
    registry.register(
        "row_count",
        RowCountModule,
        tags={"ui"},
        description="Publishes the drawn row count",
    )
    registry.register(
        "refresh",
        RefreshModule,
        tags={"local", "remote"},
        description="Reloads pipeline data, then re-renders",
    )
