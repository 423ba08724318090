"""Core engine: event bus, data store, pipeline, engines and grid modules."""

from gridflow.core.events import EventBus, Stage
from gridflow.core.grid import DataGrid
from gridflow.core.persistence import DataStore
from gridflow.core.pipeline import DataPipeline
from gridflow.core.registry import ModuleRegistry, ModuleSpec
from gridflow.core.schema import ColumnSpec, FieldType, GridSettings

__all__ = [
    "DataGrid",
    "EventBus",
    "Stage",
    "DataStore",
    "DataPipeline",
    "ModuleRegistry",
    "ModuleSpec",
    "ColumnSpec",
    "FieldType",
    "GridSettings",
]
