"""Pure data engines used by the grid modules."""

from gridflow.core.engines.conditions import (
    DateCondition,
    FilterCondition,
    FunctionCondition,
    ScalarCondition,
)
from gridflow.core.engines.filter import FilterEngine, convert_to_type
from gridflow.core.engines.page import PageEngine, PagerButton, PagerWindow
from gridflow.core.engines.sort import SortEngine, SortState

__all__ = [
    "FilterCondition",
    "ScalarCondition",
    "DateCondition",
    "FunctionCondition",
    "FilterEngine",
    "convert_to_type",
    "SortEngine",
    "SortState",
    "PageEngine",
    "PagerButton",
    "PagerWindow",
]
