"""In-memory row storage shared by the grid modules."""

from __future__ import annotations

import copy
from typing import Any

from gridflow.core.utils import get_logger

logger = get_logger(__name__)

Row = dict[str, Any]


class DataStore:
    """
    Holds the working dataset and the snapshot it is derived from.

    ``data`` is the working set that filter, sort and page mutate. The
    snapshot is a deep copy taken on every load and is only ever read, so the
    working set can always be rebuilt from it.
    """

    def __init__(self, rows: Any = None) -> None:
        self.data: list[Row] = []
        self._snapshot: list[Row] = []
        self.set_data(rows)

    def set_data(self, rows: Any) -> None:
        """Replace both datasets; anything other than a list resets them to empty."""
        if not isinstance(rows, list):
            if rows is not None:
                logger.warning(
                    "Ignoring dataset of type %s; resetting to empty", type(rows).__name__
                )
            self.data = []
            self._snapshot = []
            return

        self.data = rows
        self._snapshot = copy.deepcopy(rows)

    def restore_data(self) -> None:
        """Reset the working set to a fresh copy of the snapshot."""
        self.data = copy.deepcopy(self._snapshot)

    @property
    def snapshot(self) -> list[Row]:
        """The last loaded dataset. Callers must not mutate it."""
        return self._snapshot

    @property
    def row_count(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        """Get the number of working rows."""
        return len(self.data)

    def __repr__(self) -> str:
        """String representation."""
        return f"DataStore(rows={len(self.data)}, snapshot={len(self._snapshot)})"
