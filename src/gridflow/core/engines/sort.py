"""Sort comparators and the single-column sort state."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any

from gridflow.core.dates import parse_date
from gridflow.core.utils import get_logger, is_empty

logger = get_logger(__name__)

Comparator = Callable[[Any, Any, str], int]

DIRECTIONS = ("asc", "desc")


def _finish(comparison: int, direction: str) -> int:
    return -comparison if direction == "desc" else comparison


def _is_blank(value: Any) -> bool:
    """Falsy values (None, "", 0, False) and NaN all sort as blank."""
    return is_empty(value) or not value


def _empty_order(a_empty: bool, b_empty: bool) -> int | None:
    """Ordering decided by emptiness alone, or None when both hold values."""
    if a_empty and b_empty:
        return 0
    if a_empty:
        return -1
    if b_empty:
        return 1
    return None


def _cmp(a: Any, b: Any) -> int:
    if a > b:
        return 1
    if a < b:
        return -1
    return 0


def compare_strings(a: Any, b: Any, direction: str = "asc") -> int:
    """Case-insensitive comparison; blanks first in ascending order."""
    decided = _empty_order(_is_blank(a), _is_blank(b))
    if decided is not None:
        return _finish(decided, direction)
    return _finish(_cmp(str(a).upper(), str(b).upper()), direction)


def compare_numbers(a: Any, b: Any, direction: str = "asc") -> int:
    decided = _empty_order(_is_blank(a), _is_blank(b))
    if decided is not None:
        return _finish(decided, direction)
    try:
        return _finish(_cmp(a, b), direction)
    except TypeError:
        return _finish(_cmp(str(a), str(b)), direction)


def compare_dates(a: Any, b: Any, direction: str = "asc") -> int:
    """Compare parsed dates; values that do not parse count as blank."""
    date_a = parse_date(a)
    date_b = parse_date(b)
    decided = _empty_order(date_a is None, date_b is None)
    if decided is not None:
        return _finish(decided, direction)
    return _finish(_cmp(date_a, date_b), direction)


COMPARATORS: dict[str, Comparator] = {
    "string": compare_strings,
    "number": compare_numbers,
    "date": compare_dates,
    "datetime": compare_dates,
}


def comparator_for(value_type: Any) -> Comparator:
    """Return the comparator for *value_type*, defaulting to string comparison."""
    name = str(getattr(value_type, "value", value_type) or "string")
    return COMPARATORS.get(name, compare_strings)


@dataclass(frozen=True, slots=True)
class SortState:
    """The active sort column and direction."""

    column: str
    direction: str = "desc"
    value_type: str = "string"

    def __post_init__(self) -> None:
        if self.direction not in DIRECTIONS:
            raise ValueError(f"Unsupported sort direction: {self.direction!r}")

    def flipped(self) -> SortState:
        return SortState(
            column=self.column,
            direction="asc" if self.direction == "desc" else "desc",
            value_type=self.value_type,
        )


class SortEngine:
    """
    Tracks the one active sort column and applies it.

    ``toggle`` activates a column at the default direction, or flips the
    direction when the column is already active. ``on_clear`` is told which
    column lost its indicator whenever another column takes over.
    """

    def __init__(
        self,
        default_direction: str = "desc",
        on_clear: Callable[[str], None] | None = None,
    ) -> None:
        if default_direction not in DIRECTIONS:
            raise ValueError(f"Unsupported sort direction: {default_direction!r}")
        self.default_direction = default_direction
        self.on_clear = on_clear
        self.state: SortState | None = None

    def toggle(self, column: str, value_type: Any = "string") -> SortState:
        type_name = str(getattr(value_type, "value", value_type) or "string")
        current = self.state

        if current is not None and current.column == column:
            self.state = current.flipped()
        else:
            if current is not None:
                self.clear_indicator(current.column)
            self.state = SortState(
                column=column, direction=self.default_direction, value_type=type_name
            )

        logger.debug("Sort state now %s %s", self.state.column, self.state.direction)
        return self.state

    def set_state(self, column: str, direction: str, value_type: Any = "string") -> SortState:
        """Activate *column* with an explicit *direction*."""
        type_name = str(getattr(value_type, "value", value_type) or "string")
        if self.state is not None and self.state.column != column:
            self.clear_indicator(self.state.column)
        self.state = SortState(column=column, direction=direction, value_type=type_name)
        return self.state

    def clear_indicator(self, column: str) -> None:
        if self.on_clear is not None:
            self.on_clear(column)

    def reset(self) -> None:
        if self.state is not None:
            self.clear_indicator(self.state.column)
        self.state = None

    def sort(self, rows: list[dict[str, Any]], state: SortState | None = None) -> None:
        """Sort *rows* in place by *state* (the active state by default)."""
        active = state or self.state
        if active is None:
            return
        compare = comparator_for(active.value_type)
        key = cmp_to_key(
            lambda left, right: compare(
                left.get(active.column), right.get(active.column), active.direction
            )
        )
        rows.sort(key=key)

    def remote_params(
        self,
        params: dict[str, Any],
        default_column: str = "",
        default_direction: str = "desc",
    ) -> dict[str, Any]:
        """Add ``sort``/``direction`` to *params*, falling back to the remote defaults."""
        if self.state is not None:
            params["sort"] = self.state.column
            params["direction"] = self.state.direction
        else:
            params["sort"] = default_column
            params["direction"] = default_direction
        return params
