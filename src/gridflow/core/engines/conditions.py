"""
Typed filter conditions.

A condition is resolved once, when it is built, into one of three variants:
``ScalarCondition`` for plain values, ``DateCondition`` for date and datetime
columns and ``FunctionCondition`` for caller supplied predicates. Operators
read with the row value on the left, so ``>`` with value ``1`` keeps rows
whose value is greater than one. The filter value is never the left operand:
``<`` with today as the value keeps rows dated before today, not after it.
"""

from __future__ import annotations

import dataclasses
import operator as op
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from gridflow.core.dates import parse_date_only
from gridflow.core.utils import is_empty

Row = dict[str, Any]
Predicate = Callable[..., bool]

_RELATIONAL: dict[str, Callable[[Any, Any], bool]] = {
    "<": op.lt,
    "<=": op.le,
    ">": op.gt,
    ">=": op.ge,
}

OPERATORS = frozenset({"equals", "like", "!=", "between", "in", *_RELATIONAL})


def _compare(compare: Callable[[Any, Any], bool], left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    try:
        return bool(compare(left, right))
    except TypeError:
        # Mixed types (e.g. str against int) never satisfy a relational filter.
        return False


def _between(row_value: Any, bounds: Any) -> bool:
    if not isinstance(bounds, (list, tuple)) or len(bounds) != 2:
        return False
    low, high = bounds
    return _compare(op.ge, row_value, low) and _compare(op.le, row_value, high)


def _like(row_value: Any, needle: Any) -> bool:
    if is_empty(row_value):
        return False
    return str(needle).lower() in str(row_value).lower()


def _in(row_value: Any, options: Any) -> bool:
    if not isinstance(options, (list, tuple, set, frozenset)):
        return row_value == options
    if len(options) == 0:
        return True
    return row_value in options


def evaluate_operator(name: str, row_value: Any, value: Any) -> bool:
    """Evaluate operator *name* for ``row_value <name> value``."""
    if name == "equals":
        return row_value == value
    if name == "!=":
        return row_value != value
    if name == "like":
        return _like(row_value, value)
    if name == "between":
        return _between(row_value, value)
    if name == "in":
        return _in(row_value, value)
    if name in _RELATIONAL:
        return _compare(_RELATIONAL[name], row_value, value)
    raise ValueError(f"Unsupported filter operator: {name!r}")


@dataclass(frozen=True, slots=True)
class FilterCondition(ABC):
    """Base class for a single column condition."""

    field: str
    value: Any
    field_type: str = "string"

    @abstractmethod
    def evaluate(self, row_value: Any, row: Row) -> bool:
        """Return True when *row* satisfies the condition."""
        raise NotImplementedError

    def matches(self, row: Row) -> bool:
        return self.evaluate(row.get(self.field), row)


@dataclass(frozen=True, slots=True)
class ScalarCondition(FilterCondition):
    """Relational condition on strings, numbers and plain objects."""

    operator: str = "equals"

    def __post_init__(self) -> None:
        if self.operator not in OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.operator!r}")

    def evaluate(self, row_value: Any, row: Row) -> bool:
        return evaluate_operator(self.operator, row_value, self.value)


@dataclass(frozen=True, slots=True)
class DateCondition(FilterCondition):
    """
    Condition on date columns, compared at day granularity.

    The filter value is expected to be normalised to midnight already; row
    values are parsed and truncated before comparison. A row value that
    cannot be read as a date never matches.
    """

    operator: str = "equals"

    def __post_init__(self) -> None:
        if self.operator not in OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.operator!r}")

    def evaluate(self, row_value: Any, row: Row) -> bool:
        row_date = parse_date_only(row_value)
        if row_date is None:
            return False
        return evaluate_operator(self.operator, row_date, self.value)


@dataclass(frozen=True, slots=True)
class FunctionCondition(FilterCondition):
    """Condition delegating to ``predicate(value, row_value, row, params)``."""

    predicate: Predicate = dataclasses.field(default=lambda *_: True)
    params: dict[str, Any] = dataclasses.field(default_factory=dict)

    def evaluate(self, row_value: Any, row: Row) -> bool:
        return bool(self.predicate(self.value, row_value, row, self.params))
