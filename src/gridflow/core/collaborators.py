"""
Boundary protocols for the collaborators a grid drives.

The engine never builds markup itself. It hands datasets to a renderer,
pager windows to a pager view and row counts to a row-count view, reads filter
values from controls, and reports failures through a notifier. The in-memory
implementations below satisfy those protocols for headless use.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from gridflow.core.utils import get_logger

if TYPE_CHECKING:  # pragma: no cover - import for type checking only
    from gridflow.core.engines.page import PagerWindow

logger = get_logger(__name__)

Row = dict[str, Any]


@runtime_checkable
class Renderer(Protocol):
    """Draws a dataset; fully replaced on every call."""

    def render_rows(self, rows: Sequence[Row] | None, row_count: int | None = None) -> None: ...

    @property
    def row_count(self) -> int: ...


@runtime_checkable
class PagerView(Protocol):
    def render(self, window: PagerWindow) -> None: ...


@runtime_checkable
class RowCountView(Protocol):
    def update(self, count: int) -> None: ...


@runtime_checkable
class Notifier(Protocol):
    """User-visible channel for failures."""

    def notify(self, message: str) -> None: ...


@runtime_checkable
class FilterControl(Protocol):
    """A header filter input. ``value`` is read once per render cycle."""

    field: str

    @property
    def value(self) -> Any: ...


class MemoryRenderer:
    """Renderer that keeps the last drawn rows in memory."""

    def __init__(self) -> None:
        self.rows: list[Row] = []
        self._row_count = 0
        self.render_calls = 0

    def render_rows(self, rows: Sequence[Row] | None, row_count: int | None = None) -> None:
        self.render_calls += 1
        if not rows:
            self.rows = []
            self._row_count = 0
            return

        self.rows = list(rows)
        self._row_count = row_count if row_count is not None else len(self.rows)

    @property
    def row_count(self) -> int:
        return self._row_count


class MemoryPagerView:
    def __init__(self) -> None:
        self.window: PagerWindow | None = None

    def render(self, window: PagerWindow) -> None:
        self.window = window


class MemoryRowCountView:
    def __init__(self) -> None:
        self.count: int | None = None

    def update(self, count: int) -> None:
        self.count = count


class LoggingNotifier:
    """Notifier that logs messages and remembers them."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)
        logger.warning("Grid notification: %s", message)


class InputControl:
    """Free-text (or programmatically set) filter input."""

    def __init__(self, field: str, value: Any = "") -> None:
        self.field = field
        self._value = value

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        self._value = value

    def clear(self) -> None:
        self._value = ""

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(field={self.field!r}, value={self._value!r})"


def normalize_options(source: Any) -> list[dict[str, Any]]:
    """
    Normalise filter option sources to ``[{"value": ..., "text": ...}]``.

    Mappings are read as ``{value: text}``; sequences may hold
    ``{"value", "text"}`` mappings (order preserved) or bare values.
    """
    if source is None:
        return []
    if isinstance(source, Mapping):
        return [{"value": key, "text": text} for key, text in source.items()]
    options: list[dict[str, Any]] = []
    for item in source:
        if isinstance(item, Mapping):
            value = item.get("value")
            options.append({"value": value, "text": item.get("text", value)})
        else:
            options.append({"value": item, "text": item})
    return options


class SelectControl(InputControl):
    """
    Single-choice control backed by an option list.

    Option values are compared as strings, the way a browser select element
    exposes them.
    """

    def __init__(self, field: str, options: Any = None, value: Any = "") -> None:
        super().__init__(field, value)
        self.options: list[dict[str, Any]] = normalize_options(options)

    def set_options(self, options: Any) -> None:
        """Replace the options, keeping the selection when it is still offered."""
        self.options = normalize_options(options)
        offered = {str(option["value"]) for option in self.options}
        if self._value != "" and str(self._value) not in offered:
            self._value = ""


class MultiSelectControl(SelectControl):
    """Multi-choice control; ``value`` is a list of selected option values."""

    def __init__(self, field: str, options: Any = None, value: Any = None) -> None:
        super().__init__(field, options, list(value or []))

    def set_options(self, options: Any) -> None:
        self.options = normalize_options(options)
        offered = {str(option["value"]) for option in self.options}
        self._value = [item for item in self._value if str(item) in offered]

    def clear(self) -> None:
        self._value = []


class BetweenControl:
    """Two-input range control. Yields ``[start, end]`` or "" when either is blank."""

    def __init__(self, field: str, start: Any = "", end: Any = "") -> None:
        self.field = field
        self.start = start
        self.end = end

    @property
    def value(self) -> Any:
        if self.start == "" or self.end == "" or self.start is None or self.end is None:
            return ""
        return [self.start, self.end]

    def clear(self) -> None:
        self.start = ""
        self.end = ""
