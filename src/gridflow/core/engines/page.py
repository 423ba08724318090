"""Page math: page counts, clamping and the sliding window of pager buttons."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from gridflow.core.utils import to_int, to_number

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PagerButton:
    """A single pager button."""

    page: int
    label: str
    active: bool = False
    disabled: bool = False


@dataclass(frozen=True, slots=True)
class PagerWindow:
    """What a pager view should draw for the current page."""

    current_page: int
    total_pages: int
    buttons: tuple[PagerButton, ...] = field(default_factory=tuple)

    @property
    def pages(self) -> list[int]:
        """Numbered pages shown in the window."""
        return [button.page for button in self.buttons if button.label == str(button.page)]


class PageEngine:
    """
    Page state and the arithmetic around it.

    Attributes:
        current_page: 1-based page being shown
        rows_per_page: Rows per page; 0 means everything on one page
        total_rows: Rows available, counted locally or reported by a server
        pages_to_display: Size of the sliding window of numbered buttons
        center_offset: Position of the current page inside the window
            (defaults to the middle, rounding up)
    """

    def __init__(
        self,
        rows_per_page: int = 25,
        pages_to_display: int = 5,
        center_offset: int | None = None,
        total_rows: Any = 0,
    ) -> None:
        self.rows_per_page = rows_per_page
        self.pages_to_display = max(1, pages_to_display)
        self.center_offset = center_offset
        self.total_rows = total_rows
        self.current_page = 1

    @property
    def middle(self) -> int:
        if self.center_offset is not None:
            return min(max(1, self.center_offset), self.pages_to_display)
        return math.ceil(self.pages_to_display / 2)

    def total_pages(self) -> int:
        """Number of pages for the current ``total_rows``; never less than one."""
        if not self.rows_per_page:
            return 1
        total = to_number(self.total_rows)
        if total is None:
            total = 1
        return max(1, math.ceil(total / self.rows_per_page))

    def validate_page(self, page: Any) -> int:
        """Coerce *page* to an int within ``[1, total_pages()]``; invalid input gives 1."""
        number = to_int(page)
        if number is None or number < 1:
            return 1
        return min(number, self.total_pages())

    def first_display_page(self, current: int | None = None) -> int:
        """
        First numbered button of the window for page *current*.

        The window is centred on *current* where possible and clamped so it
        never runs past the last page.

        Examples:
            With 10 pages and a window of 5, page 1 starts at 1, page 6
            starts at 4 and page 10 starts at 6.
        """
        page = self.validate_page(self.current_page if current is None else current)
        total = self.total_pages()
        if page <= self.middle:
            return 1
        if page + (self.pages_to_display - self.middle) > total:
            return max(1, total - self.pages_to_display + 1)
        return page - self.middle + 1

    def window(self, current: int | None = None) -> PagerWindow:
        """Describe first/previous, numbered and next/last buttons for page *current*."""
        page = self.validate_page(self.current_page if current is None else current)
        total = self.total_pages()
        first = self.first_display_page(page)
        last = min(total, first + self.pages_to_display - 1)

        buttons: list[PagerButton] = [
            PagerButton(page=1, label="first", disabled=page == 1),
            PagerButton(page=max(1, page - 1), label="previous", disabled=page == 1),
        ]
        buttons.extend(
            PagerButton(page=number, label=str(number), active=number == page)
            for number in range(first, last + 1)
        )
        buttons.extend(
            [
                PagerButton(page=min(total, page + 1), label="next", disabled=page == total),
                PagerButton(page=total, label="last", disabled=page == total),
            ]
        )
        return PagerWindow(current_page=page, total_pages=total, buttons=tuple(buttons))

    def slice(self, rows: Sequence[T], page: int | None = None) -> list[T]:
        """Rows belonging to *page* (the current page by default)."""
        if not self.rows_per_page:
            return list(rows)
        number = self.current_page if page is None else page
        start = (number - 1) * self.rows_per_page
        return list(rows[start : start + self.rows_per_page])

    def go_to(self, page: Any) -> int:
        """Validate *page* and make it current."""
        self.current_page = self.validate_page(page)
        return self.current_page

    def remote_params(self, params: dict[str, Any]) -> dict[str, Any]:
        params["page"] = self.current_page
        return params

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"PageEngine(page={self.current_page}/{self.total_pages()}, "
            f"rows_per_page={self.rows_per_page}, total_rows={self.total_rows})"
        )
