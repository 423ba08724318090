"""Tests for sort comparators and sort state."""

from typing import Any

import pytest

from gridflow.core.engines.sort import (
    SortEngine,
    SortState,
    compare_dates,
    compare_numbers,
    compare_strings,
    comparator_for,
)


def test_compare_strings_ignores_case() -> None:
    assert compare_strings("apple", "Banana") == -1
    assert compare_strings("apple", "APPLE") == 0
    assert compare_strings("apple", "Banana", "desc") == 1


@pytest.mark.parametrize(
    "compare, value",
    [(compare_strings, "x"), (compare_numbers, 1), (compare_dates, "2024-01-01")],
)
def test_empty_values_sort_first_ascending(compare: Any, value: Any) -> None:
    for empty in (None, "", float("nan")):
        assert compare(empty, value, "asc") == -1
        assert compare(value, empty, "asc") == 1
        assert compare(empty, value, "desc") == 1


def test_falsy_values_sort_as_blank() -> None:
    assert compare_numbers(0, -1, "asc") == -1
    assert compare_numbers(0, 5, "asc") == -1
    assert compare_numbers(0, None, "asc") == 0
    assert compare_strings(False, "a", "asc") == -1

    rows = [{"v": 5}, {"v": -1}, {"v": 0}, {"v": 2}]
    SortEngine().sort(rows, SortState("v", "asc", "number"))
    assert [row["v"] for row in rows] == [0, -1, 2, 5]


def test_compare_dates_treats_unparseable_as_empty() -> None:
    assert compare_dates("garbage", "2024-01-01") == -1
    assert compare_dates("2024-02-01", "01/15/2024") == 1
    assert compare_dates("garbage", None) == 0


def test_comparator_for_defaults_to_strings() -> None:
    assert comparator_for("number") is compare_numbers
    assert comparator_for("datetime") is compare_dates
    assert comparator_for("object") is compare_strings
    assert comparator_for(None) is compare_strings


def test_sort_orders_rows_in_place() -> None:
    rows = [{"v": 2}, {"v": None}, {"v": 10}, {"v": 1}]
    engine = SortEngine()

    engine.sort(rows, SortState("v", "asc", "number"))
    assert [row["v"] for row in rows] == [None, 1, 2, 10]

    engine.sort(rows, SortState("v", "desc", "number"))
    assert [row["v"] for row in rows] == [10, 2, 1, None]


def test_string_sort_is_not_numeric() -> None:
    rows = [{"v": "10"}, {"v": "9"}, {"v": "b"}, {"v": "A"}]

    SortEngine().sort(rows, SortState("v", "asc", "string"))

    assert [row["v"] for row in rows] == ["10", "9", "A", "b"]


def test_sort_without_state_leaves_rows_alone() -> None:
    rows = [{"v": 2}, {"v": 1}]

    SortEngine().sort(rows)

    assert rows == [{"v": 2}, {"v": 1}]


def test_toggle_starts_at_default_and_flips() -> None:
    cleared: list[str] = []
    engine = SortEngine(on_clear=cleared.append)

    assert engine.toggle("id", "number") == SortState("id", "desc", "number")
    assert engine.toggle("id", "number").direction == "asc"
    assert engine.toggle("id", "number").direction == "desc"
    assert cleared == []

    state = engine.toggle("name")
    assert state == SortState("name", "desc", "string")
    assert cleared == ["id"]


def test_set_state_and_reset_clear_previous_indicator() -> None:
    cleared: list[str] = []
    engine = SortEngine(default_direction="asc", on_clear=cleared.append)

    assert engine.toggle("id").direction == "asc"
    engine.set_state("name", "desc")
    engine.reset()

    assert cleared == ["id", "name"]
    assert engine.state is None


def test_invalid_direction_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported sort direction"):
        SortState("id", "down")
    with pytest.raises(ValueError, match="Unsupported sort direction"):
        SortEngine(default_direction="up")


def test_remote_params_fall_back_to_defaults() -> None:
    engine = SortEngine()

    assert engine.remote_params({}, "id", "asc") == {"sort": "id", "direction": "asc"}

    engine.toggle("name")
    assert engine.remote_params({"page": 2}, "id", "asc") == {
        "page": 2,
        "sort": "name",
        "direction": "desc",
    }
