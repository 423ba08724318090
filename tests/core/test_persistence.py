"""Tests for the working dataset and its snapshot."""

from typing import Any

import pytest

from gridflow.core.persistence import DataStore


def test_set_data_keeps_working_set_and_deep_copies_snapshot(
    sample_rows: list[dict[str, Any]],
) -> None:
    store = DataStore()
    store.set_data(sample_rows)

    assert store.data is sample_rows
    assert store.snapshot == sample_rows
    assert store.snapshot[0] is not sample_rows[0]
    assert store.row_count == len(store) == 4


@pytest.mark.parametrize("value", [None, {"id": 1}, "rows", 42])
def test_non_list_input_resets_to_empty(value: Any, sample_rows: list[dict[str, Any]]) -> None:
    store = DataStore(sample_rows)

    store.set_data(value)

    assert store.data == []
    assert store.snapshot == []
    assert store.row_count == 0


def test_restore_law(sample_rows: list[dict[str, Any]]) -> None:
    store = DataStore(sample_rows)
    store.data = store.data[:1]
    store.data[0]["name"] = "changed"

    store.restore_data()

    assert store.data == store.snapshot
    assert store.data is not store.snapshot
    assert store.snapshot[0]["name"] == "alpha"

    store.data[1]["name"] = "changed again"
    assert store.snapshot[1]["name"] == "Bravo"
