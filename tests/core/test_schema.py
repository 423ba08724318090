"""Tests for grid and column settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from gridflow.core.schema import (
    ColumnSpec,
    FieldType,
    FilterElement,
    GridSettings,
    load_settings,
    merge_settings,
)


def test_defaults() -> None:
    settings = GridSettings()

    assert settings.base_id_name == "datagrid"
    assert settings.data is None
    assert settings.columns == []
    assert settings.enable_paging and settings.enable_filter and settings.enable_sort
    assert settings.pager_rows_per_page == 25
    assert settings.pager_pages_to_display == 5
    assert settings.sort_default_direction == "desc"
    assert settings.remote_processing is False
    assert settings.date_format == "MM/dd/yyyy"


def test_merge_settings_does_not_mutate_options() -> None:
    options = {"remote_params": {"tenant": 1}}

    first = merge_settings(options, pager_rows_per_page=10)
    second = merge_settings(options)
    first.remote_params["extra"] = True

    assert first.pager_rows_per_page == 10
    assert second.pager_rows_per_page == 25
    assert options == {"remote_params": {"tenant": 1}}
    assert GridSettings().remote_params == {}


def test_remote_processing_mapping_sets_sort_defaults() -> None:
    settings = GridSettings(
        remote_processing={"column": "created", "direction": "asc"},
        columns=[{"field": "id"}],
    )

    assert settings.remote_processing is True
    assert settings.remote_sort_default_column == "created"
    assert settings.remote_sort_default_direction == "asc"


def test_remote_sort_defaults_to_first_field_column() -> None:
    settings = GridSettings(
        remote_processing=True,
        columns=[{"label": "Actions"}, {"field": "id"}, {"field": "name"}],
    )

    assert settings.remote_sort_default_column == "id"
    assert settings.remote_sort_default_direction == "desc"


def test_ajax_url_includes_ajax_params() -> None:
    settings = GridSettings(ajax_url="http://test/rows", ajax_params={"state": ["ca", "az"]})

    assert settings.ajax_url == "http://test/rows?state=ca&state=az"
    assert settings.remote_source == "http://test/rows?state=ca&state=az"
    assert GridSettings(remote_url="http://test/a", ajax_url="http://test/b").remote_source == (
        "http://test/a"
    )


@pytest.mark.parametrize(
    "options",
    [
        {"sort_default_direction": "up"},
        {"pager_pages_to_display": 0},
        {"columns": [{"field": "id", "type": "currency"}]},
    ],
)
def test_invalid_settings_raise(options: dict) -> None:
    with pytest.raises(ValidationError):
        GridSettings(**options)


def test_column_defaults_and_properties() -> None:
    column = ColumnSpec(field="created", type="date", filter_type="between")

    assert column.label == "created"
    assert column.type is FieldType.DATE
    assert column.type.is_temporal
    assert column.has_filter and column.is_sortable
    assert column.filter_element is FilterElement.BETWEEN

    display_only = ColumnSpec(label="Actions", filter_type="equals")
    assert not display_only.has_filter
    assert not display_only.is_sortable


def test_column_filter_elements() -> None:
    multi = ColumnSpec(field="state", filter_type="equals", filter_multi_select=True)
    select = ColumnSpec(field="state", filter_type="equals", filter_values={"ca": "California"})
    remote = ColumnSpec(field="state", filter_type="equals", filter_values="http://test/states")

    assert multi.filter_element is FilterElement.MULTI
    assert multi.operator == "in"
    assert select.filter_element is FilterElement.SELECT
    assert select.filter_values_remote_source is None
    assert remote.filter_values_remote_source == "http://test/states"


def test_column_accepts_predicate_filter() -> None:
    def predicate(value, row_value, row, params) -> bool:
        return True

    column = ColumnSpec(field="id", filter_type=predicate, filter_multi_select=True)

    assert column.operator is predicate


def test_load_settings_from_yaml(tmp_path: Path) -> None:
    config = tmp_path / "grid.yaml"
    config.write_text(
        "base_id_name: orders\n"
        "pager_rows_per_page: 10\n"
        "columns:\n"
        "  - field: id\n"
        "    type: number\n"
        "  - field: state\n"
        "    filter_type: equals\n"
    )

    settings = load_settings(config)

    assert settings.base_id_name == "orders"
    assert settings.pager_rows_per_page == 10
    assert [column.field for column in settings.columns] == ["id", "state"]
    assert settings.columns[0].type is FieldType.NUMBER


def test_load_settings_rejects_non_mapping(tmp_path: Path) -> None:
    config = tmp_path / "grid.yaml"
    config.write_text("- one\n- two\n")

    with pytest.raises(ValueError, match="mapping"):
        load_settings(config)
