from __future__ import annotations

import pytest

from rowbridge.db.helpers import (
    _validate_identifier,
    build_delete_sql,
    build_insert_sql,
    build_select_all_sql,
    build_update_sql,
)


@pytest.mark.parametrize("name", ["Singers", "_t", "album_2", "music.Singers"])
def test_valid_identifiers_are_returned_unchanged(name: str) -> None:
    assert _validate_identifier(name, "table") == name


@pytest.mark.parametrize("name", ["'; DROP TABLE--", "1abc", "a b", "a.b.c", "x-y"])
def test_invalid_identifiers_raise(name: str) -> None:
    with pytest.raises(ValueError, match="Invalid table"):
        _validate_identifier(name, "table")


def test_empty_identifier_raises() -> None:
    with pytest.raises(ValueError, match="cannot be empty"):
        _validate_identifier("", "table")


def test_non_string_identifier_raises() -> None:
    with pytest.raises(TypeError):
        _validate_identifier(None, "table")  # type: ignore[arg-type]


def test_long_identifier_raises() -> None:
    with pytest.raises(ValueError, match="128-character"):
        _validate_identifier("a" * 129, "column name")


def test_select_all_sql() -> None:
    assert build_select_all_sql("Singers") == "SELECT * FROM Singers"


def test_insert_sql_keeps_column_order() -> None:
    sql = build_insert_sql("Singers", ["singer_id", "first_name"])
    assert sql == "INSERT INTO Singers (singer_id, first_name) VALUES (:singer_id, :first_name)"


def test_insert_sql_requires_columns() -> None:
    with pytest.raises(ValueError):
        build_insert_sql("Singers", [])


def test_update_sql_sets_non_keys_and_filters_on_keys() -> None:
    sql = build_update_sql("Albums", ["title", "year"], ["singer_id", "album_id"])
    assert sql == (
        "UPDATE Albums SET title = :title, year = :year "
        "WHERE singer_id = :singer_id AND album_id = :album_id"
    )


def test_update_sql_rejects_overlapping_columns() -> None:
    with pytest.raises(ValueError, match="both SET and WHERE"):
        build_update_sql("Albums", ["title", "album_id"], ["album_id"])


@pytest.mark.parametrize("set_cols,key_cols", [([], ["id"]), (["name"], [])])
def test_update_sql_requires_both_column_lists(set_cols, key_cols) -> None:
    with pytest.raises(ValueError):
        build_update_sql("Albums", set_cols, key_cols)


def test_delete_sql() -> None:
    assert build_delete_sql("Albums", ["singer_id", "album_id"]) == (
        "DELETE FROM Albums WHERE singer_id = :singer_id AND album_id = :album_id"
    )


def test_delete_sql_requires_keys() -> None:
    with pytest.raises(ValueError):
        build_delete_sql("Albums", [])


def test_qualified_column_names_are_rejected() -> None:
    with pytest.raises(ValueError, match="qualified"):
        build_insert_sql("music.Singers", ["Singers.name"])
