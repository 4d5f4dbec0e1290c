from __future__ import annotations

import pytest

from rowbridge.data.table import DataSet, DataTable, RowState, RowVersion


@pytest.fixture
def table() -> DataTable:
    t = DataTable("Singers")
    t.add_column("singer_id")
    t.add_column("name")
    return t


def test_new_row_is_added(table: DataTable) -> None:
    row = table.new_row({"singer_id": 1})
    assert row.state == RowState.ADDED
    assert row["name"] is None
    assert table.get_changes() == [row]


def test_loaded_row_is_unchanged_until_edited(table: DataTable) -> None:
    row = table.load_row({"singer_id": 1, "name": "Marc"})
    assert row.state == RowState.UNCHANGED
    assert not table.has_changes()

    row["name"] = "Marcus"

    assert row.state == RowState.MODIFIED
    assert row.get("name", RowVersion.ORIGINAL) == "Marc"
    assert row["name"] == "Marcus"


def test_load_row_without_accept_is_added(table: DataTable) -> None:
    row = table.load_row({"singer_id": 1}, accept=False)
    assert row.state == RowState.ADDED


def test_unknown_column_raises_key_error(table: DataTable) -> None:
    row = table.new_row()
    with pytest.raises(KeyError):
        row["missing"] = 1
    with pytest.raises(KeyError):
        table.new_row({"missing": 1})


def test_deleting_added_row_detaches_it(table: DataTable) -> None:
    row = table.new_row({"singer_id": 1})
    row.delete()
    assert row.state == RowState.DETACHED
    assert len(table) == 0


def test_deleted_row_stays_until_accepted(table: DataTable) -> None:
    row = table.load_row({"singer_id": 1})
    row.delete()

    assert row.state == RowState.DELETED
    assert table.get_changes() == [row]
    assert table.to_dicts() == []
    with pytest.raises(RuntimeError):
        row["name"] = "x"

    row.accept_changes()

    assert row.state == RowState.DETACHED
    assert len(table) == 0


def test_reject_changes_restores_original(table: DataTable) -> None:
    edited = table.load_row({"singer_id": 1, "name": "Marc"})
    deleted = table.load_row({"singer_id": 2, "name": "Cat"})
    added = table.new_row({"singer_id": 3})
    edited["name"] = "Marcus"
    deleted.delete()

    table.reject_changes()

    assert edited.state == RowState.UNCHANGED
    assert edited["name"] == "Marc"
    assert deleted.state == RowState.UNCHANGED
    assert added.state == RowState.DETACHED
    assert table.to_dicts() == [
        {"singer_id": 1, "name": "Marc"},
        {"singer_id": 2, "name": "Cat"},
    ]


def test_accept_changes_clears_row_error(table: DataTable) -> None:
    row = table.new_row({"singer_id": 1})
    row.row_error = "boom"
    assert row.has_errors

    row.accept_changes()

    assert not row.has_errors
    assert row.state == RowState.UNCHANGED


def test_adding_column_extends_existing_rows(table: DataTable) -> None:
    row = table.load_row({"singer_id": 1})
    table.add_column("rating")

    assert row["rating"] is None
    assert row.get("rating", RowVersion.ORIGINAL) is None
    with pytest.raises(ValueError):
        table.add_column("rating")


def test_dataset_tables() -> None:
    ds = DataSet()
    t = ds.add_table("Singers")

    assert "Singers" in ds
    assert ds["Singers"] is t
    assert ds.get("Albums") is None
    with pytest.raises(ValueError):
        ds.add_table("Singers")

    t.add_column("id")
    t.new_row({"id": 1})
    assert ds.has_changes()
    ds.accept_changes()
    assert not ds.has_changes()
