from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Mapping


class RowState(str, Enum):
    DETACHED = "detached"
    UNCHANGED = "unchanged"
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


class RowVersion(str, Enum):
    CURRENT = "current"
    ORIGINAL = "original"


@dataclass
class DataColumn:
    name: str
    # driver-specific type code from the cursor description, if known
    type_code: Any = None


class DataRow:
    """
    A single row of a DataTable.

    Keeps the current values plus the original values as of the last
    accept_changes(), so that UPDATE and DELETE statements can locate the row
    by the key it had when it was loaded.
    """

    def __init__(self, table: DataTable, values: Mapping[str, Any] | None = None) -> None:
        self.table = table
        self._current: dict[str, Any] = {c.name: None for c in table.columns}
        self._original: dict[str, Any] | None = None
        self.state = RowState.DETACHED
        self.row_error: str | None = None
        for col, val in (values or {}).items():
            self._check_column(col)
            self._current[col] = val

    def _check_column(self, column: str) -> None:
        if not self.table.has_column(column):
            raise KeyError(f"Column {column!r} does not belong to table {self.table.name!r}")

    def __getitem__(self, column: str) -> Any:
        return self.get(column)

    def __setitem__(self, column: str, value: Any) -> None:
        self._check_column(column)
        if self.state == RowState.DELETED:
            raise RuntimeError("Cannot modify a deleted row")
        self._current[column] = value
        if self.state == RowState.UNCHANGED:
            self.state = RowState.MODIFIED

    def get(self, column: str, version: RowVersion = RowVersion.CURRENT) -> Any:
        """
        Return a column value from the requested row version.

        Rows that were never accepted have no original version; reading it
        falls back to the current values.
        """
        self._check_column(column)
        if version == RowVersion.ORIGINAL and self._original is not None:
            return self._original.get(column)
        return self._current.get(column)

    def to_dict(self, version: RowVersion = RowVersion.CURRENT) -> dict[str, Any]:
        if version == RowVersion.ORIGINAL and self._original is not None:
            return dict(self._original)
        return dict(self._current)

    @property
    def has_errors(self) -> bool:
        return bool(self.row_error)

    def _add_column(self, column: str) -> None:
        self._current.setdefault(column, None)
        if self._original is not None:
            self._original.setdefault(column, None)

    def delete(self) -> None:
        if self.state == RowState.ADDED:
            self.table._remove(self)
            return
        if self.state == RowState.DETACHED:
            raise RuntimeError("Cannot delete a row that is not in a table")
        self.state = RowState.DELETED

    def accept_changes(self) -> None:
        if self.state == RowState.DELETED:
            self.table._remove(self)
            return
        if self.state == RowState.DETACHED:
            return
        self._original = dict(self._current)
        self.state = RowState.UNCHANGED
        self.row_error = None

    def reject_changes(self) -> None:
        if self.state == RowState.ADDED:
            self.table._remove(self)
            return
        if self._original is not None:
            self._current = dict(self._original)
        if self.state in (RowState.MODIFIED, RowState.DELETED):
            self.state = RowState.UNCHANGED
        self.row_error = None

    def __repr__(self) -> str:
        return f"DataRow({self.state.value}, {self._current!r})"


class DataTable:
    """
    In-memory, disconnected table of rows with change tracking.

    Usage:
        table = DataTable("orders")
        table.add_column("id")
        row = table.new_row({"id": 1})
        for changed in table.get_changes():
            ...
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.columns: list[DataColumn] = []
        self.rows: list[DataRow] = []

    def has_column(self, name: str) -> bool:
        return any(c.name == name for c in self.columns)

    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def add_column(self, name: str, type_code: Any = None) -> DataColumn:
        if self.has_column(name):
            raise ValueError(f"Column {name!r} already exists in table {self.name!r}")
        column = DataColumn(name, type_code)
        self.columns.append(column)
        for row in self.rows:
            row._add_column(name)
        return column

    def new_row(self, values: Mapping[str, Any] | None = None) -> DataRow:
        """Create a row, append it to the table and mark it ADDED."""
        row = DataRow(self, values)
        row.state = RowState.ADDED
        self.rows.append(row)
        return row

    def load_row(self, values: Mapping[str, Any], accept: bool = True) -> DataRow:
        """
        Append a row read from the data source.

        Args:
            values: column -> value, every key must be a known column
            accept: if True the row is UNCHANGED, otherwise ADDED

        Returns:
            The loaded row
        """
        row = self.new_row(values)
        if accept:
            row.accept_changes()
        return row

    def _remove(self, row: DataRow) -> None:
        self.rows.remove(row)
        row.state = RowState.DETACHED

    def get_changes(self) -> list[DataRow]:
        changed = (RowState.ADDED, RowState.MODIFIED, RowState.DELETED)
        return [row for row in self.rows if row.state in changed]

    def has_changes(self) -> bool:
        return bool(self.get_changes())

    def accept_changes(self) -> None:
        for row in list(self.rows):
            row.accept_changes()

    def reject_changes(self) -> None:
        for row in list(self.rows):
            row.reject_changes()

    def to_dicts(self) -> list[dict[str, Any]]:
        return [row.to_dict() for row in self.rows if row.state != RowState.DELETED]

    def __iter__(self) -> Iterator[DataRow]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


class DataSet:
    """Named collection of DataTables."""

    def __init__(self) -> None:
        self.tables: dict[str, DataTable] = {}

    def add_table(self, name: str) -> DataTable:
        if name in self.tables:
            raise ValueError(f"Table {name!r} already exists in the data set")
        table = DataTable(name)
        self.tables[name] = table
        return table

    def get(self, name: str) -> DataTable | None:
        return self.tables.get(name)

    def __getitem__(self, name: str) -> DataTable:
        return self.tables[name]

    def __contains__(self, name: object) -> bool:
        return name in self.tables

    def has_changes(self) -> bool:
        return any(t.has_changes() for t in self.tables.values())

    def accept_changes(self) -> None:
        for table in self.tables.values():
            table.accept_changes()
