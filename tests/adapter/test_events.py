from __future__ import annotations

import pytest

from rowbridge.adapter.events import EventHook, RowUpdatedEventArgs, RowUpdatingEventArgs, UpdateStatus
from rowbridge.adapter.mapping import TableMappingCollection
from rowbridge.data.table import DataTable
from rowbridge.db.models import StatementType


def _row():
    table = DataTable("t")
    table.add_column("id")
    return table.new_row({"id": 1})


def test_event_hook_calls_handlers_in_order() -> None:
    hook = EventHook()
    calls = []
    hook += lambda sender, args: calls.append(("first", sender, args))
    hook.add(lambda sender, args: calls.append(("second", sender, args)))

    hook("sender", 42)

    assert calls == [("first", "sender", 42), ("second", "sender", 42)]
    assert len(hook) == 2


def test_event_hook_rejects_non_callable() -> None:
    with pytest.raises(TypeError):
        EventHook().add("not callable")  # type: ignore[arg-type]


def test_handler_exceptions_propagate() -> None:
    hook = EventHook()

    def boom(sender, args):
        raise RuntimeError("handler failed")

    hook += boom
    with pytest.raises(RuntimeError, match="handler failed"):
        hook(None, None)


def test_updating_args_default_to_continue() -> None:
    mapping = TableMappingCollection().resolve("Table")
    args = RowUpdatingEventArgs(_row(), None, StatementType.INSERT, mapping)
    assert args.status == UpdateStatus.CONTINUE
    assert args.errors is None


def test_updated_args_with_errors_report_errors_occurred() -> None:
    mapping = TableMappingCollection().resolve("Table")
    args = RowUpdatedEventArgs(_row(), None, StatementType.INSERT, mapping, 0, ValueError("x"))
    assert args.status == UpdateStatus.ERRORS_OCCURRED

    ok = RowUpdatedEventArgs(_row(), None, StatementType.INSERT, mapping, 1, None)
    assert ok.status == UpdateStatus.CONTINUE
    assert ok.records_affected == 1


def test_table_mappings_resolve_to_identity_by_default() -> None:
    mappings = TableMappingCollection()
    assert mappings.resolve("Table").dataset_table == "Table"

    mappings.add("Table", "Singers")
    assert "Table" in mappings
    assert mappings.resolve("Table").dataset_table == "Singers"

    mappings.remove("Table")
    assert len(mappings) == 0
