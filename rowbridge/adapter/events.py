from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from ..data.table import DataRow
from ..db.command import Command
from ..db.models import StatementType
from .mapping import DataTableMapping


class UpdateStatus(str, Enum):
    CONTINUE = "continue"
    ERRORS_OCCURRED = "errors_occurred"
    SKIP_CURRENT_ROW = "skip_current_row"
    SKIP_ALL_REMAINING_ROWS = "skip_all_remaining_rows"


class RowUpdatingEventArgs:
    """
    Passed to row_updating handlers before a row command runs.

    Handlers may replace ``command``, or change ``status`` to skip the row,
    stop the update, or fail it (setting ``errors``).
    """

    def __init__(
        self,
        row: DataRow,
        command: Command | None,
        statement_type: StatementType,
        table_mapping: DataTableMapping,
    ) -> None:
        self.row = row
        self.command = command
        self.statement_type = statement_type
        self.table_mapping = table_mapping
        self.status = UpdateStatus.CONTINUE
        self.errors: BaseException | None = None


class RowUpdatedEventArgs(RowUpdatingEventArgs):
    """Passed to row_updated handlers after a row command ran (or failed)."""

    def __init__(
        self,
        row: DataRow,
        command: Command | None,
        statement_type: StatementType,
        table_mapping: DataTableMapping,
        records_affected: int = 0,
        errors: BaseException | None = None,
    ) -> None:
        super().__init__(row, command, statement_type, table_mapping)
        self.records_affected = records_affected
        self.errors = errors
        if errors is not None:
            self.status = UpdateStatus.ERRORS_OCCURRED


Handler = Callable[[Any, Any], None]


class EventHook:
    """
    Ordered list of ``handler(sender, args)`` callables.

    Usage:
        adapter.row_updated += on_updated
        adapter.row_updated -= on_updated
    """

    def __init__(self) -> None:
        self._handlers: list[Handler] = []

    def add(self, handler: Handler) -> None:
        if not callable(handler):
            raise TypeError("event handler must be callable")
        self._handlers.append(handler)

    def remove(self, handler: Handler) -> None:
        self._handlers.remove(handler)

    def __iadd__(self, handler: Handler) -> "EventHook":
        self.add(handler)
        return self

    def __isub__(self, handler: Handler) -> "EventHook":
        self.remove(handler)
        return self

    def __call__(self, sender: Any, args: Any) -> None:
        for handler in list(self._handlers):
            handler(sender, args)

    def __len__(self) -> int:
        return len(self._handlers)
