from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Iterable

from ..config import AdapterConfig
from ..data.table import DataRow, DataSet, RowState
from ..db.command import Command
from ..db.metrics import observe_fill, observe_row_update
from ..db.models import StatementType
from ..db.reader import DataReader
from ..db.session import DbSession
from ..errors import (
    AdapterConfigurationError,
    DbConcurrencyError,
    RowBridgeError,
    RowUpdateError,
)
from .events import RowUpdatedEventArgs, RowUpdatingEventArgs, UpdateStatus
from .mapping import DataTableMapping, TableMappingCollection

logger = logging.getLogger(__name__)

_STATEMENT_FOR_STATE = {
    RowState.ADDED: StatementType.INSERT,
    RowState.MODIFIED: StatementType.UPDATE,
    RowState.DELETED: StatementType.DELETE,
}


class DataAdapter(ABC):
    """
    Generic fill/update orchestration between a DataSet and a database.

    Subclasses supply the commands and the session factory; this class reads
    SELECT results into DataTables and reconciles changed rows back by running
    one INSERT, UPDATE or DELETE per row, firing the row_updating/row_updated
    hooks around each one.

    Every row command runs in its own DbSession, so rows that were reconciled
    before a failure stay committed.
    """

    def __init__(self, config: AdapterConfig | None = None) -> None:
        self.config = config or AdapterConfig()
        self.table_mappings = TableMappingCollection()

    @abstractmethod
    def open_session(self) -> DbSession:
        """Return a new, not yet entered, DbSession."""
        ...

    @abstractmethod
    def get_select_command(self) -> Command | None:
        ...

    @abstractmethod
    def get_insert_command(self) -> Command | None:
        ...

    @abstractmethod
    def get_update_command(self) -> Command | None:
        ...

    @abstractmethod
    def get_delete_command(self) -> Command | None:
        ...

    @abstractmethod
    def create_row_updating_event(
        self,
        row: DataRow,
        command: Command | None,
        statement_type: StatementType,
        table_mapping: DataTableMapping,
    ) -> RowUpdatingEventArgs:
        ...

    @abstractmethod
    def create_row_updated_event(
        self,
        row: DataRow,
        command: Command | None,
        statement_type: StatementType,
        table_mapping: DataTableMapping,
        records_affected: int,
        errors: BaseException | None,
    ) -> RowUpdatedEventArgs:
        ...

    @abstractmethod
    def on_row_updating(self, args: RowUpdatingEventArgs) -> None:
        ...

    @abstractmethod
    def on_row_updated(self, args: RowUpdatedEventArgs) -> None:
        ...

    def _command_for(self, statement_type: StatementType) -> Command | None:
        if statement_type == StatementType.INSERT:
            return self.get_insert_command()
        if statement_type == StatementType.UPDATE:
            return self.get_update_command()
        if statement_type == StatementType.DELETE:
            return self.get_delete_command()
        return self.get_select_command()

    def fill(
        self,
        dataset: DataSet,
        src_table: str | None = None,
        command: Command | None = None,
        start_record: int = 0,
        max_records: int = 0,
    ) -> int:
        """
        Run a SELECT and load its rows into ``dataset``.

        Args:
            dataset: Target DataSet; the table is created if missing
            src_table: Source table name, resolved through table_mappings
            command: SELECT to run; defaults to get_select_command()
            start_record: Number of leading result rows to skip
            max_records: Maximum rows to load, 0 for all

        Returns:
            Number of rows loaded

        Raises:
            AdapterConfigurationError: If there is no SELECT command
            ValueError: If start_record or max_records is negative
        """
        if start_record < 0:
            raise ValueError("start_record must be >= 0")
        if max_records < 0:
            raise ValueError("max_records must be >= 0")

        src_table = src_table or self.config.default_source_table
        if command is None:
            command = self.get_select_command()
        if command is None:
            raise AdapterConfigurationError(
                "fill requires a select command; set select_command or configure auto generation"
            )

        with self.open_session() as session:
            with session.open_reader(command) as reader:
                return self.fill_from_reader(dataset, src_table, reader, start_record, max_records)

    def fill_from_reader(
        self,
        dataset: DataSet,
        src_table: str,
        reader: DataReader,
        start_record: int = 0,
        max_records: int = 0,
    ) -> int:
        mapping = self.table_mappings.resolve(src_table)
        table = dataset.get(mapping.dataset_table)
        if table is None:
            table = dataset.add_table(mapping.dataset_table)

        for field in reader.populate_metadata().fields:
            if not table.has_column(field.name):
                table.add_column(field.name, field.type_code)

        loaded = 0
        for index, values in enumerate(reader):
            if index < start_record:
                continue
            if max_records and loaded >= max_records:
                break
            table.load_row(values, accept=self.config.accept_changes_during_fill)
            loaded += 1

        observe_fill(mapping.dataset_table, loaded)
        logger.info("Filled %d rows into %s", loaded, mapping.dataset_table)
        return loaded

    def update(self, dataset: DataSet, src_table: str | None = None) -> int:
        """
        Reconcile the changed rows of one table back to the database.

        Returns:
            Number of rows successfully reconciled

        Raises:
            AdapterConfigurationError: If the mapped table is not in ``dataset``
            RowBridgeError: On the first failing row, unless
                config.continue_update_on_error is set
        """
        src_table = src_table or self.config.default_source_table
        mapping = self.table_mappings.resolve(src_table)
        table = dataset.get(mapping.dataset_table)
        if table is None:
            raise AdapterConfigurationError(
                f"update unable to find table {mapping.dataset_table!r} for source table {src_table!r}"
            )
        return self.update_rows(table.get_changes(), mapping)

    def update_rows(self, rows: Iterable[DataRow], table_mapping: DataTableMapping) -> int:
        rows = list(rows)
        updated = 0

        for row in rows:
            statement_type = _STATEMENT_FOR_STATE.get(row.state)
            if statement_type is None:
                continue

            build_error: AdapterConfigurationError | None = None
            try:
                planned = self._command_for(statement_type)
            except AdapterConfigurationError as exc:
                # a row_updating handler may still supply a command
                planned = None
                build_error = exc

            updating = self.create_row_updating_event(row, planned, statement_type, table_mapping)
            self.on_row_updating(updating)

            if updating.status == UpdateStatus.SKIP_CURRENT_ROW:
                observe_row_update(table_mapping.dataset_table, statement_type.value, "skipped", 0.0)
                continue
            if updating.status == UpdateStatus.SKIP_ALL_REMAINING_ROWS:
                break

            command = updating.command
            errors: BaseException | None = None
            records_affected = 0
            start_time = time.monotonic()

            if updating.status == UpdateStatus.ERRORS_OCCURRED:
                errors = updating.errors or RowUpdateError(
                    "row_updating handler reported an error", row, statement_type
                )
            elif command is None:
                errors = build_error or AdapterConfigurationError(
                    f"update requires a valid {statement_type.value} command "
                    f"when passed a row with state {row.state.value}"
                )
            else:
                try:
                    records_affected = self._execute_row(command, row)
                    if records_affected == 0 and statement_type in (StatementType.UPDATE, StatementType.DELETE):
                        errors = DbConcurrencyError(
                            f"Concurrency violation: the {statement_type.value} command "
                            "affected 0 of the expected 1 records"
                        )
                except Exception as exc:
                    errors = exc

            latency = time.monotonic() - start_time
            updated_args = self.create_row_updated_event(
                row, command, statement_type, table_mapping, records_affected, errors
            )
            self.on_row_updated(updated_args)

            if updated_args.status == UpdateStatus.ERRORS_OCCURRED:
                observe_row_update(table_mapping.dataset_table, statement_type.value, "error", latency)
                err = updated_args.errors or errors
                if err is None:
                    err = RowUpdateError("row_updated handler reported an error", row, statement_type)
                if self.config.continue_update_on_error:
                    row.row_error = str(err)
                    logger.warning(
                        "Error reconciling %s row in %s, continuing: %s",
                        statement_type.value,
                        table_mapping.dataset_table,
                        err,
                    )
                    continue
                if isinstance(err, RowBridgeError):
                    raise err
                raise RowUpdateError(str(err), row, statement_type) from err

            if updated_args.status == UpdateStatus.SKIP_CURRENT_ROW:
                observe_row_update(table_mapping.dataset_table, statement_type.value, "skipped", latency)
                continue

            if errors is None:
                observe_row_update(table_mapping.dataset_table, statement_type.value, "success", latency)
                updated += 1
                if self.config.accept_changes_during_update:
                    row.accept_changes()

            if updated_args.status == UpdateStatus.SKIP_ALL_REMAINING_ROWS:
                break

        logger.info(
            "Updated %d of %d changed rows in %s", updated, len(rows), table_mapping.dataset_table
        )
        return updated

    def _execute_row(self, command: Command, row: DataRow) -> int:
        params = command.bind(row)
        with self.open_session() as session:
            return session.execute_command(command, params)
