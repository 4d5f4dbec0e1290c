from __future__ import annotations

import logging

from ..config import AdapterConfig
from ..data.table import DataRow, DataSet
from ..db.command import Command, Parameter, ParameterCollection
from ..db.connection import AdapterConnection
from ..db.models import StatementType
from ..db.reader import DataReader
from ..db.session import DbSession
from ..errors import AdapterConfigurationError
from .base import DataAdapter
from .events import EventHook, RowUpdatedEventArgs, RowUpdatingEventArgs
from .mapping import DataTableMapping

logger = logging.getLogger(__name__)

_UNSET = object()


class SqlDataAdapter(DataAdapter):
    """
    A set of commands plus a connection used to fill a DataSet and reconcile
    its edits back to the database.

    Commands can be given explicitly (``select_command`` and friends) or built
    automatically for a single table. With ``auto_generated_command_table``
    set, the adapter builds ``SELECT * FROM <table>`` and, once a fill has
    read the result columns, matching INSERT, UPDATE and DELETE commands keyed
    on ``auto_generated_command_primary_keys``. Explicit commands always win,
    so a custom SELECT can be combined with generated DML.

    Built commands are cached until the table name changes.

    Usage:
        adapter = SqlDataAdapter(AdapterConnection(engine), "singers", "singer_id")
        ds = DataSet()
        adapter.fill(ds)
        ds["Table"].rows[0]["name"] = "Ella"
        adapter.update(ds)
    """

    def __init__(
        self,
        connection: AdapterConnection | None = _UNSET,
        auto_generated_command_table: str | None = None,
        *primary_keys: str,
        config: AdapterConfig | None = None,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            connection: Connection used for every command. If passed, it must not be None.
            auto_generated_command_table: Table for automatically built commands, may be None
            *primary_keys: Columns forming the primary key of that table
            config: Fill/update behaviour, defaults to AdapterConfig()
        """
        super().__init__(config)
        if connection is None:
            raise ValueError("connection must not be None")
        self.connection: AdapterConnection | None = None if connection is _UNSET else connection

        self.select_command: Command | None = None
        self.insert_command: Command | None = None
        self.update_command: Command | None = None
        self.delete_command: Command | None = None

        self.auto_generated_command_primary_keys: set[str] = set(primary_keys)

        self.row_updating = EventHook()
        self.row_updated = EventHook()

        self._parsed_parameters = ParameterCollection()
        self._built_select_command: Command | None = None
        self._built_insert_command: Command | None = None
        self._built_update_command: Command | None = None
        self._built_delete_command: Command | None = None
        self._auto_generated_command_table: str | None = None
        self.auto_generated_command_table = auto_generated_command_table

    @property
    def auto_generated_command_table(self) -> str | None:
        return self._auto_generated_command_table

    @auto_generated_command_table.setter
    def auto_generated_command_table(self, value: str | None) -> None:
        # Commands built for the previous table must never run against the new one.
        self._clear_built_commands()
        self._auto_generated_command_table = value

    @property
    def auto_generate_commands(self) -> bool:
        return bool(self._auto_generated_command_table)

    @property
    def parsed_parameters(self) -> ParameterCollection:
        """Columns read from the last filled result, one parameter each."""
        return self._parsed_parameters

    def _clear_built_commands(self) -> None:
        self._built_select_command = None
        self._clear_built_dml_commands()

    def _clear_built_dml_commands(self) -> None:
        self._built_insert_command = None
        self._built_update_command = None
        self._built_delete_command = None

    def _require_connection(self) -> AdapterConnection:
        if self.connection is None:
            raise AdapterConfigurationError("SqlDataAdapter has no connection")
        return self.connection

    def open_session(self) -> DbSession:
        return self._require_connection().session()

    def _can_build_dml(self) -> bool:
        return self.auto_generate_commands and len(self._parsed_parameters) > 0

    def get_select_command(self) -> Command | None:
        if self.select_command is not None:
            return self.select_command
        if self._built_select_command is None and self.auto_generate_commands:
            self._built_select_command = self._require_connection().create_select_all_command(
                self._auto_generated_command_table
            )
        return self._built_select_command

    def get_insert_command(self) -> Command | None:
        if self.insert_command is not None:
            return self.insert_command
        if self._built_insert_command is None and self._can_build_dml():
            self._built_insert_command = self._require_connection().create_insert_command(
                self._auto_generated_command_table, self._parsed_parameters
            )
        return self._built_insert_command

    def get_update_command(self) -> Command | None:
        if self.update_command is not None:
            return self.update_command
        if self._built_update_command is None and self._can_build_dml():
            self._built_update_command = self._require_connection().create_update_command(
                self._auto_generated_command_table,
                self._parsed_parameters,
                self.auto_generated_command_primary_keys,
            )
        return self._built_update_command

    def get_delete_command(self) -> Command | None:
        if self.delete_command is not None:
            return self.delete_command
        if self._built_delete_command is None and self._can_build_dml():
            keys = self.auto_generated_command_primary_keys
            key_parameters = self._parsed_parameters.filter(lambda p: p.name in keys)
            self._built_delete_command = self._require_connection().create_delete_command(
                self._auto_generated_command_table, key_parameters
            )
        return self._built_delete_command

    def fill(
        self,
        dataset: DataSet,
        src_table: str | None = None,
        command: Command | None = None,
        start_record: int = 0,
        max_records: int = 0,
    ) -> int:
        if command is None:
            command = self.get_select_command()
        return super().fill(dataset, src_table, command, start_record, max_records)

    def fill_from_reader(
        self,
        dataset: DataSet,
        src_table: str,
        reader: DataReader,
        start_record: int = 0,
        max_records: int = 0,
    ) -> int:
        if isinstance(reader, DataReader) and self.auto_generate_commands:
            self._record_parameters(reader)
        return super().fill_from_reader(dataset, src_table, reader, start_record, max_records)

    def _record_parameters(self, reader: DataReader) -> None:
        metadata = reader.populate_metadata()
        previous = self._parsed_parameters.names()

        self._parsed_parameters.clear()
        for field in metadata.fields:
            if field.name in self._parsed_parameters:
                continue
            self._parsed_parameters.add(
                Parameter(field.name, field.type_code, None, field.name)
            )

        if previous and previous != self._parsed_parameters.names():
            logger.debug(
                "Result columns of %s changed, dropping built commands",
                self._auto_generated_command_table,
            )
            self._clear_built_dml_commands()
        logger.debug(
            "Read %d columns for %s: %s",
            len(self._parsed_parameters),
            self._auto_generated_command_table,
            self._parsed_parameters.names(),
        )

    def create_row_updating_event(
        self,
        row: DataRow,
        command: Command | None,
        statement_type: StatementType,
        table_mapping: DataTableMapping,
    ) -> RowUpdatingEventArgs:
        return RowUpdatingEventArgs(row, command, statement_type, table_mapping)

    def create_row_updated_event(
        self,
        row: DataRow,
        command: Command | None,
        statement_type: StatementType,
        table_mapping: DataTableMapping,
        records_affected: int,
        errors: BaseException | None,
    ) -> RowUpdatedEventArgs:
        return RowUpdatedEventArgs(
            row, command, statement_type, table_mapping, records_affected, errors
        )

    def on_row_updating(self, args: RowUpdatingEventArgs) -> None:
        self.row_updating(self, args)

    def on_row_updated(self, args: RowUpdatedEventArgs) -> None:
        self.row_updated(self, args)
