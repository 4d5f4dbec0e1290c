from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy.engine import Engine

from ..data.table import RowVersion
from ..errors import AdapterConfigurationError
from .command import Command, ParameterCollection
from .helpers import (
    build_delete_sql,
    build_insert_sql,
    build_select_all_sql,
    build_update_sql,
)
from .models import StatementType
from .session import DbSession

logger = logging.getLogger(__name__)


class AdapterConnection:
    """
    Command factory bound to a SQLAlchemy Engine.

    Builds single-table CRUD commands from a parameter collection. Key
    parameters of UPDATE and DELETE read the ORIGINAL version of a row, so a
    row whose key was edited is still located by the key it was loaded with.
    """

    def __init__(self, engine: Engine) -> None:
        if engine is None:
            raise ValueError("engine must not be None")
        self.engine = engine

    def session(self) -> DbSession:
        return DbSession(self.engine)

    def create_select_command(self, sql: str) -> Command:
        return Command(sql, ParameterCollection(), StatementType.SELECT)

    def create_select_all_command(self, table: str) -> Command:
        try:
            sql = build_select_all_sql(table)
        except (TypeError, ValueError) as exc:
            raise AdapterConfigurationError(f"Cannot build SELECT for {table!r}: {exc}") from exc
        logger.debug("Built SELECT command for %s: %s", table, sql)
        return self.create_select_command(sql)

    def create_insert_command(self, table: str, parameters: ParameterCollection) -> Command:
        params = parameters.copy()
        try:
            sql = build_insert_sql(table, params.names())
        except (TypeError, ValueError) as exc:
            raise AdapterConfigurationError(f"Cannot build INSERT for {table!r}: {exc}") from exc
        logger.debug("Built INSERT command for %s: %s", table, sql)
        return Command(sql, params, StatementType.INSERT)

    def create_update_command(
        self,
        table: str,
        parameters: ParameterCollection,
        primary_keys: Iterable[str],
    ) -> Command:
        """
        Build ``UPDATE table SET <non-key columns> WHERE <key columns>``.

        Args:
            table: Target table (trusted identifier)
            parameters: One parameter per column of the table
            primary_keys: Names of the key columns

        Raises:
            AdapterConfigurationError: If no key or no non-key column is present
        """
        keys = set(primary_keys)
        set_params = parameters.filter(lambda p: p.name not in keys).copy()
        key_params = ParameterCollection(
            p.with_version(RowVersion.ORIGINAL) for p in parameters if p.name in keys
        )
        if not key_params:
            raise AdapterConfigurationError(
                f"Cannot build UPDATE for {table!r}: no primary key column among {parameters.names()}"
            )
        try:
            sql = build_update_sql(table, set_params.names(), key_params.names())
        except (TypeError, ValueError) as exc:
            raise AdapterConfigurationError(f"Cannot build UPDATE for {table!r}: {exc}") from exc

        logger.debug("Built UPDATE command for %s: %s", table, sql)
        return Command(
            sql,
            ParameterCollection(list(set_params) + list(key_params)),
            StatementType.UPDATE,
        )

    def create_delete_command(self, table: str, parameters: ParameterCollection) -> Command:
        """
        Build ``DELETE FROM table WHERE <every parameter>``.

        ``parameters`` is expected to hold the key columns only.
        """
        key_params = ParameterCollection(p.with_version(RowVersion.ORIGINAL) for p in parameters)
        try:
            sql = build_delete_sql(table, key_params.names())
        except (TypeError, ValueError) as exc:
            raise AdapterConfigurationError(f"Cannot build DELETE for {table!r}: {exc}") from exc
        logger.debug("Built DELETE command for %s: %s", table, sql)
        return Command(sql, key_params, StatementType.DELETE)
