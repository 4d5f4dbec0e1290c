from __future__ import annotations

import re
from typing import Iterable, Sequence


def _validate_identifier(name: str, identifier_type: str = "identifier") -> str:
    """
    Validate that an identifier (table/column name) is safe for SQL interpolation.

    Identifiers are restricted to alphanumeric characters and underscores,
    optionally qualified with dots (``schema.table``).

    ⚠️ SECURITY CONTRACT ⚠️
    This function validates identifier format but does NOT make untrusted input
    safe. Table names and primary keys given to the adapter MUST be trusted
    (hardcoded or validated at application boundaries). Column names are taken
    from result metadata of a query the application chose to run.

    Args:
        name: The identifier to validate
        identifier_type: Description of the identifier (for error messages)

    Returns:
        The validated identifier (unchanged if valid)

    Raises:
        TypeError: If identifier is not a string
        ValueError: If identifier contains unsafe characters or is invalid

    Example:
        >>> _validate_identifier("Singers", "table")
        'Singers'
        >>> _validate_identifier("'; DROP TABLE--", "table")
        ValueError: Invalid table '; DROP TABLE--': ...
    """
    if not isinstance(name, str):
        raise TypeError(f"{identifier_type} must be a string, got {type(name).__name__}")

    if not name:
        raise ValueError(f"{identifier_type} cannot be empty")

    if not re.match(r'^[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)?$', name):
        raise ValueError(
            f"Invalid {identifier_type} {name!r}: "
            "must start with letter/underscore and contain only alphanumeric characters and underscores"
        )

    if len(name) > 128:
        raise ValueError(f"{identifier_type} {name!r} exceeds the 128-character limit")

    return name


def _validate_columns(columns: Iterable[str]) -> list[str]:
    cols = [_validate_identifier(c, "column name") for c in columns]
    for col in cols:
        # column names double as bind parameter names
        if "." in col:
            raise ValueError(f"Invalid column name {col!r}: qualified names are not allowed")
    return cols


def build_select_all_sql(table: str) -> str:
    table = _validate_identifier(table, "table")
    return f"SELECT * FROM {table}"


def build_insert_sql(table: str, columns: Sequence[str]) -> str:
    table = _validate_identifier(table, "table")
    cols = _validate_columns(columns)
    if not cols:
        raise ValueError("INSERT requires at least one column")
    col_names = ", ".join(cols)
    placeholders = ", ".join(f":{c}" for c in cols)
    return f"INSERT INTO {table} ({col_names}) VALUES ({placeholders})"


def build_update_sql(table: str, set_columns: Sequence[str], key_columns: Sequence[str]) -> str:
    """
    Build an UPDATE that sets ``set_columns`` on the row identified by ``key_columns``.

    Placeholders are named after the columns, so a column must not appear in
    both lists.
    """
    table = _validate_identifier(table, "table")
    set_cols = _validate_columns(set_columns)
    key_cols = _validate_columns(key_columns)
    if not set_cols:
        raise ValueError("UPDATE requires at least one non-key column")
    if not key_cols:
        raise ValueError("UPDATE requires at least one key column")
    overlap = set(set_cols) & set(key_cols)
    if overlap:
        raise ValueError(f"Columns {sorted(overlap)} appear in both SET and WHERE")

    set_sql = ", ".join(f"{c} = :{c}" for c in set_cols)
    where_sql = " AND ".join(f"{c} = :{c}" for c in key_cols)
    return f"UPDATE {table} SET {set_sql} WHERE {where_sql}"


def build_delete_sql(table: str, key_columns: Sequence[str]) -> str:
    table = _validate_identifier(table, "table")
    key_cols = _validate_columns(key_columns)
    if not key_cols:
        raise ValueError("DELETE requires at least one key column")
    where_sql = " AND ".join(f"{c} = :{c}" for c in key_cols)
    return f"DELETE FROM {table} WHERE {where_sql}"
