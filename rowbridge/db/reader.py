from __future__ import annotations

from typing import Any, Iterator

from sqlalchemy.engine import CursorResult

from .models import FieldMetadata, ResultMetadata


class DataReader:
    """
    Forward-only reader over the rows of an executed SELECT.

    Only valid while the DbSession that opened it is active.

    Usage:
        with DbSession(engine) as session:
            with session.open_reader(command) as reader:
                metadata = reader.populate_metadata()
                for row in reader:
                    ...
    """

    def __init__(self, result: CursorResult) -> None:
        self._result = result
        # Captured eagerly: the DBAPI cursor is released once the result is exhausted.
        cursor = getattr(result, "cursor", None)
        self._description = getattr(cursor, "description", None)
        self._metadata: ResultMetadata | None = None
        self.closed = False

    def populate_metadata(self) -> ResultMetadata:
        """
        Describe the result columns.

        Computed once and cached; calling it does not consume any rows.
        """
        if self._metadata is None:
            type_codes = {}
            for entry in self._description or ():
                type_codes[entry[0]] = entry[1]
            self._metadata = ResultMetadata(
                fields=[FieldMetadata(name, type_codes.get(name)) for name in self._result.keys()]
            )
        return self._metadata

    def __iter__(self) -> Iterator[dict[str, Any]]:
        if self.closed:
            raise RuntimeError("DataReader is closed")
        for row in self._result.mappings():
            yield dict(row)

    def close(self) -> None:
        if not self.closed:
            self._result.close()
            self.closed = True

    def __enter__(self) -> "DataReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
        return False
