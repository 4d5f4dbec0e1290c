from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Iterator, Mapping

from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause

from ..data.table import DataRow, RowVersion
from ..errors import AdapterConfigurationError
from .models import StatementType


@dataclass
class Parameter:
    """
    A named SQL parameter, optionally bound to a column of a DataRow.

    When ``source_column`` is set, the value is read from the row being
    reconciled (from ``source_version`` of that row); a row whose table lacks
    that column is an error. Pass ``source_column=""`` to always send the
    fixed ``value``.
    """
    name: str
    type_code: Any = None
    value: Any = None
    source_column: str | None = None
    source_version: RowVersion = RowVersion.CURRENT

    def __post_init__(self) -> None:
        if self.source_column is None:
            self.source_column = self.name

    def with_version(self, version: RowVersion) -> "Parameter":
        return replace(self, source_version=version)


class ParameterCollection:
    """Ordered collection of Parameters with unique names."""

    def __init__(self, parameters: Iterable[Parameter] = ()) -> None:
        self._items: list[Parameter] = []
        self.extend(parameters)

    def add(self, parameter: Parameter) -> Parameter:
        if parameter.name in self:
            raise ValueError(f"Parameter {parameter.name!r} is already in the collection")
        self._items.append(parameter)
        return parameter

    def extend(self, parameters: Iterable[Parameter]) -> None:
        for p in parameters:
            self.add(p)

    def clear(self) -> None:
        self._items.clear()

    def names(self) -> list[str]:
        return [p.name for p in self._items]

    def filter(self, predicate: Callable[[Parameter], bool]) -> "ParameterCollection":
        return ParameterCollection(p for p in self._items if predicate(p))

    def copy(self) -> "ParameterCollection":
        return ParameterCollection(replace(p) for p in self._items)

    def __getitem__(self, name: str) -> Parameter:
        for p in self._items:
            if p.name == name:
                return p
        raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        return any(p.name == name for p in self._items)

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ParameterCollection({self.names()!r})"


class Command:
    """
    A SQL statement with named (``:name``) placeholders and its parameters.

    Commands are inert: they are executed through a DbSession.
    """

    def __init__(
        self,
        sql: str,
        parameters: ParameterCollection | None = None,
        statement_type: StatementType = StatementType.SELECT,
    ) -> None:
        self.sql = sql
        self.parameters = parameters if parameters is not None else ParameterCollection()
        self.statement_type = statement_type

    @property
    def clause(self) -> TextClause:
        return text(self.sql)

    def bind(
        self,
        row: DataRow | None = None,
        values: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Build the parameter mapping for one execution.

        Args:
            row: Row supplying values for parameters with a source column
            values: Explicit values; they win over row and fixed values

        Returns:
            parameter name -> value
        """
        params: dict[str, Any] = {}
        for p in self.parameters:
            if row is not None and p.source_column:
                if not row.table.has_column(p.source_column):
                    raise AdapterConfigurationError(
                        f"Parameter {p.name!r} reads column {p.source_column!r}, "
                        f"which table {row.table.name!r} does not have"
                    )
                params[p.name] = row.get(p.source_column, p.source_version)
            else:
                params[p.name] = p.value
        if values:
            params.update(values)
        return params

    def __repr__(self) -> str:
        return f"Command({self.statement_type.value}, {self.sql!r})"
