from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DataTableMapping:
    """Maps a source table name used by fill/update to a DataSet table name."""
    source_table: str
    dataset_table: str


class TableMappingCollection:
    def __init__(self) -> None:
        self._mappings: dict[str, DataTableMapping] = {}

    def add(self, source_table: str, dataset_table: str) -> DataTableMapping:
        mapping = DataTableMapping(source_table, dataset_table)
        self._mappings[source_table] = mapping
        return mapping

    def remove(self, source_table: str) -> None:
        del self._mappings[source_table]

    def resolve(self, source_table: str) -> DataTableMapping:
        """Return the registered mapping, or an identity mapping if there is none."""
        return self._mappings.get(source_table) or DataTableMapping(source_table, source_table)

    def __contains__(self, source_table: object) -> bool:
        return source_table in self._mappings

    def __len__(self) -> int:
        return len(self._mappings)
