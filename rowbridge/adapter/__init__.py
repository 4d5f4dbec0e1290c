from .base import DataAdapter
from .events import EventHook, RowUpdatedEventArgs, RowUpdatingEventArgs, UpdateStatus
from .mapping import DataTableMapping, TableMappingCollection
from .sql import SqlDataAdapter

__all__ = [
    "DataAdapter",
    "SqlDataAdapter",
    "EventHook",
    "RowUpdatingEventArgs",
    "RowUpdatedEventArgs",
    "UpdateStatus",
    "DataTableMapping",
    "TableMappingCollection",
]
