from .adapter.sql import SqlDataAdapter
from .config import AdapterConfig
from .data.table import DataSet, DataTable, RowState
from .db.connection import AdapterConnection

__all__ = [
    "SqlDataAdapter",
    "AdapterConnection",
    "AdapterConfig",
    "DataSet",
    "DataTable",
    "RowState",
]
