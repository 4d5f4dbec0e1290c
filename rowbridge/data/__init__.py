from .table import DataColumn, DataRow, DataSet, DataTable, RowState, RowVersion

__all__ = [
    "DataSet",
    "DataTable",
    "DataRow",
    "DataColumn",
    "RowState",
    "RowVersion",
]
