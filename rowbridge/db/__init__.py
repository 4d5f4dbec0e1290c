from .command import Command, Parameter, ParameterCollection
from .connection import AdapterConnection
from .models import FieldMetadata, ResultMetadata, StatementType
from .reader import DataReader
from .session import DbSession

__all__ = [
    "AdapterConnection",
    "DbSession",
    "DataReader",
    "Command",
    "Parameter",
    "ParameterCollection",
    "StatementType",
    "FieldMetadata",
    "ResultMetadata",
]
