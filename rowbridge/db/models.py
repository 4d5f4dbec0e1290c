from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List


class StatementType(str, Enum):
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class FieldMetadata:
    """
    A single column of a query result, as described by the driver.
    """
    name: str
    # raw DBAPI type code; its meaning is driver-specific
    type_code: Any = None


@dataclass
class ResultMetadata:
    fields: List[FieldMetadata] = field(default_factory=list)

    def names(self) -> List[str]:
        return [f.name for f in self.fields]
