class RowBridgeError(Exception):
    """Base exception for rowbridge errors."""


class AdapterConfigurationError(RowBridgeError):
    """The adapter lacks a command, key set, or setting it needs."""


class DbConcurrencyError(RowBridgeError):
    """An UPDATE or DELETE affected none of the rows it was expected to."""


class RowUpdateError(RowBridgeError):
    """Any driver failure while reconciling a single row."""

    def __init__(self, message: str, row=None, statement_type=None) -> None:
        super().__init__(message)
        self.row = row
        self.statement_type = statement_type
