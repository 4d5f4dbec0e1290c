from dataclasses import dataclass


@dataclass
class AdapterConfig:
    accept_changes_during_fill: bool = True
    accept_changes_during_update: bool = True
    continue_update_on_error: bool = False
    default_source_table: str = "Table"

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not isinstance(self.default_source_table, str) or not self.default_source_table.strip():
            raise ValueError("default_source_table must be a non-empty string")
