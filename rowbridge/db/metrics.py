from __future__ import annotations

from ..metrics.registry import (
    ROWBRIDGE_FILL_ROWS_TOTAL,
    ROWBRIDGE_ROW_UPDATE_LATENCY_SECONDS,
    ROWBRIDGE_ROW_UPDATE_TOTAL,
)


def observe_fill(table: str, rows: int) -> None:
    if rows > 0:
        ROWBRIDGE_FILL_ROWS_TOTAL.labels(table=table).inc(rows)


def observe_row_update(table: str, statement_type: str, status: str, latency_s: float) -> None:
    """
    Record one row command. Latency is only observed for commands that ran.
    """
    ROWBRIDGE_ROW_UPDATE_TOTAL.labels(
        table=table, statement_type=statement_type, status=status
    ).inc()
    if status != "skipped":
        ROWBRIDGE_ROW_UPDATE_LATENCY_SECONDS.labels(
            table=table, statement_type=statement_type
        ).observe(latency_s)
