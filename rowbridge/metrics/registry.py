from prometheus_client import Counter, Histogram

ROWBRIDGE_FILL_ROWS_TOTAL = Counter(
    "rowbridge_fill_rows_total",
    "Rows loaded into data tables by fill operations",
    ["table"],
)

ROWBRIDGE_ROW_UPDATE_TOTAL = Counter(
    "rowbridge_row_update_total",
    "Row reconciliation attempts by statement type and outcome",
    ["table", "statement_type", "status"],
)

ROWBRIDGE_ROW_UPDATE_LATENCY_SECONDS = Histogram(
    "rowbridge_row_update_latency_seconds",
    "Latency of a single row reconciliation command",
    ["table", "statement_type"],
)
