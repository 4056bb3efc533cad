"""
System health service.

Decodes the health query and derives two values in Python:

- triggersHealth.inconsistentData: any day of the trailing window lacks a daily summary
- databaseSize.estimated: total row count across the known tables multiplied by
  a fixed per-row byte estimate. This is an approximation for the dashboard,
  not a storage measurement.
"""

import logging

from dhan_stats.core.database import ConnectionManager
from dhan_stats.models.schemas import (
    DatabaseSize,
    SystemHealthMetrics,
    TableRowCounts,
    TriggersHealth,
)
from dhan_stats.services.row_decoding import RowSchema, decode_row, first_row, to_int, to_iso_string
from dhan_stats.sql.health_queries import get_system_health_query


logger = logging.getLogger(__name__)


ESTIMATED_BYTES_PER_ROW: int = 1024

BYTES_PER_MB: int = 1024 * 1024

HEALTH_COLUMNS: RowSchema = {
    "lastTransactionTime": ("last_time", to_iso_string),
    "usersWithSyncIssues": ("users_with_sync_issues", to_int),
    "missingSummaries": ("missing_summaries", to_int),
}

TABLE_ROW_COUNT_COLUMNS: RowSchema = {
    "users": ("users_count", to_int),
    "transactions": ("transactions_count", to_int),
    "dailySummaries": ("daily_summaries_count", to_int),
    "monthlySummaries": ("monthly_summaries_count", to_int),
}


def estimate_database_size(row_counts: TableRowCounts) -> str:
    """
    Approximate the database size from table row counts.

    Args:
        row_counts: Row counts of the known tables.

    Returns:
        Size in megabytes with two decimals, e.g. "12.50 MB".
    """
    total_rows = (
        row_counts.users
        + row_counts.transactions
        + row_counts.dailySummaries
        + row_counts.monthlySummaries
    )
    estimated_mb = total_rows * ESTIMATED_BYTES_PER_ROW / BYTES_PER_MB
    return f"{estimated_mb:.2f} MB"


async def get_system_health_metrics(db: ConnectionManager) -> SystemHealthMetrics:
    """
    Compute the system health card.

    Raises:
        MetricsUnavailableError: If the health query returned no rows.
    """
    rows = await db.execute(get_system_health_query())
    row = first_row(rows, "system health")

    values = decode_row(row, HEALTH_COLUMNS)
    row_counts = TableRowCounts(**decode_row(row, TABLE_ROW_COUNT_COLUMNS))
    missing_summaries = values["missingSummaries"]

    if missing_summaries > 0:
        logger.warning(f"{missing_summaries} day(s) in the trailing window have no daily summary")

    return SystemHealthMetrics(
        lastTransactionTime=values["lastTransactionTime"],
        usersWithSyncIssues=values["usersWithSyncIssues"],
        tableRowCounts=row_counts,
        triggersHealth=TriggersHealth(
            missingSummaries=missing_summaries,
            inconsistentData=missing_summaries > 0,
        ),
        databaseSize=DatabaseSize(estimated=estimate_database_size(row_counts)),
    )
