"""
Health Queries Module for the DhanDiary Stats API.

Provides the aggregate PostgreSQL query behind the system health card:
newest transaction, users with pending device sync, table row counts and the
missing-summaries consistency check.

The missing-summaries check observes the external trigger process that keeps
daily_summaries in sync with transactions. It walks every calendar day of the
trailing window and counts days without any summary row; it never repairs them.
"""

from dhan_stats.sql.timeseries_queries import DAILY_ACTIVITY_WINDOW_DAYS


# =============================================================================
# CONSTANTS
# =============================================================================

# Tables whose row counts feed the estimated database size
COUNTED_TABLES = ('users', 'transactions', 'daily_summaries', 'monthly_summaries')

# Trailing window (days) for the missing-summaries check
SUMMARY_CHECK_WINDOW_DAYS: int = DAILY_ACTIVITY_WINDOW_DAYS


# =============================================================================
# SYSTEM HEALTH QUERY
# =============================================================================

def get_system_health_query() -> str:
    """
    Generate the single-row system health query.

    Returns:
        PostgreSQL query string. Always yields exactly one row; last_time is
        null when there are no live transactions.
    """
    row_counts = ",\n          ".join(
        f"(SELECT COUNT(*) FROM {table}) AS {table}_count" for table in COUNTED_TABLES
    )

    return f"""
    -- System Health Query
    WITH
      last_transaction AS (
        SELECT MAX(created_at) AS last_time
        FROM transactions
        WHERE deleted_at IS NULL
      ),
      sync_issues AS (
        SELECT COUNT(DISTINCT user_id) AS users_with_issues
        FROM transactions
        WHERE need_sync = true AND deleted_at IS NULL
      ),
      row_counts AS (
        SELECT
          {row_counts}
      ),
      missing_summaries AS (
        SELECT COUNT(*) AS missing_days
        FROM generate_series(
          CURRENT_DATE - INTERVAL '{SUMMARY_CHECK_WINDOW_DAYS} days',
          CURRENT_DATE,
          '1 day'::INTERVAL
        ) AS gs(day)
        WHERE NOT EXISTS (
          SELECT 1 FROM daily_summaries ds
          WHERE ds.date::DATE = gs.day::DATE
        )
      )
    SELECT
      lt.last_time,
      COALESCE(si.users_with_issues, 0) AS users_with_sync_issues,
      rc.users_count,
      rc.transactions_count,
      rc.daily_summaries_count,
      rc.monthly_summaries_count,
      COALESCE(ms.missing_days, 0) AS missing_summaries
    FROM last_transaction lt
    CROSS JOIN sync_issues si
    CROSS JOIN row_counts rc
    CROSS JOIN missing_summaries ms
    """
