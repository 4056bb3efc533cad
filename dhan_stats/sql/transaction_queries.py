"""
Transaction Queries Module for the DhanDiary Stats API.

Provides the aggregate PostgreSQL query behind the transaction metrics card.
Counts are split by type, soft-deletion and sync state; growth compares the
current calendar month with the previous one.
"""


# =============================================================================
# TRANSACTION METRICS QUERY
# =============================================================================

def get_transaction_metrics_query() -> str:
    """
    Generate the single-row aggregate query for transaction metrics.

    Only deletedTransactionCount looks at soft-deleted rows; every other
    counter is restricted to deleted_at IS NULL. The growth rate is
    (this month - last month) / last month * 100, or 0 when last month had no
    transactions.

    Returns:
        PostgreSQL query string. Always yields exactly one row.
    """
    return """
    -- Transaction Metrics Query
    WITH
      transaction_counts AS (
        SELECT
          COUNT(*) FILTER (WHERE deleted_at IS NULL) AS total_transactions,
          COUNT(*) FILTER (
            WHERE deleted_at IS NULL
              AND date >= CURRENT_DATE
              AND date < CURRENT_DATE + INTERVAL '1 day'
          ) AS transactions_today,
          COUNT(*) FILTER (WHERE type = 'income' AND deleted_at IS NULL) AS income_count,
          COUNT(*) FILTER (WHERE type = 'expense' AND deleted_at IS NULL) AS expense_count,
          COUNT(*) FILTER (WHERE deleted_at IS NOT NULL) AS deleted_count,
          COUNT(*) FILTER (WHERE need_sync = true AND deleted_at IS NULL) AS sync_backlog,
          COUNT(DISTINCT user_id) FILTER (WHERE deleted_at IS NULL) AS users_with_transactions
        FROM transactions
      ),
      monthly_counts AS (
        SELECT
          COUNT(*) FILTER (
            WHERE date >= DATE_TRUNC('month', CURRENT_DATE)
              AND date < DATE_TRUNC('month', CURRENT_DATE) + INTERVAL '1 month'
          ) AS current_month,
          COUNT(*) FILTER (
            WHERE date >= DATE_TRUNC('month', CURRENT_DATE) - INTERVAL '1 month'
              AND date < DATE_TRUNC('month', CURRENT_DATE)
          ) AS previous_month
        FROM transactions
        WHERE deleted_at IS NULL
      )
    SELECT
      tc.total_transactions,
      tc.transactions_today,
      mc.current_month AS transactions_this_month,

      CASE
        WHEN tc.users_with_transactions > 0
        THEN ROUND(tc.total_transactions::NUMERIC / tc.users_with_transactions, 2)
        ELSE 0
      END AS avg_transactions_per_user,

      tc.income_count AS income_transaction_count,
      tc.expense_count AS expense_transaction_count,
      tc.deleted_count AS deleted_transaction_count,
      tc.sync_backlog AS sync_backlog_count,

      CASE
        WHEN mc.previous_month > 0
        THEN ROUND(((mc.current_month - mc.previous_month)::NUMERIC / mc.previous_month) * 100, 2)
        ELSE 0
      END AS transaction_growth_rate

    FROM transaction_counts tc
    CROSS JOIN monthly_counts mc
    """
