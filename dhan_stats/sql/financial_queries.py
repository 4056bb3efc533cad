"""
Financial Queries Module for the DhanDiary Stats API.

Provides PostgreSQL queries for money-flow metrics:
- Totals, monthly totals, averages and the largest transaction
- Trailing 12-month income/expense trend from monthly_summaries
- Per-currency breakdown

All monetary aggregates ignore soft-deleted transactions and are rounded to
2 decimals in SQL.
"""


# =============================================================================
# CONSTANTS
# =============================================================================

# Months covered by the monthly trend, current month included
MONTHLY_WINDOW_MONTHS: int = 12


# =============================================================================
# FINANCIAL TOTALS QUERY
# =============================================================================

def get_financial_metrics_query() -> str:
    """
    Generate the single-row aggregate query for financial totals.

    The largest transaction is joined with LEFT JOIN ... ON true so the query
    still yields one row, with null highest_* columns, on an empty ledger.

    Returns:
        PostgreSQL query string. Always yields exactly one row.
    """
    return """
    -- Financial Metrics Query
    WITH
      totals AS (
        SELECT
          COALESCE(SUM(CASE WHEN type = 'income' THEN amount ELSE 0 END), 0) AS total_income,
          COALESCE(SUM(CASE WHEN type = 'expense' THEN amount ELSE 0 END), 0) AS total_expense,
          COALESCE(AVG(amount), 0) AS avg_transaction_value,
          COALESCE(AVG(CASE WHEN type = 'income' THEN amount END), 0) AS avg_income_value,
          COALESCE(AVG(CASE WHEN type = 'expense' THEN amount END), 0) AS avg_expense_value
        FROM transactions
        WHERE deleted_at IS NULL
      ),
      this_month AS (
        SELECT
          COALESCE(SUM(CASE WHEN type = 'income' THEN amount ELSE 0 END), 0) AS income_this_month,
          COALESCE(SUM(CASE WHEN type = 'expense' THEN amount ELSE 0 END), 0) AS expense_this_month
        FROM transactions
        WHERE deleted_at IS NULL
          AND date >= DATE_TRUNC('month', CURRENT_DATE)
          AND date < DATE_TRUNC('month', CURRENT_DATE) + INTERVAL '1 month'
      ),
      highest_transaction AS (
        SELECT amount, type, date
        FROM transactions
        WHERE deleted_at IS NULL
        ORDER BY amount DESC, date DESC
        LIMIT 1
      )
    SELECT
      ROUND(t.total_income, 2) AS total_income,
      ROUND(t.total_expense, 2) AS total_expense,
      ROUND(t.total_income - t.total_expense, 2) AS net_balance,
      ROUND(tm.income_this_month, 2) AS income_this_month,
      ROUND(tm.expense_this_month, 2) AS expense_this_month,
      ROUND(t.avg_transaction_value, 2) AS average_transaction_value,
      ROUND(t.avg_income_value, 2) AS average_income_value,
      ROUND(t.avg_expense_value, 2) AS average_expense_value,
      ht.amount AS highest_transaction_amount,
      ht.type AS highest_transaction_type,
      ht.date AS highest_transaction_date
    FROM totals t
    CROSS JOIN this_month tm
    LEFT JOIN highest_transaction ht ON true
    """


# =============================================================================
# MONTHLY TREND QUERY
# =============================================================================

def get_monthly_trend_query() -> str:
    """
    Generate the trailing 12-month income/expense trend query.

    Reads the trigger-maintained monthly_summaries table and folds the
    per-user rows into one row per calendar month.

    Returns:
        PostgreSQL query string, newest month first, at most 12 rows.
    """
    return f"""
    -- Monthly Financial Trend Query
    -- Window: current month plus the {MONTHLY_WINDOW_MONTHS - 1} months before it
    SELECT
      ms.year,
      ms.month,
      TO_CHAR(MAKE_DATE(ms.year, ms.month, 1), 'Mon YYYY') AS month_label,
      ROUND(COALESCE(SUM(ms.total_in), 0), 2) AS income,
      ROUND(COALESCE(SUM(ms.total_out), 0), 2) AS expense,
      ROUND(COALESCE(SUM(ms.total_in), 0) - COALESCE(SUM(ms.total_out), 0), 2) AS net,
      COALESCE(SUM(ms.count), 0) AS transaction_count
    FROM monthly_summaries ms
    WHERE MAKE_DATE(ms.year, ms.month, 1) >= DATE_TRUNC('month', CURRENT_DATE) - INTERVAL '{MONTHLY_WINDOW_MONTHS - 1} months'
      AND MAKE_DATE(ms.year, ms.month, 1) <= DATE_TRUNC('month', CURRENT_DATE)
    GROUP BY ms.year, ms.month
    ORDER BY ms.year DESC, ms.month DESC
    LIMIT {MONTHLY_WINDOW_MONTHS}
    """


# =============================================================================
# CURRENCY BREAKDOWN QUERY
# =============================================================================

def get_currency_breakdown_query() -> str:
    """
    Generate the per-currency totals query.

    Returns:
        PostgreSQL query string, one row per currency, busiest currency first.
    """
    return """
    -- Currency Breakdown Query
    SELECT
      currency,
      ROUND(COALESCE(SUM(CASE WHEN type = 'income' THEN amount ELSE 0 END), 0), 2) AS total_income,
      ROUND(COALESCE(SUM(CASE WHEN type = 'expense' THEN amount ELSE 0 END), 0), 2) AS total_expense,
      ROUND(
        COALESCE(SUM(CASE WHEN type = 'income' THEN amount ELSE 0 END), 0)
        - COALESCE(SUM(CASE WHEN type = 'expense' THEN amount ELSE 0 END), 0),
        2
      ) AS net_balance,
      COUNT(*) AS transaction_count
    FROM transactions
    WHERE deleted_at IS NULL
    GROUP BY currency
    ORDER BY transaction_count DESC, currency ASC
    """
