"""
Time-Series Queries Module for the DhanDiary Stats API.

Provides PostgreSQL queries for the analytics charts:
- Daily activity over the trailing 30 days (daily_summaries + transactions)
- Monthly user and money growth over the trailing 12 months
- Peak usage day within the trailing 30 days

Daily figures come from the trigger-maintained daily_summaries table, folded
from per-user rows into one row per day. Results are ordered newest first.
"""

from dhan_stats.sql.financial_queries import MONTHLY_WINDOW_MONTHS


# =============================================================================
# CONSTANTS
# =============================================================================

# Trailing window (days) for daily activity and the peak usage day
DAILY_ACTIVITY_WINDOW_DAYS: int = 30


# =============================================================================
# DAILY ACTIVITY QUERY
# =============================================================================

def get_daily_activity_query() -> str:
    """
    Generate the trailing 30-day daily activity query.

    Returns:
        PostgreSQL query string, one row per day with a summary, newest first.

    Note:
        uniqueUsers counts distinct users with a live transaction dated that day.
    """
    return f"""
    -- Daily Activity Query
    -- Window: last {DAILY_ACTIVITY_WINDOW_DAYS} days
    WITH
      daily_totals AS (
        SELECT
          ds.date::DATE AS day,
          COALESCE(SUM(ds.count), 0) AS transaction_count,
          COALESCE(SUM(ds.total_in), 0) AS income,
          COALESCE(SUM(ds.total_out), 0) AS expense
        FROM daily_summaries ds
        WHERE ds.date >= CURRENT_DATE - INTERVAL '{DAILY_ACTIVITY_WINDOW_DAYS} days'
        GROUP BY ds.date::DATE
      ),
      daily_users AS (
        SELECT
          t.date::DATE AS day,
          COUNT(DISTINCT t.user_id) AS unique_users
        FROM transactions t
        WHERE t.deleted_at IS NULL
          AND t.date >= CURRENT_DATE - INTERVAL '{DAILY_ACTIVITY_WINDOW_DAYS} days'
        GROUP BY t.date::DATE
      )
    SELECT
      dt.day::TEXT AS date,
      dt.transaction_count,
      ROUND(dt.income, 2) AS income,
      ROUND(dt.expense, 2) AS expense,
      COALESCE(du.unique_users, 0) AS unique_users
    FROM daily_totals dt
    LEFT JOIN daily_users du ON du.day = dt.day
    ORDER BY dt.day DESC
    """


# =============================================================================
# MONTHLY GROWTH QUERY
# =============================================================================

def get_monthly_growth_query() -> str:
    """
    Generate the trailing 12-month growth query.

    New users are counted per creation month. totalUsers is the cumulative
    number of users created before the end of each month.

    Returns:
        PostgreSQL query string, newest month first, at most 12 rows.
    """
    return f"""
    -- Monthly Growth Query
    -- Window: current month plus the {MONTHLY_WINDOW_MONTHS - 1} months before it
    WITH
      month_series AS (
        SELECT d::DATE AS month_start
        FROM generate_series(
          DATE_TRUNC('month', CURRENT_DATE) - INTERVAL '{MONTHLY_WINDOW_MONTHS - 1} months',
          DATE_TRUNC('month', CURRENT_DATE),
          '1 month'::INTERVAL
        ) AS d
      ),
      user_growth AS (
        SELECT
          DATE_TRUNC('month', created_at)::DATE AS month_start,
          COUNT(*) AS new_users
        FROM users
        WHERE created_at >= DATE_TRUNC('month', CURRENT_DATE) - INTERVAL '{MONTHLY_WINDOW_MONTHS - 1} months'
        GROUP BY DATE_TRUNC('month', created_at)::DATE
      ),
      total_users_per_month AS (
        SELECT
          s.month_start,
          (SELECT COUNT(*) FROM users u WHERE u.created_at < s.month_start + INTERVAL '1 month') AS total_users
        FROM month_series s
      ),
      monthly_totals AS (
        SELECT
          MAKE_DATE(ms.year, ms.month, 1) AS month_start,
          COALESCE(SUM(ms.count), 0) AS transactions,
          COALESCE(SUM(ms.total_in), 0) AS income,
          COALESCE(SUM(ms.total_out), 0) AS expense
        FROM monthly_summaries ms
        GROUP BY ms.year, ms.month
      )
    SELECT
      EXTRACT(YEAR FROM mt.month_start)::INT AS year,
      EXTRACT(MONTH FROM mt.month_start)::INT AS month,
      TO_CHAR(mt.month_start, 'Mon YYYY') AS month_label,
      COALESCE(ug.new_users, 0) AS new_users,
      COALESCE(tu.total_users, 0) AS total_users,
      mt.transactions,
      ROUND(mt.income, 2) AS income,
      ROUND(mt.expense, 2) AS expense
    FROM monthly_totals mt
    JOIN month_series s ON s.month_start = mt.month_start
    LEFT JOIN user_growth ug ON ug.month_start = mt.month_start
    LEFT JOIN total_users_per_month tu ON tu.month_start = mt.month_start
    ORDER BY mt.month_start DESC
    LIMIT {MONTHLY_WINDOW_MONTHS}
    """


# =============================================================================
# PEAK USAGE DAY QUERY
# =============================================================================

def get_peak_usage_day_query() -> str:
    """
    Generate the busiest-day query for the trailing 30 days.

    Ties are broken in favour of the most recent day.

    Returns:
        PostgreSQL query string yielding zero or one row.
    """
    return f"""
    -- Peak Usage Day Query
    WITH daily_counts AS (
      SELECT
        ds.date::DATE AS day,
        COALESCE(SUM(ds.count), 0) AS transaction_count
      FROM daily_summaries ds
      WHERE ds.date >= CURRENT_DATE - INTERVAL '{DAILY_ACTIVITY_WINDOW_DAYS} days'
      GROUP BY ds.date::DATE
    )
    SELECT
      day::TEXT AS date,
      transaction_count
    FROM daily_counts
    ORDER BY transaction_count DESC, day DESC
    LIMIT 1
    """
