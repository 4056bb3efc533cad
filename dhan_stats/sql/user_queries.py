"""
User Queries Module for the DhanDiary Stats API.

Provides the aggregate PostgreSQL query behind the user metrics card: totals,
activity windows, growth, transacting share and churn.

Rules applied throughout:
- Only users with status = 'active' are counted
- Transactions with deleted_at set are ignored
- Every ratio guards its denominator and yields 0 instead of dividing by zero
"""


# =============================================================================
# CONSTANTS
# =============================================================================

# Activity windows (days) for activeUsers7d / activeUsers30d
ACTIVE_WINDOWS_DAYS = (7, 30)

# Window (days) used for "new users this month" and the growth rate
NEW_USER_WINDOW_DAYS: int = 30

# A user is churned after this many days without a transaction
CHURN_INACTIVITY_DAYS: int = 60


# =============================================================================
# USER METRICS QUERY
# =============================================================================

def get_user_metrics_query() -> str:
    """
    Generate the single-row aggregate query for user metrics.

    Growth rate is the number of users created in the last 30 days as a
    percentage of the users that existed before them. A churned user is an
    active user created more than 60 days ago with no live transaction created
    in the last 60 days.

    Returns:
        PostgreSQL query string. Always yields exactly one row.
    """
    short_window, long_window = ACTIVE_WINDOWS_DAYS

    return f"""
    -- User Metrics Query
    WITH
      user_counts AS (
        SELECT
          COUNT(*) AS total_users,
          COUNT(*) FILTER (WHERE created_at >= NOW() - INTERVAL '{NEW_USER_WINDOW_DAYS} days') AS new_users_window,
          COUNT(*) FILTER (WHERE created_at >= CURRENT_DATE) AS new_users_today,
          COUNT(*) FILTER (WHERE updated_at >= NOW() - INTERVAL '{short_window} days') AS active_users_short,
          COUNT(*) FILTER (WHERE updated_at >= NOW() - INTERVAL '{long_window} days') AS active_users_long
        FROM users
        WHERE status = 'active'
      ),
      user_transactions AS (
        SELECT
          COUNT(DISTINCT t.user_id) AS users_with_transactions,
          COUNT(*) AS live_transactions
        FROM transactions t
        JOIN users u ON u.id = t.user_id AND u.status = 'active'
        WHERE t.deleted_at IS NULL
      ),
      churned_users AS (
        SELECT COUNT(*) AS churned_count
        FROM users u
        WHERE u.status = 'active'
          AND u.created_at < NOW() - INTERVAL '{CHURN_INACTIVITY_DAYS} days'
          AND NOT EXISTS (
            SELECT 1
            FROM transactions t
            WHERE t.user_id = u.id
              AND t.deleted_at IS NULL
              AND t.created_at >= NOW() - INTERVAL '{CHURN_INACTIVITY_DAYS} days'
          )
      )
    SELECT
      uc.total_users,
      uc.active_users_short AS active_users_7d,
      uc.active_users_long AS active_users_30d,
      uc.new_users_today,
      uc.new_users_window AS new_users_this_month,

      -- new users as a percentage of the pre-existing base
      CASE
        WHEN uc.total_users - uc.new_users_window > 0
        THEN ROUND((uc.new_users_window::NUMERIC / (uc.total_users - uc.new_users_window)) * 100, 2)
        ELSE 0
      END AS user_growth_rate,

      COALESCE(ut.users_with_transactions, 0) AS users_with_transactions,

      CASE
        WHEN uc.total_users > 0
        THEN ROUND((COALESCE(ut.users_with_transactions, 0)::NUMERIC / uc.total_users) * 100, 2)
        ELSE 0
      END AS users_with_transactions_percent,

      COALESCE(cu.churned_count, 0) AS churned_users,

      CASE
        WHEN uc.total_users > 0 AND COALESCE(ut.users_with_transactions, 0) > 0
        THEN ROUND(ut.live_transactions::NUMERIC / ut.users_with_transactions, 2)
        ELSE 0
      END AS avg_transactions_per_user

    FROM user_counts uc
    CROSS JOIN user_transactions ut
    CROSS JOIN churned_users cu
    """
