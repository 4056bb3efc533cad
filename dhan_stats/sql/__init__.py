"""
SQL Query Module for the DhanDiary Stats API.

Provides the read-only aggregate queries for:
- User metrics (user_queries)
- Transaction metrics (transaction_queries)
- Financial totals, monthly trend and currency breakdown (financial_queries)
- Daily activity, monthly growth and peak usage day (timeseries_queries)
- System health and summary consistency (health_queries)

Every query is parameterless and side-effect free. Services execute them
through ConnectionManager.execute() and decode the rows themselves.

Example usage:
    from dhan_stats.sql import get_user_metrics_query

    rows = await manager.execute(get_user_metrics_query())
"""

# =============================================================================
# USER QUERIES
# =============================================================================

from dhan_stats.sql.user_queries import (
    get_user_metrics_query,
    ACTIVE_WINDOWS_DAYS,
    NEW_USER_WINDOW_DAYS,
    CHURN_INACTIVITY_DAYS,
)

# =============================================================================
# TRANSACTION QUERIES
# =============================================================================

from dhan_stats.sql.transaction_queries import get_transaction_metrics_query

# =============================================================================
# FINANCIAL QUERIES
# =============================================================================

from dhan_stats.sql.financial_queries import (
    get_financial_metrics_query,
    get_monthly_trend_query,
    get_currency_breakdown_query,
    MONTHLY_WINDOW_MONTHS,
)

# =============================================================================
# TIME-SERIES QUERIES
# =============================================================================

from dhan_stats.sql.timeseries_queries import (
    get_daily_activity_query,
    get_monthly_growth_query,
    get_peak_usage_day_query,
    DAILY_ACTIVITY_WINDOW_DAYS,
)

# =============================================================================
# HEALTH QUERIES
# =============================================================================

from dhan_stats.sql.health_queries import (
    get_system_health_query,
    COUNTED_TABLES,
    SUMMARY_CHECK_WINDOW_DAYS,
)


__all__ = [
    # User queries
    'get_user_metrics_query',
    'ACTIVE_WINDOWS_DAYS',
    'NEW_USER_WINDOW_DAYS',
    'CHURN_INACTIVITY_DAYS',
    # Transaction queries
    'get_transaction_metrics_query',
    # Financial queries
    'get_financial_metrics_query',
    'get_monthly_trend_query',
    'get_currency_breakdown_query',
    'MONTHLY_WINDOW_MONTHS',
    # Time-series queries
    'get_daily_activity_query',
    'get_monthly_growth_query',
    'get_peak_usage_day_query',
    'DAILY_ACTIVITY_WINDOW_DAYS',
    # Health queries
    'get_system_health_query',
    'COUNTED_TABLES',
    'SUMMARY_CHECK_WINDOW_DAYS',
]
