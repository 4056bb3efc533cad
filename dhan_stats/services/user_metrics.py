"""
User metrics service.

Runs the user aggregate query and decodes it into UserMetrics. Ratios are
computed in SQL; the service only re-asserts that an empty user base never
reports a non-zero ratio.
"""

import logging

from dhan_stats.core.database import ConnectionManager
from dhan_stats.models.schemas import UserMetrics
from dhan_stats.services.row_decoding import RowSchema, decode_row, first_row, to_float, to_int
from dhan_stats.sql.user_queries import get_user_metrics_query


logger = logging.getLogger(__name__)


USER_METRICS_COLUMNS: RowSchema = {
    "totalUsers": ("total_users", to_int),
    "activeUsers7d": ("active_users_7d", to_int),
    "activeUsers30d": ("active_users_30d", to_int),
    "newUsersToday": ("new_users_today", to_int),
    "newUsersThisMonth": ("new_users_this_month", to_int),
    "userGrowthRate": ("user_growth_rate", to_float),
    "usersWithTransactions": ("users_with_transactions", to_int),
    "usersWithTransactionsPercent": ("users_with_transactions_percent", to_float),
    "churnedUsers": ("churned_users", to_int),
    "avgTransactionsPerUser": ("avg_transactions_per_user", to_float),
}

# Ratios whose denominator is the user base
USER_RATIO_FIELDS = ("userGrowthRate", "usersWithTransactionsPercent", "avgTransactionsPerUser")


async def get_user_metrics(db: ConnectionManager) -> UserMetrics:
    """
    Compute the user metrics card.

    Args:
        db: Connection manager used to run the aggregate query.

    Returns:
        UserMetrics with every field populated (0 where the aggregate was null).

    Raises:
        MetricsUnavailableError: If the aggregate query returned no rows.
    """
    rows = await db.execute(get_user_metrics_query())
    values = decode_row(first_row(rows, "user"), USER_METRICS_COLUMNS)

    if values["totalUsers"] == 0:
        for field in USER_RATIO_FIELDS:
            values[field] = 0.0

    logger.debug(f"Computed user metrics for {values['totalUsers']} users")
    return UserMetrics(**values)
