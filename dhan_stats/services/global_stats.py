"""
Global overview service.

Fans out to the user, transaction, financial and health services concurrently
and projects their results into GlobalStats. Nothing is queried here directly,
so the overview always agrees with the individual cards.
"""

import asyncio
from datetime import datetime, timezone

from dhan_stats.core.database import ConnectionManager
from dhan_stats.models.schemas import (
    FinancialOverview,
    GlobalStats,
    HealthOverview,
    Snapshot,
)
from dhan_stats.services.financial_metrics import get_financial_metrics
from dhan_stats.services.health import get_system_health_metrics
from dhan_stats.services.transaction_metrics import get_transaction_metrics
from dhan_stats.services.user_metrics import get_user_metrics


DATA_FRESHNESS = "Real-time"


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def get_global_stats(db: ConnectionManager) -> GlobalStats:
    """
    Assemble the dashboard overview.

    Args:
        db: Connection manager shared by the four sub-services.

    Returns:
        GlobalStats with the full user and transaction cards, the financial
        totals, the health headline and a generation timestamp.

    Raises:
        ServiceError: If any sub-service fails; the first failure propagates.
    """
    user_metrics, transaction_metrics, financial_metrics, health_metrics = await asyncio.gather(
        get_user_metrics(db),
        get_transaction_metrics(db),
        get_financial_metrics(db),
        get_system_health_metrics(db),
    )

    return GlobalStats(
        user=user_metrics,
        transaction=transaction_metrics,
        financial=FinancialOverview(
            totalIncome=financial_metrics.totalIncome,
            totalExpense=financial_metrics.totalExpense,
            netBalance=financial_metrics.netBalance,
        ),
        health=HealthOverview(
            lastTransactionTime=health_metrics.lastTransactionTime,
            usersWithSyncIssues=health_metrics.usersWithSyncIssues,
        ),
        snapshot=Snapshot(generatedAt=utc_timestamp(), dataFreshness=DATA_FRESHNESS),
    )
