"""
Package initialization file for the stats data models.

Re-exports all Pydantic schemas and enumerations so other modules can import
them from dhan_stats.models directly.

Usage:
    from dhan_stats.models import (
        StatsRange,
        UserMetrics,
        GlobalStats,
        StatsResponse,
    )
"""

# =============================================================================
# Enums
# =============================================================================

from dhan_stats.models.enums import (
    StatsRange,
    TransactionType,
    AdminRole,
)

# =============================================================================
# Schemas
# =============================================================================

from dhan_stats.models.schemas import (
    # User and transaction metrics
    UserMetrics,
    TransactionMetrics,
    # Financial metrics
    FinancialMetrics,
    HighestTransaction,
    MonthlyFinancialTrend,
    CurrencyBreakdown,
    # Time-series analytics
    TimeSeriesStats,
    DailyActivity,
    MonthlyGrowth,
    PeakUsageDay,
    # System health
    SystemHealthMetrics,
    TableRowCounts,
    TriggersHealth,
    DatabaseSize,
    # Global overview
    GlobalStats,
    FinancialOverview,
    HealthOverview,
    Snapshot,
    # Envelope and request
    StatsResponse,
    StatsQueryParams,
)


__all__ = [
    # Enums
    'StatsRange',
    'TransactionType',
    'AdminRole',
    # User and transaction metrics
    'UserMetrics',
    'TransactionMetrics',
    # Financial metrics
    'FinancialMetrics',
    'HighestTransaction',
    'MonthlyFinancialTrend',
    'CurrencyBreakdown',
    # Time-series analytics
    'TimeSeriesStats',
    'DailyActivity',
    'MonthlyGrowth',
    'PeakUsageDay',
    # System health
    'SystemHealthMetrics',
    'TableRowCounts',
    'TriggersHealth',
    'DatabaseSize',
    # Global overview
    'GlobalStats',
    'FinancialOverview',
    'HealthOverview',
    'Snapshot',
    # Envelope and request
    'StatsResponse',
    'StatsQueryParams',
]
