"""
Pydantic response models for the DhanDiary Stats API.

Field names are camelCase because they are the JSON contract consumed by the
admin dashboard. Every numeric field defaults to 0 so a missing aggregate can
never surface as null or NaN.

Model groups:
- User metrics: UserMetrics
- Transaction metrics: TransactionMetrics
- Financial metrics: FinancialMetrics, HighestTransaction, MonthlyFinancialTrend, CurrencyBreakdown
- Time-series analytics: TimeSeriesStats, DailyActivity, MonthlyGrowth, PeakUsageDay
- System health: SystemHealthMetrics, TableRowCounts, TriggersHealth, DatabaseSize
- Overview: GlobalStats, FinancialOverview, HealthOverview, Snapshot
- Envelope and request: StatsResponse, StatsQueryParams

All models use Pydantic v2 syntax.
"""

from datetime import date as DateType
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from dhan_stats.models.enums import StatsRange


# =============================================================================
# User Metrics
# =============================================================================


class UserMetrics(BaseModel):
    """
    Aggregate view of the user base.

    Growth rate compares users created in the last 30 days with the users that
    existed before them. Percentages are 0-100 and rounded to 2 decimals.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "totalUsers": 1250,
                "activeUsers7d": 310,
                "activeUsers30d": 780,
                "newUsersToday": 4,
                "newUsersThisMonth": 96,
                "userGrowthRate": 8.32,
                "usersWithTransactions": 1020,
                "usersWithTransactionsPercent": 81.6,
                "churnedUsers": 140,
                "avgTransactionsPerUser": 37.45,
            }
        }
    )

    totalUsers: int = Field(default=0, description="Active users in the system")
    activeUsers7d: int = Field(default=0, description="Users updated in the last 7 days")
    activeUsers30d: int = Field(default=0, description="Users updated in the last 30 days")
    newUsersToday: int = Field(default=0, description="Users created since midnight")
    newUsersThisMonth: int = Field(default=0, description="Users created in the last 30 days")
    userGrowthRate: float = Field(default=0, description="New users as a percentage of the prior base")
    usersWithTransactions: int = Field(default=0, description="Users with at least one live transaction")
    usersWithTransactionsPercent: float = Field(default=0, description="Share of users with transactions (%)")
    churnedUsers: int = Field(default=0, description="Users older than 60 days with no transaction in 60 days")
    avgTransactionsPerUser: float = Field(default=0, description="Live transactions per transacting user")


# =============================================================================
# Transaction Metrics
# =============================================================================


class TransactionMetrics(BaseModel):
    """Transaction volume counters. Growth compares this month with last month."""

    totalTransactions: int = Field(default=0, description="Live (not soft-deleted) transactions")
    transactionsToday: int = Field(default=0, description="Live transactions dated today")
    transactionsThisMonth: int = Field(default=0, description="Live transactions dated this calendar month")
    avgTransactionsPerUser: float = Field(default=0, description="Live transactions per transacting user")
    incomeTransactionCount: int = Field(default=0, description="Live income transactions")
    expenseTransactionCount: int = Field(default=0, description="Live expense transactions")
    deletedTransactionCount: int = Field(default=0, description="Soft-deleted transactions")
    syncBacklogCount: int = Field(default=0, description="Live transactions waiting for device sync")
    transactionGrowthRate: float = Field(default=0, description="Month-over-month change (%)")


# =============================================================================
# Financial Metrics
# =============================================================================


class HighestTransaction(BaseModel):
    """The single largest live transaction."""

    amount: float = Field(default=0, description="Transaction amount")
    type: str = Field(default="", description="income or expense, as stored")
    date: Optional[str] = Field(default=None, description="Transaction date (ISO-8601), null when unset")


class MonthlyFinancialTrend(BaseModel):
    """One month of the trailing 12-month income/expense trend."""

    year: int = Field(default=0)
    month: int = Field(default=0, description="Calendar month, 1-12")
    monthLabel: str = Field(default="", description="Display label, e.g. 'Jan 2026'")
    income: float = Field(default=0)
    expense: float = Field(default=0)
    net: float = Field(default=0, description="income - expense")
    transactionCount: int = Field(default=0)


class CurrencyBreakdown(BaseModel):
    """Totals for one currency across all live transactions."""

    currency: str = Field(default="", description="ISO currency code")
    totalIncome: float = Field(default=0)
    totalExpense: float = Field(default=0)
    netBalance: float = Field(default=0)
    transactionCount: int = Field(default=0)


class FinancialMetrics(BaseModel):
    """
    Money-flow aggregates over live transactions.

    monthlyTrend is ordered newest month first; the dashboard reverses it for charts.
    currencyBreakdown is ordered by transaction count, largest first.
    """

    totalIncome: float = Field(default=0)
    totalExpense: float = Field(default=0)
    netBalance: float = Field(default=0, description="totalIncome - totalExpense")
    incomeThisMonth: float = Field(default=0)
    expenseThisMonth: float = Field(default=0)
    highestTransaction: Optional[HighestTransaction] = Field(default=None)
    averageTransactionValue: float = Field(default=0)
    averageIncomeValue: float = Field(default=0)
    averageExpenseValue: float = Field(default=0)
    monthlyTrend: List[MonthlyFinancialTrend] = Field(default_factory=list)
    currencyBreakdown: List[CurrencyBreakdown] = Field(default_factory=list)


# =============================================================================
# Time-Series Analytics
# =============================================================================


class DailyActivity(BaseModel):
    """One day of the trailing 30-day activity series."""

    date: str = Field(..., description="Day (YYYY-MM-DD)")
    transactionCount: int = Field(default=0)
    income: float = Field(default=0)
    expense: float = Field(default=0)
    uniqueUsers: int = Field(default=0, description="Distinct users with a transaction that day")


class MonthlyGrowth(BaseModel):
    """One month of the trailing 12-month growth series."""

    year: int = Field(default=0)
    month: int = Field(default=0)
    monthLabel: str = Field(default="")
    newUsers: int = Field(default=0)
    totalUsers: int = Field(default=0, description="Users created before the end of the month")
    transactions: int = Field(default=0)
    income: float = Field(default=0)
    expense: float = Field(default=0)


class PeakUsageDay(BaseModel):
    """Busiest day of the trailing 30-day window."""

    date: str = Field(..., description="Day (YYYY-MM-DD)")
    transactionCount: int = Field(default=0)


class TimeSeriesStats(BaseModel):
    """Daily and monthly series, newest first."""

    dailyActivity: List[DailyActivity] = Field(default_factory=list)
    monthlyGrowth: List[MonthlyGrowth] = Field(default_factory=list)
    peakUsageDay: Optional[PeakUsageDay] = Field(default=None)


# =============================================================================
# System Health
# =============================================================================


class TableRowCounts(BaseModel):
    users: int = Field(default=0)
    transactions: int = Field(default=0)
    dailySummaries: int = Field(default=0)
    monthlySummaries: int = Field(default=0)


class TriggersHealth(BaseModel):
    """Consistency of the trigger-maintained summary tables."""

    missingSummaries: int = Field(default=0, description="Days in the last 30 without a daily summary")
    inconsistentData: bool = Field(default=False)


class DatabaseSize(BaseModel):
    estimated: str = Field(default="0.00 MB", description="Row-count based approximation, not a storage measurement")


class SystemHealthMetrics(BaseModel):
    """Operational health indicators for the data pipeline."""

    lastTransactionTime: Optional[str] = Field(default=None, description="Creation time of the newest live transaction")
    usersWithSyncIssues: int = Field(default=0)
    tableRowCounts: TableRowCounts = Field(default_factory=TableRowCounts)
    triggersHealth: TriggersHealth = Field(default_factory=TriggersHealth)
    databaseSize: DatabaseSize = Field(default_factory=DatabaseSize)


# =============================================================================
# Global Overview
# =============================================================================


class FinancialOverview(BaseModel):
    totalIncome: float = Field(default=0)
    totalExpense: float = Field(default=0)
    netBalance: float = Field(default=0)


class HealthOverview(BaseModel):
    lastTransactionTime: Optional[str] = Field(default=None)
    usersWithSyncIssues: int = Field(default=0)


class Snapshot(BaseModel):
    generatedAt: str = Field(..., description="UTC time the overview was assembled (ISO-8601)")
    dataFreshness: str = Field(default="Real-time")


class GlobalStats(BaseModel):
    """
    Dashboard overview.

    A projection of the user, transaction, financial and health metrics; no
    field is computed independently of those services.
    """

    user: UserMetrics
    transaction: TransactionMetrics
    financial: FinancialOverview
    health: HealthOverview
    snapshot: Snapshot


# =============================================================================
# Envelope and Request Models
# =============================================================================


class StatsResponse(BaseModel):
    """
    JSON envelope shared by every stats endpoint.

    Absent optional members are omitted from the payload, but `null` values
    inside `data` are kept.
    """

    success: bool
    data: Optional[BaseModel] = None
    error: Optional[str] = None
    timestamp: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": self.success}
        if self.data is not None:
            payload["data"] = self.data.model_dump(mode="json")
        if self.error is not None:
            payload["error"] = self.error
        if self.timestamp is not None:
            payload["timestamp"] = self.timestamp
        return payload


class StatsQueryParams(BaseModel):
    """Validated filter parameters accepted by the time-series endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    range: Optional[StatsRange] = Field(default=None)
    from_date: Optional[DateType] = Field(default=None, alias="from")
    to_date: Optional[DateType] = Field(default=None, alias="to")

    @property
    def is_empty(self) -> bool:
        return (
            (self.range is None or self.range == StatsRange.ALL)
            and self.from_date is None
            and self.to_date is None
        )
