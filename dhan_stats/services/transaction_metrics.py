"""Transaction metrics service."""

from dhan_stats.core.database import ConnectionManager
from dhan_stats.models.schemas import TransactionMetrics
from dhan_stats.services.row_decoding import RowSchema, decode_row, first_row, to_float, to_int
from dhan_stats.sql.transaction_queries import get_transaction_metrics_query


TRANSACTION_METRICS_COLUMNS: RowSchema = {
    "totalTransactions": ("total_transactions", to_int),
    "transactionsToday": ("transactions_today", to_int),
    "transactionsThisMonth": ("transactions_this_month", to_int),
    "avgTransactionsPerUser": ("avg_transactions_per_user", to_float),
    "incomeTransactionCount": ("income_transaction_count", to_int),
    "expenseTransactionCount": ("expense_transaction_count", to_int),
    "deletedTransactionCount": ("deleted_transaction_count", to_int),
    "syncBacklogCount": ("sync_backlog_count", to_int),
    "transactionGrowthRate": ("transaction_growth_rate", to_float),
}


async def get_transaction_metrics(db: ConnectionManager) -> TransactionMetrics:
    """
    Compute the transaction metrics card.

    Raises:
        MetricsUnavailableError: If the aggregate query returned no rows.
    """
    rows = await db.execute(get_transaction_metrics_query())
    return TransactionMetrics(**decode_row(first_row(rows, "transaction"), TRANSACTION_METRICS_COLUMNS))
