"""
Financial metrics service.

Runs the totals, monthly trend and currency breakdown queries concurrently and
assembles FinancialMetrics. The trend keeps the query order (newest month
first); the dashboard reverses it for charting.
"""

import asyncio
import logging
from typing import Any, Mapping, Optional

from dhan_stats.core.database import ConnectionManager
from dhan_stats.models.schemas import (
    CurrencyBreakdown,
    FinancialMetrics,
    HighestTransaction,
    MonthlyFinancialTrend,
)
from dhan_stats.services.row_decoding import (
    RowSchema,
    decode_row,
    decode_rows,
    first_row,
    to_float,
    to_int,
    to_iso_string,
    to_text,
)
from dhan_stats.sql.financial_queries import (
    get_currency_breakdown_query,
    get_financial_metrics_query,
    get_monthly_trend_query,
)


logger = logging.getLogger(__name__)


FINANCIAL_TOTALS_COLUMNS: RowSchema = {
    "totalIncome": ("total_income", to_float),
    "totalExpense": ("total_expense", to_float),
    "netBalance": ("net_balance", to_float),
    "incomeThisMonth": ("income_this_month", to_float),
    "expenseThisMonth": ("expense_this_month", to_float),
    "averageTransactionValue": ("average_transaction_value", to_float),
    "averageIncomeValue": ("average_income_value", to_float),
    "averageExpenseValue": ("average_expense_value", to_float),
}

HIGHEST_TRANSACTION_COLUMNS: RowSchema = {
    "amount": ("highest_transaction_amount", to_float),
    "type": ("highest_transaction_type", to_text),
    "date": ("highest_transaction_date", to_iso_string),
}

MONTHLY_TREND_COLUMNS: RowSchema = {
    "year": ("year", to_int),
    "month": ("month", to_int),
    "monthLabel": ("month_label", to_text),
    "income": ("income", to_float),
    "expense": ("expense", to_float),
    "net": ("net", to_float),
    "transactionCount": ("transaction_count", to_int),
}

CURRENCY_BREAKDOWN_COLUMNS: RowSchema = {
    "currency": ("currency", to_text),
    "totalIncome": ("total_income", to_float),
    "totalExpense": ("total_expense", to_float),
    "netBalance": ("net_balance", to_float),
    "transactionCount": ("transaction_count", to_int),
}


def _decode_highest_transaction(row: Mapping[str, Any]) -> Optional[HighestTransaction]:
    # LEFT JOIN ... ON true leaves these columns null on an empty ledger
    if row.get("highest_transaction_amount") is None:
        return None
    return HighestTransaction(**decode_row(row, HIGHEST_TRANSACTION_COLUMNS))


async def get_financial_metrics(db: ConnectionManager) -> FinancialMetrics:
    """
    Compute the financial metrics card.

    The three queries are independent and run concurrently; the totals query
    must return its single row.

    Args:
        db: Connection manager used to run the queries.

    Returns:
        FinancialMetrics including the monthly trend and currency breakdown.

    Raises:
        MetricsUnavailableError: If the totals query returned no rows.
    """
    totals_rows, trend_rows, currency_rows = await asyncio.gather(
        db.execute(get_financial_metrics_query()),
        db.execute(get_monthly_trend_query()),
        db.execute(get_currency_breakdown_query()),
    )

    totals_row = first_row(totals_rows, "financial")

    metrics = FinancialMetrics(
        **decode_row(totals_row, FINANCIAL_TOTALS_COLUMNS),
        highestTransaction=_decode_highest_transaction(totals_row),
        monthlyTrend=[
            MonthlyFinancialTrend(**values)
            for values in decode_rows(trend_rows, MONTHLY_TREND_COLUMNS)
        ],
        currencyBreakdown=[
            CurrencyBreakdown(**values)
            for values in decode_rows(currency_rows, CURRENCY_BREAKDOWN_COLUMNS)
        ],
    )

    logger.debug(
        f"Computed financial metrics: {len(metrics.monthlyTrend)} trend months, "
        f"{len(metrics.currencyBreakdown)} currencies"
    )
    return metrics
