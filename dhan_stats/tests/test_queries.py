"""
Contract tests between the SQL query library and the service column schemas.

Each query must name every column its service decodes and must stay
read-only.
"""

import re

import pytest

from dhan_stats.services.financial_metrics import (
    CURRENCY_BREAKDOWN_COLUMNS,
    FINANCIAL_TOTALS_COLUMNS,
    HIGHEST_TRANSACTION_COLUMNS,
    MONTHLY_TREND_COLUMNS,
)
from dhan_stats.services.health import HEALTH_COLUMNS, TABLE_ROW_COUNT_COLUMNS
from dhan_stats.services.timeseries import (
    DAILY_ACTIVITY_COLUMNS,
    MONTHLY_GROWTH_COLUMNS,
    PEAK_USAGE_COLUMNS,
)
from dhan_stats.services.transaction_metrics import TRANSACTION_METRICS_COLUMNS
from dhan_stats.services.user_metrics import USER_METRICS_COLUMNS
from dhan_stats.sql import (
    get_currency_breakdown_query,
    get_daily_activity_query,
    get_financial_metrics_query,
    get_monthly_growth_query,
    get_monthly_trend_query,
    get_peak_usage_day_query,
    get_system_health_query,
    get_transaction_metrics_query,
    get_user_metrics_query,
)


QUERY_SCHEMAS = [
    (get_user_metrics_query, [USER_METRICS_COLUMNS]),
    (get_transaction_metrics_query, [TRANSACTION_METRICS_COLUMNS]),
    (get_financial_metrics_query, [FINANCIAL_TOTALS_COLUMNS, HIGHEST_TRANSACTION_COLUMNS]),
    (get_monthly_trend_query, [MONTHLY_TREND_COLUMNS]),
    (get_currency_breakdown_query, [CURRENCY_BREAKDOWN_COLUMNS]),
    (get_daily_activity_query, [DAILY_ACTIVITY_COLUMNS]),
    (get_monthly_growth_query, [MONTHLY_GROWTH_COLUMNS]),
    (get_peak_usage_day_query, [PEAK_USAGE_COLUMNS]),
    (get_system_health_query, [HEALTH_COLUMNS, TABLE_ROW_COUNT_COLUMNS]),
]

WRITE_KEYWORDS = re.compile(r'\b(INSERT|UPDATE|DELETE|DROP|ALTER|TRUNCATE|CREATE)\b', re.IGNORECASE)


def mentions_column(query: str, column: str) -> bool:
    return re.search(rf"\b{column}\b", query) is not None


@pytest.mark.parametrize('query_fn, schemas', QUERY_SCHEMAS, ids=lambda value: getattr(value, '__name__', ''))
def test_query_exposes_decoded_columns(query_fn, schemas) -> None:
    query = query_fn()

    for schema in schemas:
        for field, (column, _) in schema.items():
            assert mentions_column(query, column), f'{query_fn.__name__} does not select {column} for {field}'


@pytest.mark.parametrize('query_fn', [fn for fn, _ in QUERY_SCHEMAS], ids=lambda fn: fn.__name__)
def test_queries_are_read_only(query_fn) -> None:
    # Strip comments before scanning for write statements
    body = re.sub(r'--[^\n]*', '', query_fn())

    assert WRITE_KEYWORDS.search(body) is None


def test_queries_are_deterministic() -> None:
    assert get_user_metrics_query() == get_user_metrics_query()
    assert get_system_health_query() == get_system_health_query()


def test_live_transaction_filter_everywhere() -> None:
    for query_fn in (get_financial_metrics_query, get_daily_activity_query, get_currency_breakdown_query):
        assert 'deleted_at IS NULL' in query_fn()
