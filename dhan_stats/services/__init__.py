"""
Metrics Services Module

One async service per metric family. Each service takes the injected
ConnectionManager, runs its aggregate queries (concurrently when independent),
decodes rows through row_decoding and returns a Pydantic DTO.

Services:
- user_metrics: user totals, activity, growth and churn
- transaction_metrics: transaction volume, backlog and growth
- financial_metrics: totals, monthly trend and currency breakdown
- timeseries: daily activity, monthly growth and peak usage day
- health: pipeline health and estimated database size
- global_stats: overview projected from the four card services

All services are stateless and consumed by the API layer (dhan_stats/api/).
"""

from dhan_stats.services.row_decoding import (
    decode_row,
    decode_rows,
    first_row,
    to_float,
    to_int,
    to_iso_string,
    to_text,
)
from dhan_stats.services.user_metrics import get_user_metrics
from dhan_stats.services.transaction_metrics import get_transaction_metrics
from dhan_stats.services.financial_metrics import get_financial_metrics
from dhan_stats.services.timeseries import get_time_series_stats, resolve_window
from dhan_stats.services.health import get_system_health_metrics, estimate_database_size
from dhan_stats.services.global_stats import get_global_stats


__all__ = [
    # Row decoding
    'decode_row',
    'decode_rows',
    'first_row',
    'to_float',
    'to_int',
    'to_iso_string',
    'to_text',
    # Metrics services
    'get_user_metrics',
    'get_transaction_metrics',
    'get_financial_metrics',
    'get_time_series_stats',
    'resolve_window',
    'get_system_health_metrics',
    'estimate_database_size',
    'get_global_stats',
]
