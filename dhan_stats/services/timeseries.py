"""
Time-series analytics service.

Runs the daily activity, monthly growth and peak usage queries concurrently and
assembles TimeSeriesStats, newest entries first.

The queries always cover fixed trailing windows (30 days, 12 months). When the
caller passes validated range/from/to parameters, the series are narrowed to
that window after the fact and the peak day is taken from the narrowed daily
series. Narrowing never reaches beyond the fixed windows.
"""

import asyncio
import logging
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple

from dhan_stats.core.database import ConnectionManager
from dhan_stats.models.enums import StatsRange
from dhan_stats.models.schemas import (
    DailyActivity,
    MonthlyGrowth,
    PeakUsageDay,
    StatsQueryParams,
    TimeSeriesStats,
)
from dhan_stats.services.row_decoding import RowSchema, decode_row, decode_rows, to_float, to_int, to_text
from dhan_stats.sql.timeseries_queries import (
    get_daily_activity_query,
    get_monthly_growth_query,
    get_peak_usage_day_query,
)


logger = logging.getLogger(__name__)


DAILY_ACTIVITY_COLUMNS: RowSchema = {
    "date": ("date", to_text),
    "transactionCount": ("transaction_count", to_int),
    "income": ("income", to_float),
    "expense": ("expense", to_float),
    "uniqueUsers": ("unique_users", to_int),
}

MONTHLY_GROWTH_COLUMNS: RowSchema = {
    "year": ("year", to_int),
    "month": ("month", to_int),
    "monthLabel": ("month_label", to_text),
    "newUsers": ("new_users", to_int),
    "totalUsers": ("total_users", to_int),
    "transactions": ("transactions", to_int),
    "income": ("income", to_float),
    "expense": ("expense", to_float),
}

PEAK_USAGE_COLUMNS: RowSchema = {
    "date": ("date", to_text),
    "transactionCount": ("transaction_count", to_int),
}

# Day offsets for the day-based ranges; 12m and all are handled separately
RANGE_DAYS = {
    StatsRange.LAST_7_DAYS: 7,
    StatsRange.LAST_30_DAYS: 30,
    StatsRange.LAST_90_DAYS: 90,
}


# =============================================================================
# Window Helpers
# =============================================================================

def _shift_months(day: date, months: int) -> date:
    """First day of the month `months` months before `day`."""
    index = day.year * 12 + (day.month - 1) - months
    return date(index // 12, index % 12 + 1, 1)


def _month_end(year: int, month: int) -> date:
    return _shift_months(date(year, month, 1), -1) - timedelta(days=1)


def utc_today() -> date:
    """Current UTC date, the calendar the database windows are computed in."""
    return datetime.now(timezone.utc).date()


def resolve_window(params: StatsQueryParams, today: date) -> Tuple[Optional[date], Optional[date]]:
    """
    Translate validated parameters into an inclusive (start, end) date window.

    The relative range and the explicit from/to bounds are intersected. A None
    bound means "unbounded on that side".

    Args:
        params: Validated query parameters.
        today: Reference day for relative ranges.

    Returns:
        Tuple of (start, end); either may be None.
    """
    start: Optional[date] = None
    end: Optional[date] = None

    if params.range in RANGE_DAYS:
        start = today - timedelta(days=RANGE_DAYS[params.range])
    elif params.range == StatsRange.LAST_12_MONTHS:
        start = _shift_months(today, 11)

    if params.from_date is not None:
        start = params.from_date if start is None else max(start, params.from_date)
    if params.to_date is not None:
        end = params.to_date

    return start, end


def _within(day: date, start: Optional[date], end: Optional[date]) -> bool:
    return (start is None or day >= start) and (end is None or day <= end)


def filter_daily_activity(
    entries: List[DailyActivity],
    start: Optional[date],
    end: Optional[date],
) -> List[DailyActivity]:
    """Keep daily entries whose day lies inside the window. Unparseable days are dropped."""
    kept = []
    for entry in entries:
        try:
            day = date.fromisoformat(entry.date[:10])
        except ValueError:
            logger.warning(f"Skipping daily activity row with unparseable date {entry.date!r}")
            continue
        if _within(day, start, end):
            kept.append(entry)
    return kept


def filter_monthly_growth(
    entries: List[MonthlyGrowth],
    start: Optional[date],
    end: Optional[date],
) -> List[MonthlyGrowth]:
    """Keep months that overlap the window."""
    kept = []
    for entry in entries:
        if not 1 <= entry.month <= 12:
            continue
        month_start = date(entry.year, entry.month, 1)
        month_end = _month_end(entry.year, entry.month)
        if (end is None or month_start <= end) and (start is None or month_end >= start):
            kept.append(entry)
    return kept


def find_peak_day(entries: List[DailyActivity]) -> Optional[PeakUsageDay]:
    """Busiest day of a daily series; ties go to the most recent day."""
    if not entries:
        return None
    peak = max(entries, key=lambda entry: (entry.transactionCount, entry.date))
    return PeakUsageDay(date=peak.date, transactionCount=peak.transactionCount)


# =============================================================================
# Service
# =============================================================================

async def get_time_series_stats(
    db: ConnectionManager,
    params: Optional[StatsQueryParams] = None,
    today: Optional[date] = None,
) -> TimeSeriesStats:
    """
    Compute the time-series analytics payload.

    Args:
        db: Connection manager used to run the queries.
        params: Optional validated range/from/to parameters.
        today: Reference day for relative ranges; defaults to the current UTC date.

    Returns:
        TimeSeriesStats with daily activity, monthly growth and the peak day.
    """
    daily_rows, monthly_rows, peak_rows = await asyncio.gather(
        db.execute(get_daily_activity_query()),
        db.execute(get_monthly_growth_query()),
        db.execute(get_peak_usage_day_query()),
    )

    daily_activity = [DailyActivity(**values) for values in decode_rows(daily_rows, DAILY_ACTIVITY_COLUMNS)]
    monthly_growth = [MonthlyGrowth(**values) for values in decode_rows(monthly_rows, MONTHLY_GROWTH_COLUMNS)]
    peak_usage_day = PeakUsageDay(**decode_row(peak_rows[0], PEAK_USAGE_COLUMNS)) if peak_rows else None

    if params is not None and not params.is_empty:
        start, end = resolve_window(params, today or utc_today())
        daily_activity = filter_daily_activity(daily_activity, start, end)
        monthly_growth = filter_monthly_growth(monthly_growth, start, end)
        peak_usage_day = find_peak_day(daily_activity)
        logger.debug(f"Narrowed time series to window {start} .. {end}")

    return TimeSeriesStats(
        dailyActivity=daily_activity,
        monthlyGrowth=monthly_growth,
        peakUsageDay=peak_usage_day,
    )
