"""
Typed row decoding for aggregate query results.

asyncpg hands back loosely typed values: Decimal for NUMERIC, int for COUNT,
date/datetime for temporal columns and None wherever an aggregate had no input.
Every metrics service decodes rows through decode_row() with an explicit column
schema, so the "null or unparseable number becomes 0" policy lives here only.

Usage:
    USER_COLUMNS: RowSchema = {
        "totalUsers": ("total_users", to_int),
        "userGrowthRate": ("user_growth_rate", to_float),
    }

    metrics = UserMetrics(**decode_row(rows[0], USER_COLUMNS))
"""

from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from dhan_stats.core.errors import MetricsUnavailableError


Coercer = Callable[[Any], Any]

# Output field name -> (source column, coercer)
RowSchema = Dict[str, Tuple[str, Coercer]]


# =============================================================================
# Coercers
# =============================================================================

def _finite_float(value: Any) -> Optional[float]:
    """Convert to a finite float, or None when the value is null, NaN, infinite or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        float_val = float(value)
    except (ValueError, TypeError):
        return None
    # NaN/inf can arrive from NUMERIC 'NaN' or float division upstream
    if not np.isfinite(float_val):
        return None
    return float_val


def to_float(value: Any) -> float:
    """
    Decode a numeric column as float.

    Args:
        value: Raw column value (Decimal, int, float, str or None).

    Returns:
        The finite float value, or 0.0 if the value is null or unparseable.
    """
    float_val = _finite_float(value)
    return float_val if float_val is not None else 0.0


def to_int(value: Any) -> int:
    """
    Decode a count column as int.

    Fractional input is truncated toward zero. Null or unparseable input gives 0.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    float_val = _finite_float(value)
    return int(float_val) if float_val is not None else 0


def to_text(value: Any) -> str:
    """Decode a text column; null becomes an empty string."""
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def to_iso_string(value: Any) -> Optional[str]:
    """Decode a date/timestamp column as ISO-8601, keeping null as None."""
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


# =============================================================================
# Row Decoding
# =============================================================================

def decode_row(row: Mapping[str, Any], schema: RowSchema) -> Dict[str, Any]:
    """
    Decode one result row according to a column schema.

    Columns missing from the row are decoded from None, so they take the
    coercer's empty value.

    Args:
        row: asyncpg Record or any mapping of column name to value.
        schema: Output field name -> (source column, coercer).

    Returns:
        Dict keyed by output field names, ready to pass to a Pydantic model.
    """
    return {
        field: coerce(row.get(column))
        for field, (column, coerce) in schema.items()
    }


def decode_rows(rows: Sequence[Mapping[str, Any]], schema: RowSchema) -> List[Dict[str, Any]]:
    """Decode every row of a breakdown/list query, preserving order."""
    return [decode_row(row, schema) for row in rows]


def first_row(rows: Sequence[Mapping[str, Any]], family: str) -> Mapping[str, Any]:
    """
    Return the single row of an aggregate query.

    Aggregate queries always yield one row against a migrated schema, so an
    empty result is an internal error rather than an empty state.

    Raises:
        MetricsUnavailableError: If the query returned no rows.
    """
    if not rows:
        raise MetricsUnavailableError(f"Failed to fetch {family} metrics")
    return rows[0]
