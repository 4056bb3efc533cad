"""
Query parameter validation for filterable stats endpoints.

Rules are checked in order and the first failure is reported:
range membership, "from" format, "to" format, then from <= to.
Empty parameter values are treated as absent.
"""

import re
from datetime import date
from typing import Mapping, Optional

from dhan_stats.core.errors import ValidationError
from dhan_stats.middleware.pipeline import Middleware, MiddlewareContext
from dhan_stats.models.enums import StatsRange
from dhan_stats.models.schemas import StatsQueryParams


DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

INVALID_RANGE_MESSAGE = f"Invalid range. Must be one of: {', '.join(StatsRange.values())}"
INVALID_FROM_MESSAGE = 'Invalid "from" date format. Use YYYY-MM-DD'
INVALID_TO_MESSAGE = 'Invalid "to" date format. Use YYYY-MM-DD'
DATE_ORDER_MESSAGE = '"from" date must be before "to" date'


def _parse_date(value: str, message: str) -> date:
    if not DATE_PATTERN.fullmatch(value):
        raise ValidationError(message)
    try:
        return date.fromisoformat(value)
    except ValueError:
        # Well-formed but not a calendar date (2024-02-30)
        raise ValidationError(message)


def validate_query_params(query: Mapping[str, str]) -> StatsQueryParams:
    """
    Validate the range/from/to query parameters.

    Args:
        query: Request query parameters.

    Returns:
        StatsQueryParams with the parsed values.

    Raises:
        ValidationError: With the message of the first failing rule.
    """
    raw_range: Optional[str] = query.get("range") or None
    raw_from: Optional[str] = query.get("from") or None
    raw_to: Optional[str] = query.get("to") or None

    stats_range = None
    if raw_range is not None:
        if raw_range not in StatsRange.values():
            raise ValidationError(INVALID_RANGE_MESSAGE)
        stats_range = StatsRange(raw_range)

    from_date = _parse_date(raw_from, INVALID_FROM_MESSAGE) if raw_from is not None else None
    to_date = _parse_date(raw_to, INVALID_TO_MESSAGE) if raw_to is not None else None

    if from_date is not None and to_date is not None and from_date > to_date:
        raise ValidationError(DATE_ORDER_MESSAGE)

    return StatsQueryParams(range=stats_range, from_date=from_date, to_date=to_date)


class ValidationMiddleware(Middleware):
    """Rejects with 400 on invalid filters; stores the parsed params on the context."""

    async def check(self, ctx: MiddlewareContext) -> None:
        ctx.validated_params = validate_query_params(ctx.request.query_params)
