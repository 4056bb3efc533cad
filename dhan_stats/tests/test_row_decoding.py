"""
Tests for the typed row decoder used by every metrics service.

Covers the "null or unparseable number becomes 0" policy, ISO rendering of
temporal columns and the empty-result guard.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from dhan_stats.core.errors import MetricsUnavailableError, ServiceError
from dhan_stats.services.row_decoding import (
    decode_row,
    decode_rows,
    first_row,
    to_float,
    to_int,
    to_iso_string,
    to_text,
)


class TestCoercers:
    """Per-type coercion of raw column values."""

    def test_to_float_accepts_decimal_and_numeric_strings(self) -> None:
        assert to_float(Decimal('1234.50')) == 1234.5
        assert to_float('17.25') == 17.25
        assert to_float(3) == 3.0

    def test_to_float_defaults_null_and_garbage_to_zero(self) -> None:
        assert to_float(None) == 0.0
        assert to_float('not-a-number') == 0.0
        assert to_float(float('nan')) == 0.0
        assert to_float(Decimal('Infinity')) == 0.0

    def test_to_int_truncates_fractional_values(self) -> None:
        assert to_int(Decimal('42')) == 42
        assert to_int('7.9') == 7
        assert to_int(-2.5) == -2

    def test_to_int_defaults_null_to_zero(self) -> None:
        assert to_int(None) == 0
        assert to_int('') == 0

    def test_booleans_are_not_numbers(self) -> None:
        assert to_float(True) == 0.0
        assert to_int(True) == 0

    def test_to_text_renders_dates_and_null(self) -> None:
        assert to_text(date(2026, 10, 1)) == '2026-10-01'
        assert to_text(None) == ''
        assert to_text('INR') == 'INR'

    def test_to_iso_string_keeps_null(self) -> None:
        moment = datetime(2026, 10, 16, 18, 22, 5, tzinfo=timezone.utc)

        assert to_iso_string(None) is None
        assert to_iso_string(moment) == '2026-10-16T18:22:05+00:00'


class TestDecodeRow:
    """Schema-driven decoding of whole rows."""

    SCHEMA = {
        'totalUsers': ('total_users', to_int),
        'userGrowthRate': ('user_growth_rate', to_float),
        'lastSeen': ('last_seen', to_iso_string),
    }

    def test_decodes_and_renames_columns(self) -> None:
        row = {'total_users': 12, 'user_growth_rate': Decimal('8.5'), 'last_seen': date(2026, 1, 2)}

        result = decode_row(row, self.SCHEMA)

        assert result == {'totalUsers': 12, 'userGrowthRate': 8.5, 'lastSeen': '2026-01-02'}

    def test_missing_columns_take_empty_values(self) -> None:
        result = decode_row({}, self.SCHEMA)

        assert result == {'totalUsers': 0, 'userGrowthRate': 0.0, 'lastSeen': None}

    def test_decode_rows_preserves_order(self) -> None:
        rows = [{'total_users': 2}, {'total_users': 1}]

        result = decode_rows(rows, self.SCHEMA)

        assert [item['totalUsers'] for item in result] == [2, 1]


class TestFirstRow:
    """Guard for aggregate queries that must return exactly one row."""

    def test_returns_first_row(self) -> None:
        rows = [{'total_users': 5}]

        assert first_row(rows, 'user') is rows[0]

    def test_empty_result_raises_service_error(self) -> None:
        with pytest.raises(MetricsUnavailableError, match='Failed to fetch user metrics'):
            first_row([], 'user')

    def test_unavailable_metrics_is_a_service_error(self) -> None:
        assert issubclass(MetricsUnavailableError, ServiceError)
