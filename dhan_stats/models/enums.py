"""
Enumeration definitions for the DhanDiary Stats API.

All enums inherit from both `str` and `Enum` so they serialize as plain strings
in Pydantic models and JSON responses.
"""

from enum import Enum


class StatsRange(str, Enum):
    """
    Relative window accepted by the `range` query parameter.

    Values: '7d' | '30d' | '90d' | '12m' | 'all'
    """
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    LAST_12_MONTHS = "12m"
    ALL = "all"

    @classmethod
    def values(cls) -> list:
        return [member.value for member in cls]


class TransactionType(str, Enum):
    """Direction of a ledger transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class AdminRole(str, Enum):
    """Roles granted by the authenticator. Only the shared admin secret exists."""
    ADMIN = "admin"
