"""SQL query tool and its read-only guard."""

from .query_tools import execute_sql
from .readonly import ReadOnlyViolation
from .readonly import check_readonly

__all__ = [
    "ReadOnlyViolation",
    "check_readonly",
    "execute_sql",
]
