"""Routine lookup: candidate name resolution and the fallback walk."""

from .candidates import resolve_candidates
from .fallback import AttemptRecord
from .fallback import FetchResult
from .fallback import FetchStatus
from .fallback import Outcome
from .fallback import decide_outcome
from .fallback import fetch_with_fallback
from .routine_tools import format_routine
from .routine_tools import get_routine

__all__ = [
    "AttemptRecord",
    "FetchResult",
    "FetchStatus",
    "Outcome",
    "decide_outcome",
    "fetch_with_fallback",
    "format_routine",
    "get_routine",
    "resolve_candidates",
]
