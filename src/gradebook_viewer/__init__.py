"""Gradebook CSV ingestion, normalization and weighted grade aggregation."""

from .aggregation import StudentBreakdown, compute_breakdown
from .categories import DEFAULT_CATEGORIES, classify_column
from .errors import FetchError, GradebookError, ParseError
from .index import build_student_index, filter_index
from .roster import Roster, StudentRecord, build_roster, load_roster

__all__ = [
    "DEFAULT_CATEGORIES",
    "FetchError",
    "GradebookError",
    "ParseError",
    "Roster",
    "StudentBreakdown",
    "StudentRecord",
    "build_roster",
    "build_student_index",
    "classify_column",
    "compute_breakdown",
    "filter_index",
    "load_roster",
]
