"""
SRS (Spaced Repetition System) Module
Fixed-cadence review scheduling for saved procedures
"""

from .srs_algorithm import materialize_schedule, parse_algorithm, parse_calendar_date
from .srs_review import delay_review, mark_reviewed, next_pending_after
from .srs_scheduler import query_due

__all__ = [
    "materialize_schedule",
    "parse_algorithm",
    "parse_calendar_date",
    "query_due",
    "mark_reviewed",
    "delay_review",
    "next_pending_after",
]
