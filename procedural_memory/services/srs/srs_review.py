"""
SRS Review State Machine

Each review event is Pending until marked, then Completed for good. A
pending event can be pushed back one calendar day at a time.

Two behaviors are kept as-is and worth hardening later:
- the "next review" after marking is the next pending event by position,
  not by date, so an earlier pending event is never surfaced;
- delaying never re-sorts the schedule, so a delayed event can end up
  dated after events that follow it.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Tuple

from ...domain.errors import InvalidReviewIndex
from ...domain.models import Procedure, ReviewEvent

logger = logging.getLogger(__name__)


def _checked_event(procedure: Procedure, review_index: int) -> ReviewEvent:
    schedule = procedure.review_schedule
    if isinstance(review_index, bool) or not 0 <= review_index < len(schedule):
        raise InvalidReviewIndex(procedure.id, review_index, len(schedule))
    return schedule[review_index]


def next_pending_after(schedule: List[ReviewEvent], index: int) -> Optional[ReviewEvent]:
    """First incomplete event positioned after ``index``."""
    for event in schedule[index + 1 :]:
        if not event.completed:
            return event
    return None


def mark_reviewed(
    procedure: Procedure, review_index: int
) -> Tuple[ReviewEvent, Optional[ReviewEvent]]:
    """Complete one review in place.

    Marking an already completed review is allowed: ``completed`` stays True
    and ``current_step`` is set again from ``review_index``.

    Returns:
        (completed_event, next_pending_event_or_None)

    Raises:
        InvalidReviewIndex: if ``review_index`` is outside the schedule.
    """
    event = _checked_event(procedure, review_index)
    if event.completed:
        logger.debug(
            "Review %d of procedure %s was already completed", review_index, procedure.id
        )
    event.completed = True
    procedure.current_step = review_index + 1
    return event, next_pending_after(procedure.review_schedule, review_index)


def delay_review(procedure: Procedure, review_index: int) -> date:
    """Push one review back by a single calendar day, in place.

    Returns:
        The event's new date.

    Raises:
        InvalidReviewIndex: if ``review_index`` is outside the schedule.
    """
    event = _checked_event(procedure, review_index)
    event.date = event.date + timedelta(days=1)
    return event.date
