"""
SRS Review Queue
Answers "which reviews are due on a given day"
"""

from datetime import date
from typing import Iterable, List

from ...domain.models import DueReview, Procedure


def query_due(procedures: Iterable[Procedure], on_date: date) -> List[DueReview]:
    """Collect pending review events dated exactly ``on_date``.

    Results follow procedure iteration order, then schedule order. Overdue
    events (dated before ``on_date``) are not included.
    """
    due: List[DueReview] = []
    for procedure in procedures:
        for index, event in enumerate(procedure.review_schedule):
            if event.date == on_date and not event.completed:
                due.append(
                    DueReview(
                        procedure_id=procedure.id,
                        title=procedure.title,
                        algorithm=procedure.algorithm,
                        review_index=index,
                        label=event.label,
                        step_count=len(procedure.steps),
                    )
                )
    return due
