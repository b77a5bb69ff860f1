"""Event subscribers for procedure and review workflows.

Subscribers react to domain events and perform side-effects; currently an
activity trail written through the structured review logger.
"""

import logging
from typing import Optional

from ..utils.logging import log_review_activity
from .events import EventBus, ProcedureSaved, ReviewCompleted, ReviewDelayed, get_event_bus

logger = logging.getLogger(__name__)


class ReviewActivityRecorder:
    """Writes one structured log entry per saved procedure, completion and delay."""

    def __init__(self, event_bus: Optional[EventBus] = None) -> None:
        self._event_bus = event_bus or get_event_bus()
        self._registered_on: Optional[EventBus] = None

    def register(self, bus: Optional[EventBus] = None) -> None:
        """Subscribe to all review events on the given bus (default: own bus)."""
        bus = bus or self._event_bus
        for event_type, handler in self._subscriptions():
            bus.subscribe(event_type, handler)
        self._registered_on = bus

    def unregister(self) -> None:
        """Drop the subscriptions made by the last ``register`` call."""
        if self._registered_on is None:
            return
        for event_type, handler in self._subscriptions():
            self._registered_on.unsubscribe(event_type, handler)
        self._registered_on = None

    def _subscriptions(self):
        return (
            (ProcedureSaved, self.on_procedure_saved),
            (ReviewCompleted, self.on_review_completed),
            (ReviewDelayed, self.on_review_delayed),
        )

    async def on_procedure_saved(self, event: ProcedureSaved) -> None:
        log_review_activity(
            "procedure_saved",
            {
                "procedure_id": event.procedure_id,
                "title": event.title,
                "algorithm": event.algorithm,
                "step_count": event.step_count,
                "first_review_date": event.first_review_date.isoformat(),
            },
        )

    async def on_review_completed(self, event: ReviewCompleted) -> None:
        log_review_activity(
            "review_completed",
            {
                "procedure_id": event.procedure_id,
                "review_index": event.review_index,
                "label": event.label,
                "next_review_date": (
                    event.next_review_date.isoformat() if event.next_review_date else None
                ),
            },
        )

    async def on_review_delayed(self, event: ReviewDelayed) -> None:
        log_review_activity(
            "review_delayed",
            {
                "procedure_id": event.procedure_id,
                "review_index": event.review_index,
                "new_date": event.new_date.isoformat(),
            },
        )
