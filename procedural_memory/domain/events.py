"""Domain events raised by the procedure service.

Events are plain dataclasses stamped with a UTC time. The EventBus lets
side effects (the review activity trail) hang off saves, completions and
delays without the service knowing about them.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Awaitable, Callable, DefaultDict, List, Optional

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------


@dataclass
class ProcedureSaved:
    """Emitted after a new procedure and its schedule are stored."""

    procedure_id: str
    title: str
    algorithm: str
    step_count: int
    first_review_date: date
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass
class ReviewCompleted:
    """Emitted when a review event is marked as done."""

    procedure_id: str
    review_index: int
    label: str
    next_review_date: Optional[date]
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass
class ReviewDelayed:
    """Emitted when a review event is pushed back by one day."""

    procedure_id: str
    review_index: int
    new_date: date
    timestamp: datetime = field(default_factory=_utcnow)


# ---------------------------------------------------------------------------
# EventBus
# ---------------------------------------------------------------------------


Handler = Callable[[Any], Awaitable[None]]


class EventBus:
    """In-process async dispatch of review events.

    Handlers are keyed by event class and awaited one after another in
    subscription order. Handlers registered for a base class also receive
    subclass events. An exception in one handler is logged and the
    remaining handlers still run; publishers never see handler errors.
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[type, List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Handler) -> None:
        """Remove ``handler``; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event: Any) -> List[Handler]:
        matched: List[Handler] = []
        for cls in type(event).__mro__:
            matched.extend(self._handlers.get(cls, ()))
        return matched

    async def publish(self, event: Any) -> None:
        event_name = type(event).__name__
        for handler in self.handlers_for(event):
            try:
                await handler(event)
            except Exception:
                logger.exception(
                    "Handler %s raised while processing %s",
                    getattr(handler, "__name__", repr(handler)),
                    event_name,
                )


_event_bus: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Process-wide bus shared by the service and the activity recorder."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


def reset_event_bus() -> None:
    global _event_bus
    _event_bus = None
