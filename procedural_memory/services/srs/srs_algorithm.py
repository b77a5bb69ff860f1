"""
SRS Schedule Materialization
Turns an algorithm template into concrete review dates for a procedure
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from ...core.typed_config import AlgorithmCatalog
from ...domain.errors import InvalidAlgorithm, InvalidDateFormat
from ...domain.models import Algorithm, ReviewEvent

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_algorithm(value: Union[str, Algorithm]) -> Algorithm:
    """Resolve an algorithm selector, raising InvalidAlgorithm if unknown."""
    if isinstance(value, Algorithm):
        return value
    try:
        return Algorithm(str(value).strip().lower())
    except ValueError:
        raise InvalidAlgorithm(str(value)) from None


def parse_calendar_date(value: Union[str, date]) -> date:
    """Parse a strict YYYY-MM-DD string into a date; datetimes keep their day.

    Raises:
        InvalidDateFormat: on anything other than a real calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE.match(value.strip()):
        raise InvalidDateFormat(str(value))
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise InvalidDateFormat(value) from None


def materialize_schedule(
    start_date: date,
    algorithm: Union[str, Algorithm],
    catalog: Optional[AlgorithmCatalog] = None,
) -> List[ReviewEvent]:
    """
    Build the review schedule for a procedure saved on ``start_date``.

    Each template row becomes one event dated ``start_date + (day_offset - 1)``
    days, so day 1 lands on the start date itself. Order, count and labels
    follow the template exactly.

    Args:
        start_date: Calendar day the procedure is saved.
        algorithm: Cadence selector (motor or cognitive).
        catalog: Cadence tables; defaults to the configured catalog.

    Returns:
        Pending review events with strictly increasing dates.
    """
    if catalog is None:
        from ...core.typed_config_loader import get_algorithm_catalog

        catalog = get_algorithm_catalog()

    template = catalog.get_template(parse_algorithm(algorithm))
    return [
        ReviewEvent(
            date=start_date + timedelta(days=slot.day_offset - 1),
            label=slot.label,
            completed=False,
        )
        for slot in template.steps
    ]
