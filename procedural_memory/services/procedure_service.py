"""
Procedure service: the operations exposed to callers.

Composes skill extraction, schedule materialization, the review queue and
the review state machine over an injected ProcedureRepository. Expected
failures come back as OperationResult values; mutations on one procedure
are serialized with a per-procedure asyncio.Lock.
"""

import asyncio
import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from ..core.typed_config import AlgorithmCatalog
from ..domain.errors import (
    DomainError,
    InvalidProcedureInput,
    InvalidReviewIndex,
    ProcedureNotFound,
)
from ..domain.events import EventBus, ProcedureSaved, ReviewCompleted, ReviewDelayed
from ..domain.models import Algorithm, Procedure, ProcedureStep, ProcedureSummary
from ..domain.repositories import ProcedureRepository
from ..domain.results import OperationResult
from .skills.skill_extractor import SkillExtractor
from .srs import srs_review
from .srs.srs_algorithm import materialize_schedule, parse_algorithm, parse_calendar_date
from .srs.srs_scheduler import query_due

logger = logging.getLogger(__name__)

StepInput = Union[ProcedureStep, Dict[str, Any], str]


def normalize_steps(steps: Iterable[StepInput]) -> List[ProcedureStep]:
    """Coerce caller-supplied steps into a dense 1..N list.

    Steps are kept in the order given; incoming ``order`` values are
    discarded so edited lists never carry gaps or duplicates.

    Raises:
        InvalidProcedureInput: on an empty list or a blank description.
    """
    descriptions: List[str] = []
    for raw in steps:
        if isinstance(raw, ProcedureStep):
            text = raw.description
        elif isinstance(raw, dict):
            text = raw.get("description", "")
        else:
            text = raw
        if not isinstance(text, str) or not text.strip():
            raise InvalidProcedureInput("Step descriptions must be non-empty text")
        descriptions.append(text.strip())

    if not descriptions:
        raise InvalidProcedureInput("A procedure needs at least one step")
    return [ProcedureStep(order=i, description=d) for i, d in enumerate(descriptions, start=1)]


class ProcedureService:
    """Facade over extraction, scheduling and review state.

    Args:
        repository: Where procedures live.
        catalog: Review cadence tables (defaults to the configured catalog).
        extractor: Skill extractor (defaults to the pattern-based one).
        event_bus: Receives ProcedureSaved / ReviewCompleted / ReviewDelayed.
        clock: Returns "today"; used when save is called without a start date.
    """

    def __init__(
        self,
        repository: ProcedureRepository,
        catalog: Optional[AlgorithmCatalog] = None,
        extractor: Optional[SkillExtractor] = None,
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        if catalog is None:
            from ..core.typed_config_loader import get_algorithm_catalog

            catalog = get_algorithm_catalog()
        self.repository = repository
        self.catalog = catalog
        self.extractor = extractor or SkillExtractor()
        self.event_bus = event_bus
        self.clock = clock
        self._locks: Dict[str, asyncio.Lock] = {}

    # ------------------------------------------------------------------
    # Extraction (pure, no lock)
    # ------------------------------------------------------------------

    def extract_skills(
        self, content: str, refinement_prompt: Optional[str] = None
    ) -> Dict[str, Any]:
        steps = self.extractor.extract(content, refinement_prompt)
        return {"steps": steps, "count": len(steps)}

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def save_procedure(
        self,
        title: str,
        steps: Iterable[StepInput],
        algorithm: Union[str, Algorithm],
        start_date: Optional[Union[str, date]] = None,
    ) -> OperationResult[Dict[str, Any]]:
        """Validate, schedule and store a new procedure.

        Returns on success ``{procedureId, stepCount, algorithm, firstReviewDate}``.
        """
        try:
            if not isinstance(title, str) or not title.strip():
                raise InvalidProcedureInput("Title must be non-empty text")
            selected = parse_algorithm(algorithm)
            normalized = normalize_steps(steps)
            start = parse_calendar_date(start_date) if start_date is not None else self.clock()
        except DomainError as e:
            logger.warning("Rejected procedure save: %s", e)
            return OperationResult.failure(e)

        procedure = Procedure(
            id=str(uuid.uuid4()),
            title=title.strip(),
            steps=normalized,
            algorithm=selected,
            created_at=datetime.now(timezone.utc),
            review_schedule=materialize_schedule(start, selected, self.catalog),
            current_step=0,
        )

        async with self._locks.setdefault(procedure.id, asyncio.Lock()):
            await self.repository.put(procedure)

        first_review = procedure.review_schedule[0].date
        logger.info(
            "Saved procedure %s (%r, %s, %d steps, first review %s)",
            procedure.id,
            procedure.title,
            selected.value,
            len(normalized),
            first_review.isoformat(),
        )
        await self._publish(
            ProcedureSaved(
                procedure_id=procedure.id,
                title=procedure.title,
                algorithm=selected.value,
                step_count=len(normalized),
                first_review_date=first_review,
            )
        )
        return OperationResult.success(
            {
                "procedureId": procedure.id,
                "stepCount": len(normalized),
                "algorithm": selected.value,
                "firstReviewDate": first_review,
            }
        )

    async def mark_reviewed(
        self, procedure_id: str, review_index: int
    ) -> OperationResult[Dict[str, Any]]:
        """Complete one review; returns ``{completedLabel, nextReview}``.

        ``nextReview`` is the next pending event by position, or None.
        """
        lock = await self._lock_for(procedure_id)
        if lock is None:
            return self._not_found(procedure_id)
        async with lock:
            procedure = await self.repository.get(procedure_id)
            if procedure is None:
                return self._not_found(procedure_id)
            try:
                completed, upcoming = srs_review.mark_reviewed(procedure, review_index)
            except InvalidReviewIndex as e:
                logger.warning("Rejected mark_reviewed: %s", e)
                return OperationResult.failure(e)
            await self.repository.put(procedure)

        logger.info(
            "Marked review %d (%s) of procedure %s as completed",
            review_index,
            completed.label,
            procedure_id,
        )
        await self._publish(
            ReviewCompleted(
                procedure_id=procedure_id,
                review_index=review_index,
                label=completed.label,
                next_review_date=upcoming.date if upcoming else None,
            )
        )
        return OperationResult.success(
            {"completedLabel": completed.label, "nextReview": upcoming}
        )

    async def delay_review(
        self, procedure_id: str, review_index: int
    ) -> OperationResult[Dict[str, Any]]:
        """Push one review back a day; returns ``{newDate}``."""
        lock = await self._lock_for(procedure_id)
        if lock is None:
            return self._not_found(procedure_id)
        async with lock:
            procedure = await self.repository.get(procedure_id)
            if procedure is None:
                return self._not_found(procedure_id)
            try:
                new_date = srs_review.delay_review(procedure, review_index)
            except InvalidReviewIndex as e:
                logger.warning("Rejected delay_review: %s", e)
                return OperationResult.failure(e)
            await self.repository.put(procedure)

        logger.info(
            "Delayed review %d of procedure %s to %s",
            review_index,
            procedure_id,
            new_date.isoformat(),
        )
        await self._publish(
            ReviewDelayed(procedure_id=procedure_id, review_index=review_index, new_date=new_date)
        )
        return OperationResult.success({"newDate": new_date})

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_review_queue(
        self, on_date: Union[str, date]
    ) -> OperationResult[Dict[str, Any]]:
        """Pending reviews dated ``on_date``: ``{date, itemCount, items}``."""
        try:
            day = parse_calendar_date(on_date)
        except DomainError as e:
            return OperationResult.failure(e)

        items = query_due(await self.repository.list(), day)
        return OperationResult.success({"date": day, "itemCount": len(items), "items": items})

    async def list_procedures(self) -> List[ProcedureSummary]:
        return [ProcedureSummary.from_procedure(p) for p in await self.repository.list()]

    async def get_procedure(self, procedure_id: str) -> OperationResult[Procedure]:
        procedure = await self.repository.get(procedure_id)
        if procedure is None:
            return self._not_found(procedure_id)
        return OperationResult.success(procedure)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _lock_for(self, procedure_id: str) -> Optional[asyncio.Lock]:
        """Lock for a stored procedure; None when the id is unknown.

        Locks are only created for ids present in the repository.
        """
        lock = self._locks.get(procedure_id)
        if lock is None:
            if await self.repository.get(procedure_id) is None:
                return None
            lock = self._locks.setdefault(procedure_id, asyncio.Lock())
        return lock

    @staticmethod
    def _not_found(procedure_id: str) -> OperationResult[Any]:
        error = ProcedureNotFound(procedure_id)
        logger.warning("%s", error)
        return OperationResult.failure(error)

    async def _publish(self, event: Any) -> None:
        if self.event_bus is not None:
            await self.event_bus.publish(event)
