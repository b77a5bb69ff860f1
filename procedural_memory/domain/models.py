"""
Domain records for procedures and their review schedules.

Plain dataclasses with no persistence concerns. Every record converts to and
from a JSON-safe dict (ISO dates and timestamps) so that storage backends and
the HTTP layer share one wire shape.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List


class Algorithm(str, enum.Enum):
    """Review cadence selector. Closed set; new cadences are new members."""

    MOTOR = "motor"
    COGNITIVE = "cognitive"


@dataclass(frozen=True)
class ProcedureStep:
    """One ordered step of a procedure. ``order`` is 1-based and dense."""

    order: int
    description: str

    def __post_init__(self) -> None:
        if self.order < 1:
            raise ValueError(f"Step order must be >= 1, got {self.order}")
        if not self.description or not self.description.strip():
            raise ValueError("Step description must not be empty")

    def to_dict(self) -> Dict[str, Any]:
        return {"order": self.order, "description": self.description}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProcedureStep":
        return cls(order=int(data["order"]), description=data["description"])


@dataclass
class ReviewEvent:
    """A single scheduled practice session.

    ``date`` changes only through a one-day delay; ``completed`` only ever
    goes from False to True.
    """

    date: date
    label: str
    completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "label": self.label,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReviewEvent":
        return cls(
            date=date.fromisoformat(data["date"]),
            label=data["label"],
            completed=bool(data.get("completed", False)),
        )


@dataclass
class Procedure:
    """A saved procedure with its review schedule.

    ``current_step`` is advisory: it is set to ``review_index + 1`` each time
    a review is marked, so it reflects the last marked index rather than a
    contiguous completion count.
    """

    id: str
    title: str
    steps: List[ProcedureStep]
    algorithm: Algorithm
    created_at: datetime
    review_schedule: List[ReviewEvent]
    current_step: int = 0

    @property
    def completed_reviews(self) -> int:
        return sum(1 for event in self.review_schedule if event.completed)

    @property
    def progress(self) -> str:
        """Completion ratio rendered as ``completed/total``."""
        return f"{self.completed_reviews}/{len(self.review_schedule)}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "steps": [step.to_dict() for step in self.steps],
            "algorithm": self.algorithm.value,
            "createdAt": self.created_at.isoformat(),
            "currentStep": self.current_step,
            "reviewSchedule": [event.to_dict() for event in self.review_schedule],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Procedure":
        return cls(
            id=data["id"],
            title=data["title"],
            steps=[ProcedureStep.from_dict(s) for s in data["steps"]],
            algorithm=Algorithm(data["algorithm"]),
            created_at=datetime.fromisoformat(data["createdAt"]),
            current_step=int(data.get("currentStep", 0)),
            review_schedule=[ReviewEvent.from_dict(e) for e in data["reviewSchedule"]],
        )


@dataclass(frozen=True)
class DueReview:
    """One row of the review queue for a given date."""

    procedure_id: str
    title: str
    algorithm: Algorithm
    review_index: int
    label: str
    step_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "procedureId": self.procedure_id,
            "title": self.title,
            "algorithm": self.algorithm.value,
            "reviewIndex": self.review_index,
            "label": self.label,
            "stepCount": self.step_count,
        }


@dataclass(frozen=True)
class ProcedureSummary:
    """List projection of a procedure."""

    id: str
    title: str
    algorithm: Algorithm
    step_count: int
    created_at: datetime
    progress: str

    @classmethod
    def from_procedure(cls, procedure: Procedure) -> "ProcedureSummary":
        return cls(
            id=procedure.id,
            title=procedure.title,
            algorithm=procedure.algorithm,
            step_count=len(procedure.steps),
            created_at=procedure.created_at,
            progress=procedure.progress,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "algorithm": self.algorithm.value,
            "stepCount": self.step_count,
            "createdAt": self.created_at.isoformat(),
            "progress": self.progress,
        }
