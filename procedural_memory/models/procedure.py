"""
Procedure persistence model.

Steps and the review schedule are stored as JSON documents on the row; the
schedule is always read and written as a whole.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..domain.models import Algorithm, Procedure, ProcedureStep, ReviewEvent
from .base import Base, TimestampMixin


class ProcedureRecord(Base, TimestampMixin):
    """A saved procedure row."""

    __tablename__ = "procedures"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    algorithm: Mapped[str] = mapped_column(String(32), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    current_step: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    steps: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False)
    review_schedule: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False)

    def to_domain(self) -> Procedure:
        return Procedure(
            id=self.id,
            title=self.title,
            steps=[ProcedureStep.from_dict(s) for s in self.steps],
            algorithm=Algorithm(self.algorithm),
            created_at=_as_utc(self.created_at),
            current_step=self.current_step,
            review_schedule=[ReviewEvent.from_dict(e) for e in self.review_schedule],
        )

    def update_from_domain(self, procedure: Procedure) -> None:
        self.title = procedure.title
        self.algorithm = procedure.algorithm.value
        self.created_at = procedure.created_at
        self.current_step = procedure.current_step
        self.steps = [step.to_dict() for step in procedure.steps]
        self.review_schedule = [event.to_dict() for event in procedure.review_schedule]

    @classmethod
    def from_domain(cls, procedure: Procedure) -> "ProcedureRecord":
        record = cls(id=procedure.id)
        record.update_from_domain(procedure)
        return record


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
