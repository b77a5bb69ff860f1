"""
Request/response models for the procedure API.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..domain.models import Algorithm


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class ExtractSkillsRequest(CamelModel):
    content: str = Field(description="The text to analyze")
    refinement_prompt: Optional[str] = Field(
        default=None, description="Optional prompt to refine extraction"
    )


class StepIn(CamelModel):
    # Incoming order is advisory; steps are renumbered in list order on save
    order: Optional[int] = None
    description: str


class SaveProcedureRequest(CamelModel):
    title: str
    steps: List[StepIn]
    algorithm: str = Field(description="Review cadence: motor or cognitive")
    start_date: Optional[str] = Field(
        default=None, description="YYYY-MM-DD of the first review; defaults to today"
    )


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class StepOut(CamelModel):
    order: int
    description: str


class ReviewEventOut(CamelModel):
    date: date
    label: str
    completed: bool


class ExtractSkillsResponse(CamelModel):
    steps: List[StepOut]
    count: int


class SaveProcedureResponse(CamelModel):
    procedure_id: str
    step_count: int
    algorithm: Algorithm
    first_review_date: date


class DueReviewOut(CamelModel):
    procedure_id: str
    title: str
    algorithm: Algorithm
    review_index: int
    label: str
    step_count: int


class ReviewQueueResponse(CamelModel):
    date: date
    item_count: int
    items: List[DueReviewOut]


class MarkReviewedResponse(CamelModel):
    completed_label: str
    next_review: Optional[ReviewEventOut] = None


class DelayReviewResponse(CamelModel):
    new_date: date


class ProcedureSummaryOut(CamelModel):
    id: str
    title: str
    algorithm: Algorithm
    step_count: int
    created_at: datetime
    progress: str


class ProcedureOut(CamelModel):
    id: str
    title: str
    steps: List[StepOut]
    algorithm: Algorithm
    created_at: datetime
    current_step: int
    review_schedule: List[ReviewEventOut]
