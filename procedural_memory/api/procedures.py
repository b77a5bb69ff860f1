"""
Procedure API endpoints.

Thin adapter over ProcedureService: request parsing, response shaping, and
turning failed OperationResults into domain errors for the app-level
exception handlers.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from ..core.services import get_procedure_service
from ..services.procedure_service import ProcedureService
from .schemas import (
    DelayReviewResponse,
    ExtractSkillsRequest,
    ExtractSkillsResponse,
    MarkReviewedResponse,
    ProcedureOut,
    ProcedureSummaryOut,
    ReviewQueueResponse,
    SaveProcedureRequest,
    SaveProcedureResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["procedures"])


async def get_service() -> ProcedureService:
    """FastAPI dependency for the procedure service."""
    return await get_procedure_service()


@router.post("/skills/extract", response_model=ExtractSkillsResponse)
async def extract_skills(
    request: ExtractSkillsRequest, service: ProcedureService = Depends(get_service)
) -> ExtractSkillsResponse:
    result = service.extract_skills(request.content, request.refinement_prompt)
    return ExtractSkillsResponse(
        steps=[step.to_dict() for step in result["steps"]],
        count=result["count"],
    )


@router.post("/procedures", response_model=SaveProcedureResponse, status_code=201)
async def save_procedure(
    request: SaveProcedureRequest, service: ProcedureService = Depends(get_service)
) -> SaveProcedureResponse:
    result = await service.save_procedure(
        title=request.title,
        steps=[step.description for step in request.steps],
        algorithm=request.algorithm,
        start_date=request.start_date,
    )
    return SaveProcedureResponse.model_validate(result.unwrap())


@router.get("/procedures", response_model=List[ProcedureSummaryOut])
async def list_procedures(
    service: ProcedureService = Depends(get_service),
) -> List[ProcedureSummaryOut]:
    summaries = await service.list_procedures()
    return [ProcedureSummaryOut.model_validate(s.to_dict()) for s in summaries]


@router.get("/procedures/{procedure_id}", response_model=ProcedureOut)
async def get_procedure(
    procedure_id: str, service: ProcedureService = Depends(get_service)
) -> ProcedureOut:
    result = await service.get_procedure(procedure_id)
    return ProcedureOut.model_validate(result.unwrap().to_dict())


@router.get("/reviews/queue", response_model=ReviewQueueResponse)
async def get_review_queue(
    date: str = Query(..., description="Calendar date, YYYY-MM-DD"),
    service: ProcedureService = Depends(get_service),
) -> ReviewQueueResponse:
    queue = (await service.get_review_queue(date)).unwrap()
    return ReviewQueueResponse(
        date=queue["date"],
        item_count=queue["itemCount"],
        items=[item.to_dict() for item in queue["items"]],
    )


@router.post(
    "/procedures/{procedure_id}/reviews/{review_index}/complete",
    response_model=MarkReviewedResponse,
)
async def mark_reviewed(
    procedure_id: str,
    review_index: int,
    service: ProcedureService = Depends(get_service),
) -> MarkReviewedResponse:
    outcome = (await service.mark_reviewed(procedure_id, review_index)).unwrap()
    upcoming = outcome["nextReview"]
    return MarkReviewedResponse(
        completed_label=outcome["completedLabel"],
        next_review=upcoming.to_dict() if upcoming else None,
    )


@router.post(
    "/procedures/{procedure_id}/reviews/{review_index}/delay",
    response_model=DelayReviewResponse,
)
async def delay_review(
    procedure_id: str,
    review_index: int,
    service: ProcedureService = Depends(get_service),
) -> DelayReviewResponse:
    outcome = (await service.delay_review(procedure_id, review_index)).unwrap()
    return DelayReviewResponse(new_date=outcome["newDate"])
