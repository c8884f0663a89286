"""HTTP routes for matching resumes to jobs."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from recruitmatch.core.matching import AutoMatchOrchestrator, MatchService
from recruitmatch.core.principal import Principal
from recruitmatch.data.models import (
    AutoMatchResponse,
    MatchRequest,
    MatchStatusUpdate,
    MatchSummary,
)
from recruitmatch.utils.constants import MatchStatus

from .dependencies import (
    get_auto_match_orchestrator,
    get_match_service,
    get_principal,
    require_staff,
)

router = APIRouter(prefix="/api/matches", tags=["matches"])


@router.post("/match")
async def match_resume(
    body: MatchRequest,
    principal: Principal = Depends(get_principal),
    service: MatchService = Depends(get_match_service),
):
    """Score a resume against a job; 201 when the match is new, 200 when refreshed."""
    outcome = await service.match(body.resume_id, body.job_id, principal)
    return JSONResponse(
        status_code=201 if outcome.created else 200,
        content=outcome.match.model_dump_api(),
    )


@router.post("/auto-match/{job_id}", response_model=AutoMatchResponse)
async def auto_match(
    job_id: str,
    _: Principal = Depends(require_staff),
    orchestrator: AutoMatchOrchestrator = Depends(get_auto_match_orchestrator),
):
    """Re-score every resume against a job."""
    result = await orchestrator.auto_match(job_id)
    return AutoMatchResponse(
        message=result.message,
        matched_count=result.matched_count,
        matches=[
            MatchSummary(resume_id=entry.resume_id, match_score=entry.score)
            for entry in result.results
        ],
    )


@router.get("/my-matches")
async def my_matches(
    principal: Principal = Depends(get_principal),
    service: MatchService = Depends(get_match_service),
):
    matches = await service.matches_for_candidate(principal.user_id, principal)
    return [view.model_dump_api() for view in await service.describe(matches)]


@router.get("/")
async def list_matches(
    job_id: Optional[str] = None,
    candidate_id: Optional[str] = None,
    status: Optional[MatchStatus] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    _: Principal = Depends(require_staff),
    service: MatchService = Depends(get_match_service),
):
    matches = await service.list_matches(
        job_id=job_id,
        candidate_id=candidate_id,
        status=status,
        skip=skip,
        limit=limit,
    )
    return [view.model_dump_api() for view in await service.describe(matches)]


@router.get("/job/{job_id}")
async def job_matches(
    job_id: str,
    _: Principal = Depends(require_staff),
    service: MatchService = Depends(get_match_service),
):
    matches = await service.matches_for_job(job_id)
    return [view.model_dump_api() for view in await service.describe(matches)]


@router.get("/candidate/{candidate_id}")
async def candidate_matches(
    candidate_id: str,
    principal: Principal = Depends(get_principal),
    service: MatchService = Depends(get_match_service),
):
    matches = await service.matches_for_candidate(candidate_id, principal)
    return [view.model_dump_api() for view in await service.describe(matches)]


@router.put("/{match_id}/status")
async def update_match_status(
    match_id: str,
    body: MatchStatusUpdate,
    _: Principal = Depends(require_staff),
    service: MatchService = Depends(get_match_service),
):
    match = await service.update_status(match_id, body.status, body.notes)
    return match.model_dump_api()
