"""Solutions routes — generate, compare and project ROI for solutions.

Endpoints:
  POST /solutions/generate   — Build / buy / partner options for a need
  POST /solutions/compare    — Weighted comparison across criteria
  POST /solutions/roi        — ROI projection for one solution
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..agents.solutions_agent.analysis import RoiProjection, SolutionComparison, calculate_roi, compare_solutions
from ..agents.solutions_agent.generator import SolutionGenerator
from ..schemas.solutions_schema import (
    CompareSolutionsRequest,
    GenerateSolutionsRequest,
    GenerateSolutionsResponse,
    RoiRequest,
)
from ..services.dependencies import generation_http_error, get_generation_service
from ..services.errors import GenerationError
from ..services.generation_service import GenerationService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/solutions",
    tags=["Solutions"],
)


@router.post(
    "/generate",
    response_model=GenerateSolutionsResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    summary="Generate Solutions",
)
async def generate_solutions(
    payload: GenerateSolutionsRequest,
    service: GenerationService = Depends(get_generation_service),
) -> GenerateSolutionsResponse:
    """Three-tier generation. Always returns one solution per approach."""
    try:
        result = await SolutionGenerator(service).generate(
            payload.need,
            payload.company_context,
            payload.preferences,
            deadline=service.new_deadline(),
        )
    except GenerationError as exc:
        # Only reachable if the cascade is misconfigured; the synthetic tier does no I/O
        logger.error("[SOLUTIONS] Generation failed: %r", exc)
        raise generation_http_error(exc, service) from exc

    return GenerateSolutionsResponse(
        solutions=result.solutions,
        tier=result.tier.label,
        degraded=result.degraded,
    )


@router.post(
    "/compare",
    response_model=SolutionComparison,
    response_model_by_alias=True,
    summary="Compare Solutions",
)
async def compare(payload: CompareSolutionsRequest) -> SolutionComparison:
    try:
        return compare_solutions(payload.solutions, payload.criteria)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post(
    "/roi",
    response_model=RoiProjection,
    response_model_by_alias=True,
    summary="Calculate Solution ROI",
)
async def roi(payload: RoiRequest) -> RoiProjection:
    try:
        return calculate_roi(
            payload.solution,
            expected_revenue=payload.expected_revenue,
            cost_savings=payload.cost_savings,
            productivity_gains=payload.productivity_gains,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
