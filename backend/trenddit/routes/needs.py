"""Needs routes — generate and prioritize business needs.

Endpoints:
  POST /needs/generate     — Generate needs for a trend + company profile
  POST /needs/prioritize   — Rank needs on the impact / effort matrix
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..agents.needs_agent.generator import NeedGenerator
from ..agents.needs_agent.rules import prioritize_needs
from ..schemas.needs_schema import (
    GenerateNeedsRequest,
    GenerateNeedsResponse,
    PrioritizeNeedsRequest,
    PrioritizeNeedsResponse,
)
from ..services.dependencies import generation_http_error, get_generation_service
from ..services.errors import GenerationError
from ..services.generation_service import GenerationService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/needs",
    tags=["Needs"],
)


@router.post(
    "/generate",
    response_model=GenerateNeedsResponse,
    response_model_by_alias=True,
    summary="Generate Business Needs",
)
async def generate_needs(
    payload: GenerateNeedsRequest,
    service: GenerationService = Depends(get_generation_service),
) -> GenerateNeedsResponse:
    try:
        result = await NeedGenerator(service).generate(
            payload.trend,
            payload.company_context,
            payload.max_needs,
            deadline=service.new_deadline(),
        )
    except GenerationError as exc:
        print(f"❌ [NEEDS] Generation FAILED: {exc.kind.value} — {exc.message}")
        raise generation_http_error(exc, service) from exc

    return GenerateNeedsResponse(needs=result.value, count=len(result.value), degraded=result.degraded)


@router.post(
    "/prioritize",
    response_model=PrioritizeNeedsResponse,
    response_model_by_alias=True,
    summary="Prioritize Business Needs",
)
async def prioritize(payload: PrioritizeNeedsRequest) -> PrioritizeNeedsResponse:
    try:
        return prioritize_needs(payload.needs, payload.impact_weight, payload.effort_weight)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
