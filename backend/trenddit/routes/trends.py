"""Trend routes — AI business-impact analysis.

Endpoints:
  POST /trends/analyze   — Analyze one trend's business implications
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ..agents.trend_agent.analyzer import TrendAnalyzer
from ..schemas.trend_schema import AnalyzeTrendRequest, TrendAnalysisResponse
from ..services.dependencies import generation_http_error, get_generation_service
from ..services.errors import GenerationError
from ..services.generation_service import GenerationService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/trends",
    tags=["Trends"],
)


@router.post(
    "/analyze",
    response_model=TrendAnalysisResponse,
    response_model_by_alias=True,
    summary="Analyze Trend",
)
async def analyze_trend(
    payload: AnalyzeTrendRequest,
    service: GenerationService = Depends(get_generation_service),
) -> TrendAnalysisResponse:
    """Single-tier analysis. Failures surface as typed errors for a manual retry."""
    try:
        result = await TrendAnalyzer(service).analyze(
            payload.title,
            payload.summary,
            payload.category,
            deadline=service.new_deadline(),
        )
    except GenerationError as exc:
        print(f"❌ [TRENDS] Analysis FAILED: {exc.kind.value} — {exc.message}")
        raise generation_http_error(exc, service) from exc

    return TrendAnalysisResponse(analysis=result.value, degraded=result.degraded)
