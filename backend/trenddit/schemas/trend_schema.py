from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..agents.trend_agent.schema import TrendAnalysis
from ..constants import DEFAULT_TREND_CATEGORY, TREND_CATEGORIES
from .common import CAMEL_CASE


class Trend(BaseModel):
    """A market trend as rendered by the trends pages (snake_case on the wire)."""

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    summary: str = Field(..., min_length=1)
    category: str = DEFAULT_TREND_CATEGORY
    impact_score: float = Field(7, ge=1, le=10)
    source: Optional[str] = None
    source_url: Optional[str] = None

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str) -> str:
        normalized = (value or "").strip().lower()
        return normalized if normalized in TREND_CATEGORIES else DEFAULT_TREND_CATEGORY


class AnalyzeTrendRequest(BaseModel):
    title: str = Field(..., min_length=1)
    summary: str = Field(..., min_length=1)
    category: str = DEFAULT_TREND_CATEGORY


class TrendAnalysisResponse(BaseModel):
    model_config = CAMEL_CASE

    analysis: TrendAnalysis
    degraded: bool = False
