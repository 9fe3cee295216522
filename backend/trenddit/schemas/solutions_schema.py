"""Pydantic schemas for the solutions API."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..agents.solutions_agent.analysis import ComparisonCriterion
from ..agents.solutions_agent.schema import NeedSummary, Solution, SolutionPreferences
from .common import CAMEL_CASE
from .company_schema import CompanyContext


class GenerateSolutionsRequest(BaseModel):
    model_config = CAMEL_CASE

    need: NeedSummary
    company_context: CompanyContext
    preferences: Optional[SolutionPreferences] = None


class GenerateSolutionsResponse(BaseModel):
    model_config = CAMEL_CASE

    solutions: List[Solution]
    tier: str = Field(..., description="primary | simplified | synthetic")
    degraded: bool = False


class CompareSolutionsRequest(BaseModel):
    model_config = CAMEL_CASE

    solutions: List[Solution] = Field(..., min_length=1)
    criteria: List[ComparisonCriterion] = Field(default_factory=list)


class RoiRequest(BaseModel):
    model_config = CAMEL_CASE

    solution: Solution
    expected_revenue: float = Field(50000, ge=0)
    cost_savings: float = Field(20000, ge=0)
    productivity_gains: float = Field(15000, ge=0)
