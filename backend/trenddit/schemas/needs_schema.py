"""Pydantic schemas for the needs API."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from ..agents.needs_agent.rules import NeedPrioritization
from ..agents.needs_agent.schema import Need
from ..constants import DEFAULT_MAX_NEEDS, MAX_NEEDS_LIMIT
from .common import CAMEL_CASE
from .company_schema import CompanyContext
from .trend_schema import Trend


class GenerateNeedsRequest(BaseModel):
    model_config = CAMEL_CASE

    trend: Trend
    company_context: CompanyContext
    max_needs: int = Field(DEFAULT_MAX_NEEDS, ge=1, le=MAX_NEEDS_LIMIT)


class GenerateNeedsResponse(BaseModel):
    model_config = CAMEL_CASE

    needs: List[Need]
    count: int
    degraded: bool = False


class PrioritizeNeedsRequest(BaseModel):
    model_config = CAMEL_CASE

    needs: List[Need] = Field(..., min_length=1)
    impact_weight: float = Field(0.6, ge=0)
    effort_weight: float = Field(0.4, ge=0)


PrioritizeNeedsResponse = NeedPrioritization
