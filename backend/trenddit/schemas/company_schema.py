from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ..constants import TECH_MATURITY_LEVELS
from .common import CAMEL_CASE


class CompanyContext(BaseModel):
    """Company profile collected by the needs wizard.

    Consumed by every generator. `size` and `industry` are free text here and
    normalized by the synthetic-tier rules; the wizard sends the canonical
    sizes keyed in `constants.COMPANY_SIZE_COST_MULTIPLIER`.
    """

    model_config = CAMEL_CASE

    id: Optional[str] = None
    name: str = Field(..., min_length=1, description="Company name")
    industry: str = Field(..., min_length=1, description="e.g. technology, finance, healthcare")
    size: str = Field(..., min_length=1, description="startup | small-medium | large | government | non-profit")
    tech_maturity: str = Field(
        "medium",
        validation_alias=AliasChoices("techMaturity", "maturity", "tech_maturity"),
        description="low | medium | high",
    )
    market: Optional[str] = None
    customer: Optional[str] = None
    budget: Optional[str] = None
    trend_context: Optional[str] = None
    current_challenges: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("currentChallenges", "challenges", "current_challenges"),
    )
    primary_goals: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("primaryGoals", "goals", "primary_goals"),
    )

    @field_validator("tech_maturity")
    @classmethod
    def _lower_maturity(cls, value: str) -> str:
        normalized = value.strip().lower()
        return normalized if normalized in TECH_MATURITY_LEVELS else "medium"
