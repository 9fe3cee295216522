"""Solution schema — strict output contract for solution generation.

Every field the UI renders has a documented default; `approach` is the
identity field (a solution without a recognizable approach is dropped).
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from ...constants import (
    CONFIDENCE_MAX,
    CONFIDENCE_MIN,
    DEFAULT_SOLUTION_CATEGORY,
    DEFAULT_TIME_UNIT,
    MATCH_SCORE_MAX,
    MATCH_SCORE_MIN,
    SOLUTION_APPROACHES,
    SOLUTION_CATEGORIES,
    TIME_UNITS,
)
from ...schemas.common import CAMEL_CASE
from ...services.coercion import (
    EnumField,
    NumberField,
    ObjectField,
    ObjectSchema,
    OptionalTextField,
    StringListField,
    TextField,
)

Approach = Literal["build", "buy", "partner"]
SolutionCategory = Literal[
    "automation",
    "analytics",
    "customer_experience",
    "infrastructure",
    "security",
    "data_management",
    "collaboration",
    "process_optimization",
]
TimeUnit = Literal["days", "weeks", "months"]

Number = Union[int, float]


class EstimatedCost(BaseModel):
    initial: Number = Field(..., ge=0)
    monthly: Number = Field(..., ge=0)
    annual: Number = Field(..., ge=0)


class ImplementationTime(BaseModel):
    min: Number = Field(..., ge=0)
    max: Number = Field(..., ge=0)
    unit: TimeUnit


class Roi(BaseModel):
    model_config = CAMEL_CASE

    break_even_months: Number = Field(..., ge=0)
    three_year_return: Number
    confidence_score: float = Field(..., ge=CONFIDENCE_MIN, le=CONFIDENCE_MAX)


class Solution(BaseModel):
    model_config = CAMEL_CASE

    id: Optional[str] = None
    need_id: Optional[str] = None
    approach: Approach
    title: str
    description: str
    category: SolutionCategory
    vendor: Optional[str] = None
    estimated_cost: EstimatedCost
    implementation_time: ImplementationTime
    roi: Roi
    risks: List[str]
    benefits: List[str]
    requirements: List[str]
    alternatives: List[str]
    match_score: float = Field(..., ge=MATCH_SCORE_MIN, le=MATCH_SCORE_MAX)


class NeedSummary(BaseModel):
    """The slice of a Need that solution generation consumes."""

    model_config = CAMEL_CASE

    id: Optional[str] = None
    title: str = Field(..., min_length=1)
    description: str = ""


class SolutionPreferences(BaseModel):
    model_config = CAMEL_CASE

    preferred_approach: Optional[Approach] = None
    max_budget: Optional[float] = Field(None, ge=0)
    max_time_months: Optional[float] = Field(None, gt=0)
    risk_tolerance: Optional[Literal["low", "medium", "high"]] = None


# ── Coercion schemas ───────────────────────────────────────────────────


def _order_time_range(data: Dict[str, Any]) -> Dict[str, Any]:
    if data["min"] > data["max"]:
        data["min"], data["max"] = data["max"], data["min"]
    return data


ESTIMATED_COST_SCHEMA = ObjectSchema(
    name="EstimatedCost",
    model=None,
    fields=(
        NumberField("initial", default=100000, lo=0),
        NumberField("monthly", default=10000, lo=0),
        NumberField("annual", default=120000, lo=0),
    ),
)

IMPLEMENTATION_TIME_SCHEMA = ObjectSchema(
    name="ImplementationTime",
    model=None,
    fields=(
        NumberField("min", default=3, lo=0),
        NumberField("max", default=6, lo=0),
        EnumField("unit", values=tuple(TIME_UNITS), default=DEFAULT_TIME_UNIT),
    ),
    finalize=_order_time_range,
)

ROI_SCHEMA = ObjectSchema(
    name="Roi",
    model=None,
    fields=(
        NumberField("breakEvenMonths", default=18, lo=0),
        NumberField("threeYearReturn", default=0),
        NumberField("confidenceScore", default=0.75, lo=CONFIDENCE_MIN, hi=CONFIDENCE_MAX),
    ),
)

SOLUTION_SCHEMA = ObjectSchema(
    name="Solution",
    model=Solution,
    collection_key="solutions",
    fields=(
        EnumField("approach", values=tuple(SOLUTION_APPROACHES), default="", required=True),
        TextField("title", default="Proposed solution"),
        TextField("description", default="AI-generated solution for the selected business need."),
        EnumField("category", values=tuple(SOLUTION_CATEGORIES), default=DEFAULT_SOLUTION_CATEGORY),
        OptionalTextField("vendor"),
        ObjectField("estimatedCost", ESTIMATED_COST_SCHEMA),
        ObjectField("implementationTime", IMPLEMENTATION_TIME_SCHEMA),
        ObjectField("roi", ROI_SCHEMA),
        StringListField("risks", default=("Implementation risk to be assessed",)),
        StringListField("benefits", default=("Addresses the selected business need",)),
        StringListField("requirements", default=("Requirements to be scoped",)),
        StringListField("alternatives", default=("Alternatives to be evaluated",)),
        NumberField("matchScore", default=0.75, lo=MATCH_SCORE_MIN, hi=MATCH_SCORE_MAX),
    ),
)
