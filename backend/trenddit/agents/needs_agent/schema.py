"""Need schema — strict output contract for need generation.

Defaults documented here are what the UI shows when the model omits a field.
"""

from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from ...constants import (
    DEFAULT_NEED_CATEGORY,
    DEFAULT_NEED_PRIORITY,
    DEFAULT_SCORE,
    NEED_CATEGORIES,
    NEED_PRIORITIES,
    SCORE_MAX,
    SCORE_MIN,
)
from ...schemas.common import CAMEL_CASE
from ...services.coercion import EnumField, NumberField, ObjectSchema, StringListField, TextField

NeedCategory = Literal[
    "automation",
    "data_insights",
    "customer_experience",
    "operational_efficiency",
    "competitive_advantage",
    "risk_management",
    "cost_reduction",
    "innovation",
]
NeedPriority = Literal["low", "medium", "high", "critical"]

Score = Union[int, float]


class Need(BaseModel):
    model_config = CAMEL_CASE

    id: Optional[str] = None
    trend_id: Optional[str] = None
    title: str
    description: str
    category: NeedCategory
    priority: NeedPriority
    impact_score: Score = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    effort_score: Score = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    urgency_score: Score = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    stakeholders: List[str] = Field(..., min_length=1)
    business_value: str
    risks: List[str]
    success_metrics: List[str] = Field(..., min_length=1)


NEED_SCHEMA = ObjectSchema(
    name="Need",
    model=Need,
    collection_key="needs",
    fields=(
        TextField("title", required=True),
        TextField("description", default="AI-generated business need"),
        EnumField("category", values=tuple(NEED_CATEGORIES), default=DEFAULT_NEED_CATEGORY),
        EnumField("priority", values=tuple(NEED_PRIORITIES), default=DEFAULT_NEED_PRIORITY),
        NumberField("impactScore", default=DEFAULT_SCORE, lo=SCORE_MIN, hi=SCORE_MAX),
        NumberField("effortScore", default=DEFAULT_SCORE, lo=SCORE_MIN, hi=SCORE_MAX),
        NumberField("urgencyScore", default=DEFAULT_SCORE, lo=SCORE_MIN, hi=SCORE_MAX),
        StringListField("stakeholders", default=("Management",), min_items=1),
        TextField("businessValue", default="Expected to improve business operations"),
        StringListField("risks", default=("Implementation challenges",)),
        StringListField("successMetrics", default=("Success measurement needed",), min_items=1),
    ),
)
