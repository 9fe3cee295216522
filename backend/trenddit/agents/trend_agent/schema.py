"""TrendAnalysis schema — strict output contract for trend analysis."""

from __future__ import annotations

from typing import List, Union

from pydantic import BaseModel, Field

from ...constants import DEFAULT_SCORE, SCORE_MAX, SCORE_MIN
from ...schemas.common import CAMEL_CASE
from ...services.coercion import NumberField, ObjectSchema, StringListField, TextField


class TrendAnalysis(BaseModel):
    model_config = CAMEL_CASE

    business_implications: str
    technical_requirements: str
    implementation_timeline: str
    risk_factors: List[str] = Field(..., min_length=1)
    impact_score: Union[int, float] = Field(..., ge=SCORE_MIN, le=SCORE_MAX)


# businessImplications and impactScore are identity fields: an analysis
# without them is rejected rather than filled with a fabricated score.
TREND_ANALYSIS_SCHEMA = ObjectSchema(
    name="TrendAnalysis",
    model=TrendAnalysis,
    fields=(
        TextField("businessImplications", required=True),
        TextField("technicalRequirements", default="Requirements to be assessed with the technology team."),
        TextField("implementationTimeline", default="To be determined after a scoping workshop."),
        StringListField("riskFactors", default=("Risk assessment pending",), min_items=1),
        NumberField("impactScore", default=DEFAULT_SCORE, lo=SCORE_MIN, hi=SCORE_MAX, required=True),
    ),
)
