"""Need prioritization — deterministic impact/effort scoring.

score = impact * impact_weight + (11 - effort) * effort_weight

Effort is inverted so cheap needs rank higher. The 2x2 matrix splits both
axes at 6 on the 1-10 scale.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from pydantic import BaseModel

from ...schemas.common import CAMEL_CASE
from .schema import Need

MATRIX_THRESHOLD = 6

QUADRANTS = (
    "high_impact_low_effort",
    "high_impact_high_effort",
    "low_impact_low_effort",
    "low_impact_high_effort",
)


class PrioritizedNeed(BaseModel):
    model_config = CAMEL_CASE

    need: Need
    priority_score: float
    quadrant: str


class NeedPrioritization(BaseModel):
    model_config = CAMEL_CASE

    ranked: List[PrioritizedNeed]
    matrix: Dict[str, List[str]]


def priority_score(need: Need, impact_weight: float = 0.6, effort_weight: float = 0.4) -> float:
    return need.impact_score * impact_weight + (11 - need.effort_score) * effort_weight


def quadrant_for(need: Need) -> str:
    impact = "high_impact" if need.impact_score >= MATRIX_THRESHOLD else "low_impact"
    effort = "high_effort" if need.effort_score >= MATRIX_THRESHOLD else "low_effort"
    return f"{impact}_{effort}"


def prioritize_needs(
    needs: Sequence[Need],
    impact_weight: float = 0.6,
    effort_weight: float = 0.4,
) -> NeedPrioritization:
    """Rank needs by weighted score (stable on ties) and bucket them into the matrix.

    Matrix entries are need ids, falling back to titles for needs without one.
    """
    if impact_weight < 0 or effort_weight < 0 or impact_weight + effort_weight == 0:
        raise ValueError("Weights must be non-negative and not both zero")

    ranked = sorted(
        (
            PrioritizedNeed(
                need=need,
                priority_score=round(priority_score(need, impact_weight, effort_weight), 4),
                quadrant=quadrant_for(need),
            )
            for need in needs
        ),
        key=lambda item: item.priority_score,
        reverse=True,
    )

    matrix: Dict[str, List[str]] = {quadrant: [] for quadrant in QUADRANTS}
    for item in ranked:
        matrix[item.quadrant].append(item.need.id or item.need.title)

    return NeedPrioritization(ranked=ranked, matrix=matrix)
