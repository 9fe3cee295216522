"""Solution comparison and ROI projection — deterministic, no provider call."""

from __future__ import annotations

from typing import Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel

from ...schemas.common import CAMEL_CASE
from .schema import Solution

ComparisonCriterion = Literal["cost", "time", "roi", "risk", "complexity", "scalability", "maintenance"]

BASE_WEIGHTS: Dict[str, float] = {
    "cost": 0.25,
    "time": 0.20,
    "roi": 0.25,
    "risk": 0.15,
    "complexity": 0.05,
    "scalability": 0.05,
    "maintenance": 0.05,
}
EMPHASIS_FACTOR = 1.5

DISCOUNT_RATE = 0.10
PROJECTION_YEARS = 3

_MONTHS_PER_UNIT = {"days": 1 / 30, "weeks": 12 / 52, "months": 1.0}


class SolutionScore(BaseModel):
    model_config = CAMEL_CASE

    solution_id: Optional[str] = None
    approach: str
    title: str
    score: float
    breakdown: Dict[str, float]


class SolutionComparison(BaseModel):
    model_config = CAMEL_CASE

    criteria: List[str]
    weights: Dict[str, float]
    solutions: List[SolutionScore]
    winner: Optional[str] = None
    winner_approach: str


class RoiProjection(BaseModel):
    model_config = CAMEL_CASE

    solution_id: Optional[str] = None
    annual_benefit: float
    monthly_roi: float
    annual_roi: float
    payback_months: Optional[float] = None
    net_present_value: float
    three_year_net_return: float


# ── Comparison ────────────────────────────────────────────────────────


def comparison_weights(criteria: Sequence[str]) -> Dict[str, float]:
    """Base weights with each emphasized criterion ×1.5, renormalized to sum to 1."""
    unknown = [c for c in criteria if c not in BASE_WEIGHTS]
    if unknown:
        raise ValueError(f"Unknown comparison criteria: {unknown}")

    weights = dict(BASE_WEIGHTS)
    for criterion in set(criteria):
        weights[criterion] *= EMPHASIS_FACTOR
    total = sum(weights.values())
    return {key: value / total for key, value in weights.items()}


def _months(solution: Solution) -> float:
    span = solution.implementation_time
    return (span.min + span.max) / 2 * _MONTHS_PER_UNIT[span.unit]


def _lower_is_better(values: List[float]) -> List[float]:
    best = min(values)
    return [1.0 if value <= 0 or value == best else best / value for value in values]


def _higher_is_better(values: List[float]) -> List[float]:
    lo, hi = min(values), max(values)
    if hi == lo:
        return [1.0 for _ in values]
    return [(value - lo) / (hi - lo) for value in values]


def _criterion_scores(solutions: Sequence[Solution]) -> Dict[str, List[float]]:
    three_year_cost = [s.estimated_cost.initial + s.estimated_cost.annual * PROJECTION_YEARS for s in solutions]
    return {
        "cost": _lower_is_better(three_year_cost),
        "time": _lower_is_better([_months(s) for s in solutions]),
        "roi": _higher_is_better([s.roi.three_year_return for s in solutions]),
        "risk": _lower_is_better([len(s.risks) for s in solutions]),
        "complexity": _lower_is_better([len(s.requirements) for s in solutions]),
        "scalability": _higher_is_better([s.match_score for s in solutions]),
        "maintenance": _lower_is_better([s.estimated_cost.monthly for s in solutions]),
    }


def compare_solutions(solutions: Sequence[Solution], criteria: Sequence[str] = ()) -> SolutionComparison:
    """Score each solution 0-1 across all criteria and pick the highest.

    Ties keep input order. Raises ValueError for an empty list or an
    unknown criterion.
    """
    if not solutions:
        raise ValueError("At least one solution is required for comparison")

    weights = comparison_weights(criteria)
    per_criterion = _criterion_scores(solutions)

    scored: List[SolutionScore] = []
    for index, solution in enumerate(solutions):
        breakdown = {key: round(per_criterion[key][index], 4) for key in weights}
        total = sum(weights[key] * per_criterion[key][index] for key in weights)
        scored.append(
            SolutionScore(
                solution_id=solution.id,
                approach=solution.approach,
                title=solution.title,
                score=round(total, 4),
                breakdown=breakdown,
            )
        )

    best = max(range(len(scored)), key=lambda i: (scored[i].score, -i))
    return SolutionComparison(
        criteria=list(criteria),
        weights={key: round(value, 4) for key, value in weights.items()},
        solutions=scored,
        winner=scored[best].solution_id,
        winner_approach=scored[best].approach,
    )


# ── ROI ───────────────────────────────────────────────────────────────


def calculate_roi(
    solution: Solution,
    expected_revenue: float = 50000,
    cost_savings: float = 20000,
    productivity_gains: float = 15000,
) -> RoiProjection:
    """Project returns of *solution* against annual benefit inputs.

    Benefits are annual figures. Payback is None when the monthly benefit
    never covers the solution's monthly cost.
    """
    if min(expected_revenue, cost_savings, productivity_gains) < 0:
        raise ValueError("ROI inputs must be non-negative")

    annual_benefit = expected_revenue + cost_savings + productivity_gains
    monthly_cost = solution.estimated_cost.monthly
    initial = solution.estimated_cost.initial

    monthly_roi = annual_benefit / 12 - monthly_cost
    annual_roi = annual_benefit - monthly_cost * 12

    payback: Optional[float] = None
    if monthly_roi > 0:
        payback = round(initial / monthly_roi, 1)

    npv = -initial + sum(annual_roi / (1 + DISCOUNT_RATE) ** year for year in range(1, PROJECTION_YEARS + 1))

    return RoiProjection(
        solution_id=solution.id,
        annual_benefit=annual_benefit,
        monthly_roi=round(monthly_roi, 2),
        annual_roi=round(annual_roi, 2),
        payback_months=payback,
        net_present_value=round(npv, 2),
        three_year_net_return=round(annual_roi * PROJECTION_YEARS - initial, 2),
    )
