"""Deterministic rules — synthetic solutions, prioritization, comparison, ROI."""

import pytest

from trenddit.agents.needs_agent.rules import prioritize_needs
from trenddit.agents.needs_agent.schema import Need
from trenddit.agents.solutions_agent.analysis import calculate_roi, compare_solutions, comparison_weights
from trenddit.agents.solutions_agent.rules import (
    detect_signals,
    industry_multiplier,
    size_multiplier,
    synthesize_solutions,
)
from trenddit.agents.solutions_agent.schema import NeedSummary, SolutionPreferences
from trenddit.schemas.company_schema import CompanyContext

NEED = NeedSummary(id="need_1", title="Automate customer service triage", description="")


def _company(size="large", industry="technology", maturity="medium"):
    return CompanyContext(name="Acme", industry=industry, size=size, tech_maturity=maturity)


# ---------------------------------------------------------------------------
# Synthetic tier
# ---------------------------------------------------------------------------

def test_synthetic_solutions_cover_each_approach_once():
    solutions = synthesize_solutions(NEED, _company())

    assert [s.approach for s in solutions] == ["build", "buy", "partner"]
    for s in solutions:
        assert 0.7 <= s.match_score <= 0.95
        assert 0.6 <= s.roi.confidence_score <= 0.95
        assert s.estimated_cost.annual == s.estimated_cost.monthly * 12
        assert s.implementation_time.min <= s.implementation_time.max
        assert s.risks and s.benefits and s.requirements and s.alternatives


def test_synthetic_solutions_are_deterministic():
    assert synthesize_solutions(NEED, _company()) == synthesize_solutions(NEED, _company())


def test_large_technology_baseline_costs():
    build, buy, partner = synthesize_solutions(NEED, _company())

    assert (build.estimated_cost.initial, build.estimated_cost.monthly) == (120000, 8000)
    assert (buy.estimated_cost.initial, buy.estimated_cost.monthly) == (85000, 15000)
    assert (partner.estimated_cost.initial, partner.estimated_cost.monthly) == (100000, 20000)


def test_costs_scale_with_size_and_industry():
    startup = synthesize_solutions(NEED, _company(size="startup"))
    healthcare = synthesize_solutions(NEED, _company(industry="Healthcare"))

    assert startup[0].estimated_cost.initial == 42000
    assert healthcare[0].estimated_cost.initial == 150000


@pytest.mark.parametrize(
    "size, expected",
    [("startup", 0.35), ("Small-Medium", 0.65), ("small medium", 0.65), ("enterprise", 1.0), ("unknown", 0.65)],
)
def test_size_multiplier(size, expected):
    assert size_multiplier(size) == expected


def test_unknown_industry_uses_baseline():
    assert industry_multiplier("aerospace") == 1.0


def test_keyword_signals_shape_titles():
    signals = detect_signals(NeedSummary(title="AI coding assistant for development teams"))
    assert signals.ai_coding

    build, buy, _ = synthesize_solutions(NeedSummary(title="AI coding assistant"), _company())
    assert build.title == "Custom AI Coding Assistant Development"
    assert buy.category == "automation"

    _, cs_buy, _ = synthesize_solutions(NEED, _company())
    assert cs_buy.title == "Enterprise Customer Service Platform"
    assert cs_buy.category == "customer_experience"


def test_maturity_adjusts_timeline_and_build_fit():
    low = synthesize_solutions(NEED, _company(maturity="low"))
    high = synthesize_solutions(NEED, _company(maturity="high"))

    assert low[0].implementation_time.max > high[0].implementation_time.max
    assert high[0].match_score == 0.82
    assert low[0].match_score == 0.70


def test_preferred_approach_nudges_match_score_within_bounds():
    preferred = synthesize_solutions(NEED, _company(), SolutionPreferences(preferred_approach="buy"))
    plain = synthesize_solutions(NEED, _company())

    assert preferred[1].match_score == 0.93
    assert plain[1].match_score == 0.88
    assert preferred[0].match_score == plain[0].match_score


def test_synthetic_ids_without_need_id():
    solutions = synthesize_solutions(NeedSummary(title="Something"), _company())
    assert solutions[0].id == "solution_adhoc_build"


# ---------------------------------------------------------------------------
# Need prioritization
# ---------------------------------------------------------------------------

def _need(title, impact, effort, need_id=None):
    return Need(
        id=need_id,
        title=title,
        description="d",
        category="automation",
        priority="medium",
        impact_score=impact,
        effort_score=effort,
        urgency_score=5,
        stakeholders=["Ops"],
        business_value="v",
        risks=[],
        success_metrics=["m"],
    )


def test_needs_are_ranked_by_weighted_score():
    needs = [_need("hard", 9, 9, "n1"), _need("quick win", 8, 2, "n2"), _need("meh", 3, 3, "n3")]

    result = prioritize_needs(needs)

    assert [item.need.title for item in result.ranked] == ["quick win", "hard", "meh"]
    assert result.ranked[0].priority_score == pytest.approx(8 * 0.6 + 9 * 0.4)
    assert result.matrix["high_impact_low_effort"] == ["n2"]
    assert result.matrix["high_impact_high_effort"] == ["n1"]
    assert result.matrix["low_impact_low_effort"] == ["n3"]
    assert result.matrix["low_impact_high_effort"] == []


def test_prioritization_is_stable_on_ties():
    needs = [_need("a", 5, 5), _need("b", 5, 5)]
    assert [i.need.title for i in prioritize_needs(needs).ranked] == ["a", "b"]


def test_prioritization_rejects_zero_weights():
    with pytest.raises(ValueError):
        prioritize_needs([_need("a", 5, 5)], impact_weight=0, effort_weight=0)


# ---------------------------------------------------------------------------
# Comparison and ROI
# ---------------------------------------------------------------------------

def test_comparison_weights_emphasize_and_renormalize():
    weights = comparison_weights(["cost"])

    assert sum(weights.values()) == pytest.approx(1.0)
    assert weights["cost"] == pytest.approx(0.375 / 1.125)
    assert weights["roi"] == pytest.approx(0.25 / 1.125)


def test_unknown_criterion_is_rejected():
    with pytest.raises(ValueError):
        comparison_weights(["vibes"])


def test_compare_picks_the_highest_scoring_solution():
    solutions = synthesize_solutions(NEED, _company())

    comparison = compare_solutions(solutions, ["time"])

    assert len(comparison.solutions) == 3
    assert all(0.0 <= s.score <= 1.0 for s in comparison.solutions)
    best = max(comparison.solutions, key=lambda s: s.score)
    assert comparison.winner == best.solution_id
    assert comparison.winner_approach == best.approach


def test_compare_requires_solutions():
    with pytest.raises(ValueError):
        compare_solutions([])


def test_roi_projection():
    _, buy, _ = synthesize_solutions(NEED, _company())

    roi = calculate_roi(buy, expected_revenue=300000, cost_savings=0, productivity_gains=0)

    assert roi.annual_benefit == 300000
    assert roi.monthly_roi == pytest.approx(300000 / 12 - 15000)
    assert roi.annual_roi == pytest.approx(300000 - 180000)
    assert roi.payback_months == pytest.approx(85000 / 10000)
    expected_npv = -85000 + sum(120000 / 1.1**y for y in (1, 2, 3))
    assert roi.net_present_value == pytest.approx(expected_npv, abs=0.01)


def test_roi_never_pays_back_when_costs_exceed_benefits():
    _, buy, _ = synthesize_solutions(NEED, _company())

    roi = calculate_roi(buy)

    assert roi.payback_months is None
    assert roi.net_present_value < 0


def test_roi_rejects_negative_inputs():
    _, buy, _ = synthesize_solutions(NEED, _company())
    with pytest.raises(ValueError):
        calculate_roi(buy, expected_revenue=-1)
