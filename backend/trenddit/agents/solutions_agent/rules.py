"""Synthetic solution rules — deterministic, no LLM, no randomness.

Terminal tier of the solution cascade. Produces one build, one buy and one
partner solution from the need text and company profile alone. Same
inputs always give the same three solutions, ids included.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from ...constants import (
    COMPANY_SIZE_COST_MULTIPLIER,
    DEFAULT_INDUSTRY_MULTIPLIER,
    DEFAULT_SIZE_MULTIPLIER,
    INDUSTRY_COST_MULTIPLIER,
    MATCH_SCORE_MAX,
    MATCH_SCORE_MIN,
    SOLUTION_APPROACHES,
)
from ...schemas.company_schema import CompanyContext
from .schema import EstimatedCost, ImplementationTime, NeedSummary, Roi, Solution, SolutionPreferences

# Longer rollouts for teams with less in-house tooling.
MATURITY_TIME_FACTOR: Dict[str, float] = {"low": 1.3, "medium": 1.0, "high": 0.8}

PREFERENCE_MATCH_BONUS = 0.05

_AI_RE = re.compile(r"\bai\b")


@dataclass(frozen=True)
class NeedSignals:
    """Keyword signals detected in the need text."""

    ai_coding: bool
    automation: bool
    customer_service: bool


def detect_signals(need: NeedSummary) -> NeedSignals:
    text = f"{need.title} {need.description}".lower()
    return NeedSignals(
        ai_coding=bool(_AI_RE.search(text)) and ("coding" in text or "development" in text),
        automation="automat" in text or "efficiency" in text,
        customer_service="customer" in text or "service" in text,
    )


# ── Scaling helpers ───────────────────────────────────────────────────


def _normalize(value: Optional[str]) -> str:
    return (value or "").strip().lower().replace(" ", "-").replace("_", "-")


def size_multiplier(size: str) -> float:
    normalized = _normalize(size)
    if normalized in ("small", "medium", "smb", "sme", "mid-size", "midsize"):
        normalized = "small-medium"
    elif normalized in ("enterprise",):
        normalized = "large"
    return COMPANY_SIZE_COST_MULTIPLIER.get(normalized, DEFAULT_SIZE_MULTIPLIER)


def industry_multiplier(industry: str) -> float:
    return INDUSTRY_COST_MULTIPLIER.get(_normalize(industry), DEFAULT_INDUSTRY_MULTIPLIER)


def _scaled_cost(initial: float, monthly: float, factor: float) -> EstimatedCost:
    scaled_initial = round(initial * factor / 1000) * 1000
    scaled_monthly = round(monthly * factor / 100) * 100
    return EstimatedCost(initial=scaled_initial, monthly=scaled_monthly, annual=scaled_monthly * 12)


def _timeline(lo: int, hi: int, maturity: str) -> ImplementationTime:
    factor = MATURITY_TIME_FACTOR.get(maturity, 1.0)
    t_min = max(1, round(lo * factor))
    t_max = max(t_min, round(hi * factor))
    return ImplementationTime(min=t_min, max=t_max, unit="months")


def _match(base: float, approach: str, preferences: Optional[SolutionPreferences]) -> float:
    score = base
    if preferences is not None and preferences.preferred_approach == approach:
        score += PREFERENCE_MATCH_BONUS
    return round(min(max(score, MATCH_SCORE_MIN), MATCH_SCORE_MAX), 2)


def synthetic_solution_id(need: NeedSummary, approach: str) -> str:
    return f"solution_{need.id or 'adhoc'}_{approach}"


# ── Per-approach builders ─────────────────────────────────────────────


def _build_solution(
    need: NeedSummary,
    company: CompanyContext,
    signals: NeedSignals,
    factor: float,
    preferences: Optional[SolutionPreferences],
) -> Solution:
    ai = signals.ai_coding
    if ai:
        title = "Custom AI Coding Assistant Development"
        description = (
            f"Develop a bespoke AI coding assistant tailored to {company.name}'s development "
            "environments and workflows, with deep integration into existing tools."
        )
    elif signals.automation:
        title = "In-House Automation Platform"
        description = (
            f"Build an automation platform with your internal team, customized for {company.name}'s "
            f"processes around \"{need.title}\"."
        )
    else:
        title = "Custom Solution Development"
        description = (
            "Build a tailored solution using your internal team with modern frameworks and cloud "
            f"infrastructure, customized for {company.name}'s specific requirements."
        )

    return Solution(
        id=synthetic_solution_id(need, "build"),
        need_id=need.id,
        approach="build",
        title=title,
        description=description,
        category="automation" if ai or signals.automation else "process_optimization",
        estimated_cost=_scaled_cost(150000 if ai else 120000, 12000 if ai else 8000, factor),
        implementation_time=_timeline(8 if ai else 6, 15 if ai else 12, company.tech_maturity),
        roi=Roi(
            break_even_months=20 if ai else 18,
            three_year_return=round((850000 if ai else 650000) * factor, -3),
            confidence_score=0.70,
        ),
        risks=[
            "Technical complexity and development challenges",
            "Talent recruitment and retention difficulties",
            "Longer time to market compared to alternatives",
            "Ongoing maintenance and update responsibilities",
        ],
        benefits=[
            "Full control and customization capabilities",
            "Intellectual property ownership",
            "No vendor dependencies or lock-in",
            "Architecture designed around company processes",
        ],
        requirements=[
            "Skilled development team (4-6 engineers)",
            "Cloud infrastructure setup and management",
            "DevOps and deployment pipeline",
            "Ongoing maintenance and support team",
        ],
        alternatives=(
            ["GitHub Copilot Enterprise", "Tabnine Pro", "Amazon CodeWhisperer"]
            if ai
            else ["Low-code platforms", "Open source frameworks", "Cloud native solutions"]
        ),
        match_score=_match(0.82 if company.tech_maturity == "high" else 0.70, "build", preferences),
    )


def _buy_solution(
    need: NeedSummary,
    company: CompanyContext,
    signals: NeedSignals,
    factor: float,
    preferences: Optional[SolutionPreferences],
) -> Solution:
    ai = signals.ai_coding
    if ai:
        title, category, vendor = "Commercial AI Coding Assistant", "automation", "GitHub"
        alternatives = ["GitHub Copilot Enterprise", "Tabnine Pro", "Replit Ghostwriter"]
    elif signals.customer_service:
        title, category, vendor = "Enterprise Customer Service Platform", "customer_experience", "Salesforce"
        alternatives = ["HubSpot", "Zendesk", "ServiceNow"]
    else:
        title, category, vendor = "Enterprise Software License", "process_optimization", "Microsoft"
        alternatives = ["ServiceNow", "SAP", "Oracle"]

    return Solution(
        id=synthetic_solution_id(need, "buy"),
        need_id=need.id,
        approach="buy",
        title=title,
        description=(
            "Deploy a proven enterprise product with comprehensive features and vendor support, "
            f"designed for rapid implementation in {company.industry} organizations."
        ),
        category=category,
        vendor=vendor,
        estimated_cost=_scaled_cost(75000 if ai else 85000, 18000 if ai else 15000, factor),
        implementation_time=_timeline(2, 5, company.tech_maturity),
        roi=Roi(
            break_even_months=14 if ai else 16,
            three_year_return=round((720000 if ai else 580000) * factor, -3),
            confidence_score=0.85,
        ),
        risks=[
            "Vendor lock-in and dependency",
            "Limited customization options",
            "Ongoing subscription costs",
            "Potential integration challenges",
        ],
        benefits=[
            "Rapid deployment and time-to-value",
            "Comprehensive vendor support included",
            "Regular updates and feature improvements",
            "Lower initial technical risk",
        ],
        requirements=[
            "Technical integration team (2-3 people)",
            "User training and change management",
            "Data migration and setup",
            "Ongoing license management",
        ],
        alternatives=alternatives,
        match_score=_match(0.88, "buy", preferences),
    )


def _partner_solution(
    need: NeedSummary,
    company: CompanyContext,
    signals: NeedSignals,
    factor: float,
    preferences: Optional[SolutionPreferences],
) -> Solution:
    ai = signals.ai_coding
    return Solution(
        id=synthetic_solution_id(need, "partner"),
        need_id=need.id,
        approach="partner",
        title="AI Development Partnership" if ai else "Strategic Technology Partnership",
        description=(
            "Partner with a specialized technology consultancy for solution design, implementation "
            f"and knowledge transfer, combining {company.name}'s domain expertise with theirs."
        ),
        category="automation" if ai else "process_optimization",
        vendor="AI Innovations Inc." if ai else "Accenture Technology",
        estimated_cost=_scaled_cost(120000 if ai else 100000, 25000 if ai else 20000, factor),
        implementation_time=_timeline(4, 8, company.tech_maturity),
        roi=Roi(
            break_even_months=16 if ai else 18,
            three_year_return=round((680000 if ai else 550000) * factor, -3),
            confidence_score=0.75,
        ),
        risks=[
            "Dependency on partner expertise and availability",
            "Knowledge transfer challenges",
            "Higher costs than a pure buy approach",
            "Potential intellectual property complications",
        ],
        benefits=[
            "Expert guidance and proven methodologies",
            "Accelerated capability building",
            "Risk shared with the partner",
            "Flexible engagement model",
        ],
        requirements=[
            "Partnership agreement and governance",
            "Internal team collaboration and coordination",
            "Knowledge transfer and training program",
            "Project management and oversight",
        ],
        alternatives=(
            ["McKinsey QuantumBlack", "BCG Gamma", "Deloitte AI Institute"]
            if ai
            else ["IBM Consulting", "PwC Technology", "KPMG Digital"]
        ),
        match_score=_match(0.78, "partner", preferences),
    )


_BUILDERS = {
    "build": _build_solution,
    "buy": _buy_solution,
    "partner": _partner_solution,
}


def synthesize_solutions(
    need: NeedSummary,
    company: CompanyContext,
    preferences: Optional[SolutionPreferences] = None,
) -> List[Solution]:
    """Exactly one solution per approach, in build / buy / partner order."""
    signals = detect_signals(need)
    factor = size_multiplier(company.size) * industry_multiplier(company.industry)
    return [_BUILDERS[approach](need, company, signals, factor, preferences) for approach in SOLUTION_APPROACHES]
