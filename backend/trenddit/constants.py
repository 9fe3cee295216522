"""Centralized constants shared across generators, coercion schemas and routes.

This module is the SINGLE SOURCE OF TRUTH for the closed enums the UI renders
(need categories, priorities, solution approaches) and for the documented
defaults substituted when the model returns something outside them.
LOCKED — changes here must be mirrored in the frontend type definitions.
"""

from __future__ import annotations

# ── Trends ──────────────────────────────────────────────────────────────

TREND_CATEGORIES: list[str] = ["consumer", "competition", "economy", "regulation"]
DEFAULT_TREND_CATEGORY: str = "consumer"

# ── Needs ───────────────────────────────────────────────────────────────

NEED_CATEGORIES: list[str] = [
    "automation",
    "data_insights",
    "customer_experience",
    "operational_efficiency",
    "competitive_advantage",
    "risk_management",
    "cost_reduction",
    "innovation",
]
DEFAULT_NEED_CATEGORY: str = "operational_efficiency"

NEED_PRIORITIES: list[str] = ["low", "medium", "high", "critical"]
DEFAULT_NEED_PRIORITY: str = "medium"

# Scores are 1-10 everywhere (impact, effort, urgency, trend impact).
SCORE_MIN: int = 1
SCORE_MAX: int = 10
DEFAULT_SCORE: int = 5

MAX_NEEDS_LIMIT: int = 10
DEFAULT_MAX_NEEDS: int = 5

# ── Solutions ───────────────────────────────────────────────────────────

SOLUTION_APPROACHES: list[str] = ["build", "buy", "partner"]

SOLUTION_CATEGORIES: list[str] = [
    "automation",
    "analytics",
    "customer_experience",
    "infrastructure",
    "security",
    "data_management",
    "collaboration",
    "process_optimization",
]
DEFAULT_SOLUTION_CATEGORY: str = "process_optimization"

TIME_UNITS: list[str] = ["days", "weeks", "months"]
DEFAULT_TIME_UNIT: str = "months"

CONFIDENCE_MIN: float = 0.6
CONFIDENCE_MAX: float = 0.95
MATCH_SCORE_MIN: float = 0.7
MATCH_SCORE_MAX: float = 0.95

# ── Company profile ─────────────────────────────────────────────────────

TECH_MATURITY_LEVELS: list[str] = ["low", "medium", "high"]

# Synthetic-tier cost scaling by company size (1.0 = large enterprise baseline).
COMPANY_SIZE_COST_MULTIPLIER: dict[str, float] = {
    "startup": 0.35,
    "small-medium": 0.65,
    "large": 1.0,
    "government": 1.2,
    "non-profit": 0.5,
}
DEFAULT_SIZE_MULTIPLIER: float = 0.65

# Regulated or asset-heavy industries cost more to change.
INDUSTRY_COST_MULTIPLIER: dict[str, float] = {
    "technology": 1.0,
    "finance": 1.2,
    "retail": 0.9,
    "healthcare": 1.25,
    "manufacturing": 1.05,
    "energy": 1.1,
    "education": 0.8,
    "media": 0.9,
    "transportation": 1.0,
    "real-estate": 0.9,
}
DEFAULT_INDUSTRY_MULTIPLIER: float = 1.0
