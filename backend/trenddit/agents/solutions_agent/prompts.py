"""Prompt templates for solution generation.

The primary prompt carries the full company profile, challenges, goals and
preferences. The simplified prompt keeps only the need and the two facts
that drive cost (industry, size), so a shorter context has a better chance
when the full one fails.
"""

from __future__ import annotations

from typing import Optional

from ...schemas.company_schema import CompanyContext
from .schema import NeedSummary, SolutionPreferences

SYSTEM_PROMPT = (
    "You are an expert enterprise solution architect with current knowledge of technology "
    "vendors, market rates, and implementation approaches. Always return valid JSON with "
    "realistic, actionable solutions."
)

_SOLUTION_SHAPE = """{
  "solutions": [
    {
      "approach": "build" | "buy" | "partner",
      "title": "string",
      "description": "string",
      "category": "automation" | "analytics" | "customer_experience" | "infrastructure" | "security" | "data_management" | "collaboration" | "process_optimization",
      "vendor": "string (omit for build)",
      "estimatedCost": {"initial": 0, "monthly": 0, "annual": 0},
      "implementationTime": {"min": 0, "max": 0, "unit": "months"},
      "roi": {"breakEvenMonths": 0, "threeYearReturn": 0, "confidenceScore": 0.6-0.95},
      "risks": ["string"],
      "benefits": ["string"],
      "requirements": ["string"],
      "alternatives": ["string"],
      "matchScore": 0.7-0.95
    }
  ]
}"""


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _preferences_block(preferences: Optional[SolutionPreferences]) -> str:
    if preferences is None:
        return ""
    lines = []
    if preferences.preferred_approach:
        lines.append(f"- Preferred approach: {preferences.preferred_approach}")
    if preferences.max_budget is not None:
        lines.append(f"- Maximum initial budget: ${preferences.max_budget:,.0f}")
    if preferences.max_time_months is not None:
        lines.append(f"- Maximum implementation time: {preferences.max_time_months:g} months")
    if preferences.risk_tolerance:
        lines.append(f"- Risk tolerance: {preferences.risk_tolerance}")
    if not lines:
        return ""
    return "\nCLIENT PREFERENCES:\n" + "\n".join(lines) + "\n"


def build_solutions_prompt(
    need: NeedSummary,
    company: CompanyContext,
    preferences: Optional[SolutionPreferences] = None,
) -> str:
    profile = [
        f"- Company: {company.name}",
        f"- Industry: {company.industry}",
        f"- Size: {company.size}",
        f"- Technology Maturity: {company.tech_maturity}",
    ]
    if company.budget:
        profile.append(f"- Budget Range: {company.budget}")

    sections = ["COMPANY PROFILE:\n" + "\n".join(profile)]
    if company.current_challenges:
        sections.append("CURRENT BUSINESS CHALLENGES:\n" + _bullets(company.current_challenges))
    if company.primary_goals:
        sections.append("PRIMARY BUSINESS GOALS:\n" + _bullets(company.primary_goals))
    sections.append(f"BUSINESS NEED TO SOLVE:\n- Need: {need.title}\n- Details: {need.description or 'Not specified'}")
    if company.trend_context:
        sections.append(f"RELATED TREND CONTEXT:\n{company.trend_context}")

    context = "\n\n".join(sections)

    return f"""Generate 3 specific, actionable solutions for this business need.

{context}
{_preferences_block(preferences)}
SOLUTION REQUIREMENTS:
Generate exactly 3 solutions using these approaches:
1. BUILD - Custom development with internal/contract teams
2. BUY - Purchase existing software/platform solutions
3. PARTNER - Engage consulting firms or technology partners

For each solution, provide:
- Realistic costs for the {company.industry} industry and a {company.size} company:
  initial investment, monthly ongoing cost, annual total cost of ownership
- Implementation timeline appropriate for {company.tech_maturity} tech maturity (min/max)
- ROI projection: break-even months, 3-year return, confidence score
- Specific risks, benefits, requirements and named alternatives
- A match score reflecting fit with this company

Return ONLY this JSON structure:
{_SOLUTION_SHAPE}"""


def build_simplified_solutions_prompt(need: NeedSummary, company: CompanyContext) -> str:
    return f"""Propose one BUILD, one BUY and one PARTNER solution for this business need.

Need: {need.title}
Details: {need.description or 'Not specified'}
Industry: {company.industry}
Company size: {company.size}

Return ONLY this JSON structure:
{_SOLUTION_SHAPE}"""
