"""Prompt template for need generation."""

from __future__ import annotations

from ...schemas.company_schema import CompanyContext
from ...schemas.trend_schema import Trend

SYSTEM_PROMPT = (
    "You are an AI business consultant helping enterprises identify and prioritize "
    "business needs. Always respond with valid JSON only."
)

_OUTPUT_CONTRACT = """Return as JSON object with "needs" array property:
{
  "needs": [
    {
      "title": "string",
      "description": "string",
      "category": "category_value",
      "priority": "priority_value",
      "impactScore": 5,
      "effortScore": 5,
      "urgencyScore": 5,
      "stakeholders": ["role1", "role2"],
      "businessValue": "string",
      "risks": ["risk1", "risk2"],
      "successMetrics": ["metric1", "metric2"]
    }
  ]
}"""


def _join(items: list[str]) -> str:
    return ", ".join(items) if items else "Not specified"


def build_needs_prompt(trend: Trend, company: CompanyContext, max_needs: int) -> str:
    """Full-context prompt: trend detail plus the complete company profile."""
    return f"""Generate {max_needs} specific, actionable business needs for this company based on the given AI trend.

TREND INFORMATION:
Title: {trend.title}
Category: {trend.category}
Summary: {trend.summary}
Impact Score: {trend.impact_score}/10

COMPANY CONTEXT:
Name: {company.name}
Industry: {company.industry}
Size: {company.size}
Tech Maturity: {company.tech_maturity}
Current Challenges: {_join(company.current_challenges)}
Primary Goals: {_join(company.primary_goals)}

Generate {max_needs} specific business needs that:
1. Directly relate to the AI trend
2. Are relevant to the company's industry and size
3. Address their current challenges and goals
4. Are actionable and measurable

For each need, provide:
- title: Clear, specific need statement
- description: Detailed explanation (2-3 sentences)
- category: One of [automation, data_insights, customer_experience, operational_efficiency, competitive_advantage, risk_management, cost_reduction, innovation]
- priority: One of [low, medium, high, critical]
- impactScore: 1-10 (business impact)
- effortScore: 1-10 (implementation effort)
- urgencyScore: 1-10 (time sensitivity)
- stakeholders: List of affected teams/roles
- businessValue: Expected business value (1 sentence)
- risks: 2-3 potential risks if not addressed
- successMetrics: 2-3 measurable outcomes

IMPORTANT: You must respond with valid JSON only. No explanations, no markdown.

{_OUTPUT_CONTRACT}"""
