"""Prompt templates for trend analysis."""

from __future__ import annotations

SYSTEM_PROMPT = """You are a market intelligence analyst advising enterprise leadership on AI and technology trends.

You MUST respond with ONLY a valid JSON object. No markdown, no explanations,
no comments, no trailing text.

Be specific and practical. Do not invent statistics or sources."""


def build_analysis_prompt(*, title: str, summary: str, category: str) -> str:
    return f"""Analyze the business impact of this trend for a typical enterprise.

=== TREND ===
- Title: {title}
- Category: {category}
- Summary: {summary}

=== REQUIRED OUTPUT ===
Return ONLY this exact JSON structure. No other text.
{{
  "businessImplications": "<2-3 sentences on what this means for businesses>",
  "technicalRequirements": "<key capabilities, data and systems needed>",
  "implementationTimeline": "<realistic adoption timeline, e.g. 6-12 months>",
  "riskFactors": ["<specific risk 1>", "<specific risk 2>", "<specific risk 3>"],
  "impactScore": <integer 1-10>
}}"""
