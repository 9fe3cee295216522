"""Trend Analyzer — AI business-impact analysis for a single trend.

Strategy:
  1. Validate title / summary, normalize category
  2. Build the analysis prompt
  3. One model tier through the shared retry policy
  4. Coerce into TrendAnalysis
  5. Fail loudly — NO synthetic fallback. A fabricated impact score is
     worse for this call site than an explicit, retryable error.
"""

from __future__ import annotations

from typing import Optional

from ...constants import DEFAULT_TREND_CATEGORY, TREND_CATEGORIES
from ...services.coercion import CoercedResult
from ...services.errors import ErrorKind, GenerationError
from ...services.fallback import FallbackTier
from ...services.generation_service import (
    GenerationConstraints,
    GenerationKind,
    GenerationRequest,
    GenerationService,
    PromptPair,
)
from .prompts import SYSTEM_PROMPT, build_analysis_prompt
from .schema import TREND_ANALYSIS_SCHEMA, TrendAnalysis


class TrendAnalyzer:
    def __init__(self, service: GenerationService) -> None:
        self.service = service

    async def analyze(
        self,
        title: str,
        summary: str,
        category: str = DEFAULT_TREND_CATEGORY,
        *,
        deadline: Optional[float] = None,
    ) -> CoercedResult[TrendAnalysis]:
        """Analyze one trend.

        Raises
        ------
        GenerationError
            Any provider or coercion failure, unchanged.
        """
        if not title or not title.strip() or not summary or not summary.strip():
            raise GenerationError(ErrorKind.INVALID_REQUEST, "Trend title and summary are required")

        normalized = (category or "").strip().lower()
        if normalized not in TREND_CATEGORIES:
            normalized = DEFAULT_TREND_CATEGORY

        print(f"🔍 [TRENDS] Analyzing trend={title!r} category={normalized}")

        tuning = self.service.settings.trend_analysis
        request = GenerationRequest(
            kind=GenerationKind.TREND_ANALYSIS,
            prompt_context={"title": title, "summary": summary, "category": normalized},
            constraints=GenerationConstraints(temperature=tuning.temperature, max_tokens=tuning.max_tokens),
            deadline=deadline,
        )
        prompt = PromptPair(
            system=SYSTEM_PROMPT,
            user=build_analysis_prompt(title=title, summary=summary, category=normalized),
        )

        async def _primary() -> CoercedResult:
            return await self.service.attempt(request, prompt, TREND_ANALYSIS_SCHEMA)

        cascade = await self.service.run_cascade("trend_analysis", [(FallbackTier.PRIMARY, _primary)])
        result: CoercedResult[TrendAnalysis] = cascade.coerced

        print(f"✅ [TRENDS] Analysis complete — impact={result.value.impact_score} degraded={result.degraded}")
        return result
