"""Solution Generator — build / buy / partner options for one business need.

Strategy:
  1. PRIMARY    — full company context + preferences
  2. SIMPLIFIED — need, industry and size only
  3. SYNTHETIC  — deterministic rules (see rules.py), no network

The only call site with a terminal synthetic tier: a plausible solution set
is more useful here than an error page. Whatever tier serves the result, the
caller gets exactly one solution per approach.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional

from ...constants import SOLUTION_APPROACHES
from ...schemas.company_schema import CompanyContext
from ...services.coercion import CoercedResult
from ...services.fallback import FallbackTier
from ...services.generation_service import (
    GenerationConstraints,
    GenerationKind,
    GenerationRequest,
    GenerationService,
    PromptPair,
)
from .prompts import SYSTEM_PROMPT, build_simplified_solutions_prompt, build_solutions_prompt
from .rules import synthesize_solutions
from .schema import SOLUTION_SCHEMA, NeedSummary, Solution, SolutionPreferences

logger = logging.getLogger(__name__)


@dataclass
class SolutionSet:
    solutions: List[Solution]
    tier: FallbackTier
    degraded: bool


def complete_solution_set(
    produced: List[Solution],
    synthetic: List[Solution],
) -> tuple[List[Solution], bool]:
    """Keep the first solution per approach, fill gaps from *synthetic*.

    Returns the completed list (model order, then filled approaches in
    build / buy / partner order) and whether any gap was filled.
    """
    seen = set()
    kept: List[Solution] = []
    for solution in produced:
        if solution.approach in seen:
            logger.info("[SOLUTIONS] Dropping duplicate %s solution %r", solution.approach, solution.title)
            continue
        seen.add(solution.approach)
        kept.append(solution)

    filled = False
    by_approach = {s.approach: s for s in synthetic}
    for approach in SOLUTION_APPROACHES:
        if approach not in seen:
            kept.append(by_approach[approach])
            filled = True
    return kept, filled


class SolutionGenerator:
    def __init__(self, service: GenerationService) -> None:
        self.service = service

    async def generate(
        self,
        need: NeedSummary,
        company: CompanyContext,
        preferences: Optional[SolutionPreferences] = None,
        *,
        deadline: Optional[float] = None,
    ) -> SolutionSet:
        print("============================================================")
        print(f"🧩 [SOLUTIONS] Solution generation STARTED — need={need.title!r}")
        print(f"🧩 [SOLUTIONS] Company: {company.name} ({company.industry}, {company.size})")
        print("============================================================")

        tuning = self.service.settings.solutions
        constraints = GenerationConstraints(
            max_items=len(SOLUTION_APPROACHES) * 2,
            temperature=tuning.temperature,
            max_tokens=tuning.max_tokens,
        )
        context = {"need": need, "company": company, "preferences": preferences}
        request = GenerationRequest(
            kind=GenerationKind.SOLUTION_LIST,
            prompt_context=context,
            constraints=constraints,
            deadline=deadline,
        )

        primary_prompt = PromptPair(SYSTEM_PROMPT, build_solutions_prompt(need, company, preferences))
        simplified_prompt = PromptPair(SYSTEM_PROMPT, build_simplified_solutions_prompt(need, company))

        async def _primary() -> CoercedResult:
            return await self.service.attempt(request, primary_prompt, SOLUTION_SCHEMA)

        async def _simplified() -> CoercedResult:
            return await self.service.attempt(request, simplified_prompt, SOLUTION_SCHEMA)

        def _synthetic() -> List[Solution]:
            return synthesize_solutions(need, company, preferences)

        cascade = await self.service.run_cascade(
            "solutions",
            [(FallbackTier.PRIMARY, _primary), (FallbackTier.SIMPLIFIED, _simplified)],
            synthesize=_synthetic,
        )

        if cascade.tier is FallbackTier.SYNTHETIC:
            print(f"⚠️  [SOLUTIONS] Serving synthetic solutions after {len(cascade.errors)} failed tier(s)")
            return SolutionSet(solutions=cascade.value, tier=cascade.tier, degraded=True)

        solutions, filled = complete_solution_set(cascade.value, _synthetic())
        if filled:
            print("⚠️  [SOLUTIONS] Model omitted an approach — filled from synthetic rules")

        solutions = [
            s if s.id else s.model_copy(update={"id": f"solution_{uuid.uuid4().hex[:12]}", "need_id": need.id})
            for s in solutions
        ]

        degraded = cascade.degraded or filled
        print(f"✅ [SOLUTIONS] {len(solutions)} solution(s) via {cascade.tier.label} tier — degraded={degraded}")
        return SolutionSet(solutions=solutions, tier=cascade.tier, degraded=degraded)
