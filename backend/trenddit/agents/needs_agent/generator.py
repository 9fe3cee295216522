"""Need Generator — personalized business needs from a trend + company profile.

Single model tier, NO synthetic fallback: the wizard offers the user a
manual "try again" instead of showing invented needs.
"""

from __future__ import annotations

import uuid
from typing import List, Optional

from ...constants import DEFAULT_MAX_NEEDS, MAX_NEEDS_LIMIT
from ...schemas.company_schema import CompanyContext
from ...schemas.trend_schema import Trend
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
from .prompts import SYSTEM_PROMPT, build_needs_prompt
from .schema import NEED_SCHEMA, Need


class NeedGenerator:
    def __init__(self, service: GenerationService) -> None:
        self.service = service

    async def generate(
        self,
        trend: Trend,
        company: CompanyContext,
        max_needs: int = DEFAULT_MAX_NEEDS,
        *,
        deadline: Optional[float] = None,
    ) -> CoercedResult[List[Need]]:
        """Generate up to *max_needs* needs, in the order the model produced them.

        Raises
        ------
        GenerationError
            Provider failures, MALFORMED_RESPONSE, or EMPTY_RESULT when the
            model yields no usable need.
        """
        if not 1 <= max_needs <= MAX_NEEDS_LIMIT:
            raise GenerationError(
                ErrorKind.INVALID_REQUEST,
                f"max_needs must be between 1 and {MAX_NEEDS_LIMIT}, got {max_needs}",
            )

        print("============================================================")
        print(f"🎯 [NEEDS] Need generation STARTED — trend={trend.id}")
        print(f"🎯 [NEEDS] Company: {company.name} ({company.industry}, {company.size})")
        print("============================================================")

        tuning = self.service.settings.needs
        request = GenerationRequest(
            kind=GenerationKind.NEED_LIST,
            prompt_context={"trend": trend, "company": company},
            constraints=GenerationConstraints(
                max_items=max_needs,
                temperature=tuning.temperature,
                max_tokens=tuning.max_tokens,
            ),
            deadline=deadline,
        )
        prompt = PromptPair(system=SYSTEM_PROMPT, user=build_needs_prompt(trend, company, max_needs))

        async def _primary() -> CoercedResult:
            return await self.service.attempt(request, prompt, NEED_SCHEMA)

        cascade = await self.service.run_cascade("needs", [(FallbackTier.PRIMARY, _primary)])
        result: CoercedResult[List[Need]] = cascade.coerced

        result.value = [
            need.model_copy(update={"id": f"need_{uuid.uuid4().hex[:12]}", "trend_id": trend.id})
            for need in result.value
        ]

        print(f"✅ [NEEDS] Generated {len(result.value)} need(s) — degraded={result.degraded}")
        return result
