"""Generation service — the one object generators talk to.

Constructed once per process with an injected `CompletionClient`, retry
policy and base `ModelConfig`. Each call runs the chain

    prompt → with_retry(CompletionClient.complete) → coerce(schema)

and cascades wrap one such chain per tier. No state is shared across
requests except the client handle and the tier counters below.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ..config import GenerationSettings, ModelConfig
from .coercion import CoercedResult, ObjectSchema, coerce
from .completion_client import CompletionClient
from .fallback import CascadeResult, FallbackCascade, FallbackTier, Synthesizer, TierAttempt, TierTransition
from .retry import RetryOptions, Sleep, with_retry

logger = logging.getLogger(__name__)


class GenerationKind(str, Enum):
    TREND_ANALYSIS = "trend_analysis"
    NEED_LIST = "need_list"
    SOLUTION_LIST = "solution_list"


@dataclass(frozen=True)
class GenerationConstraints:
    max_items: Optional[int] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


@dataclass(frozen=True)
class GenerationRequest:
    """Immutable per-call request. Owned by the calling generator."""

    kind: GenerationKind
    prompt_context: Mapping[str, Any]
    constraints: GenerationConstraints = GenerationConstraints()
    deadline: Optional[float] = None   # time.monotonic() value


@dataclass(frozen=True)
class PromptPair:
    system: str
    user: str


@dataclass
class _Stats:
    tiers_served: Counter = field(default_factory=Counter)
    transitions: Counter = field(default_factory=Counter)
    failures: Counter = field(default_factory=Counter)


class GenerationService:
    def __init__(
        self,
        client: CompletionClient,
        retry_options: RetryOptions,
        model_config: ModelConfig,
        *,
        settings: Optional[GenerationSettings] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.client = client
        self.retry_options = retry_options
        self.model_config = model_config
        self.settings = settings or GenerationSettings(model=model_config)
        self._sleep = sleep
        self._stats = _Stats()

    @classmethod
    def from_settings(cls, settings: GenerationSettings) -> "GenerationService":
        client = CompletionClient(settings.provider)
        return cls(
            client,
            RetryOptions.from_settings(settings.retry),
            settings.model,
            settings=settings,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    # ── Deadlines ─────────────────────────────────────────────

    def new_deadline(self, seconds: Optional[float] = None) -> float:
        return time.monotonic() + (seconds if seconds is not None else self.settings.request_deadline)

    # ── Single chain ──────────────────────────────────────────

    def model_config_for(self, request: GenerationRequest) -> ModelConfig:
        c = request.constraints
        return self.model_config.with_overrides(temperature=c.temperature, max_tokens=c.max_tokens)

    async def attempt(
        self,
        request: GenerationRequest,
        prompt: PromptPair,
        schema: ObjectSchema,
    ) -> CoercedResult:
        """One tier: provider call under the retry policy, then coercion.

        Coercion errors are raised after the retry loop on purpose: a
        malformed document is not retried with the identical prompt.
        """
        model_config = self.model_config_for(request)

        async def _call() -> str:
            return await self.client.complete(
                prompt.system,
                prompt.user,
                model_config,
                deadline=request.deadline,
            )

        raw_text = await with_retry(
            _call,
            self.retry_options,
            deadline=request.deadline,
            sleep=self._sleep,
        )
        return coerce(raw_text, schema, max_items=request.constraints.max_items)

    # ── Cascades ──────────────────────────────────────────────

    def _on_tier_change(self, transition: TierTransition) -> None:
        key = f"{transition.cascade}:{transition.from_tier.label}->"
        key += transition.to_tier.label if transition.to_tier else "failed"
        self._stats.transitions[key] += 1
        if transition.to_tier is None:
            self._stats.failures[f"{transition.cascade}:{transition.error.kind.value}"] += 1

    async def run_cascade(
        self,
        name: str,
        tiers: Sequence[Tuple[FallbackTier, TierAttempt]],
        synthesize: Optional[Synthesizer] = None,
    ) -> CascadeResult:
        cascade = FallbackCascade(name, tiers, synthesize=synthesize, on_tier_change=self._on_tier_change)
        result = await cascade.run()
        self._stats.tiers_served[f"{name}:{result.tier.label}"] += 1
        return result

    def stats(self) -> Dict[str, Dict[str, int]]:
        return {
            "tiers_served": dict(self._stats.tiers_served),
            "transitions": dict(self._stats.transitions),
            "failures": dict(self._stats.failures),
        }
