"""Fallback cascade — Primary → Simplified → Synthetic, forward only.

A cascade is parametrized per call site with the model tiers it may use
(each a zero-argument coroutine factory building its own prompt) and an
optional synthesizer for the terminal tier. The synthesizer must be pure and
network-free; it is the cascade's guarantee of a result.

Call sites without a synthesizer propagate the last tier's error, which is
how the single-tier generators surface failures to their callers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from .coercion import CoercedResult
from .errors import SKIP_TO_TERMINAL_KINDS, GenerationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FallbackTier(IntEnum):
    PRIMARY = 1
    SIMPLIFIED = 2
    SYNTHETIC = 3

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class TierTransition:
    """One forward move of the cascade, reported to the observability hook."""

    cascade: str
    from_tier: FallbackTier
    to_tier: Optional[FallbackTier]   # None = terminal failure
    error: GenerationError


@dataclass
class CascadeResult(Generic[T]):
    value: T
    tier: FallbackTier
    degraded: bool
    errors: List[GenerationError] = field(default_factory=list)
    coerced: Optional[CoercedResult] = None   # repair details from a model tier


TierAttempt = Callable[[], Awaitable[CoercedResult]]
Synthesizer = Callable[[], T]
OnTierChange = Callable[[TierTransition], None]


class FallbackCascade(Generic[T]):
    """Runs model tiers in order, then the synthesizer if one is configured."""

    def __init__(
        self,
        name: str,
        tiers: Sequence[Tuple[FallbackTier, TierAttempt]],
        synthesize: Optional[Synthesizer] = None,
        on_tier_change: Optional[OnTierChange] = None,
    ) -> None:
        ordered = [tier for tier, _ in tiers]
        if not ordered:
            raise ValueError("A cascade needs at least one model tier")
        if ordered != sorted(set(ordered)) or FallbackTier.SYNTHETIC in ordered:
            raise ValueError(f"Model tiers must be distinct, ascending and non-synthetic: {ordered}")
        self.name = name
        self.tiers = list(tiers)
        self.synthesize = synthesize
        self.on_tier_change = on_tier_change

    def _report(self, from_tier: FallbackTier, to_tier: Optional[FallbackTier], error: GenerationError) -> None:
        logger.warning(
            "[CASCADE] %s: %s → %s (%s: %s)",
            self.name,
            from_tier.label,
            to_tier.label if to_tier else "failed",
            error.kind.value,
            error.message,
        )
        if self.on_tier_change is not None:
            self.on_tier_change(TierTransition(self.name, from_tier, to_tier, error))

    def _next_tier(self, index: int, error: GenerationError) -> Optional[FallbackTier]:
        # A missing key or spent deadline fails every model tier alike, so those skip ahead
        if error.kind not in SKIP_TO_TERMINAL_KINDS and index + 1 < len(self.tiers):
            return self.tiers[index + 1][0]
        if self.synthesize is not None:
            return FallbackTier.SYNTHETIC
        return None

    async def run(self) -> CascadeResult[T]:
        errors: List[GenerationError] = []
        index = 0

        while index < len(self.tiers):
            tier, attempt = self.tiers[index]
            try:
                result = await attempt()
            except GenerationError as exc:
                errors.append(exc)
                to_tier = self._next_tier(index, exc)
                self._report(tier, to_tier, exc)
                if to_tier is None:
                    raise
                if to_tier is FallbackTier.SYNTHETIC:
                    break
                index += 1
                continue
            return CascadeResult(
                value=result.value,
                tier=tier,
                degraded=result.degraded,
                errors=errors,
                coerced=result,
            )

        # Only reachable with a synthesizer configured
        logger.info("[CASCADE] %s: serving synthetic result", self.name)
        return CascadeResult(value=self.synthesize(), tier=FallbackTier.SYNTHETIC, degraded=True, errors=errors)
