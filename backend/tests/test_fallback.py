"""Fallback cascade — forward-only tier transitions and the synthetic guarantee."""

import pytest

from trenddit.services.coercion import CoercedResult
from trenddit.services.errors import ErrorKind, GenerationError
from trenddit.services.fallback import FallbackCascade, FallbackTier


def _ok(value, degraded=False):
    async def attempt():
        return CoercedResult(value=value, degraded=degraded)

    return attempt


def _fail(kind, calls=None):
    async def attempt():
        if calls is not None:
            calls.append(kind)
        raise GenerationError(kind, f"{kind.value} failure")

    return attempt


@pytest.mark.asyncio
async def test_primary_success_is_served_without_transitions():
    transitions = []
    cascade = FallbackCascade(
        "test",
        [(FallbackTier.PRIMARY, _ok("primary")), (FallbackTier.SIMPLIFIED, _ok("simplified"))],
        synthesize=lambda: "synthetic",
        on_tier_change=transitions.append,
    )

    result = await cascade.run()

    assert result.value == "primary"
    assert result.tier is FallbackTier.PRIMARY
    assert not result.degraded
    assert transitions == []


@pytest.mark.asyncio
async def test_malformed_primary_escalates_to_simplified():
    transitions = []
    cascade = FallbackCascade(
        "test",
        [
            (FallbackTier.PRIMARY, _fail(ErrorKind.MALFORMED_RESPONSE)),
            (FallbackTier.SIMPLIFIED, _ok("simplified", degraded=True)),
        ],
        synthesize=lambda: "synthetic",
        on_tier_change=transitions.append,
    )

    result = await cascade.run()

    assert result.value == "simplified"
    assert result.tier is FallbackTier.SIMPLIFIED
    assert result.degraded
    assert [e.kind for e in result.errors] == [ErrorKind.MALFORMED_RESPONSE]
    assert [(t.from_tier, t.to_tier) for t in transitions] == [(FallbackTier.PRIMARY, FallbackTier.SIMPLIFIED)]


@pytest.mark.asyncio
async def test_both_model_tiers_failing_serves_synthetic():
    transitions = []
    cascade = FallbackCascade(
        "test",
        [
            (FallbackTier.PRIMARY, _fail(ErrorKind.EMPTY_RESULT)),
            (FallbackTier.SIMPLIFIED, _fail(ErrorKind.RATE_LIMITED)),
        ],
        synthesize=lambda: "synthetic",
        on_tier_change=transitions.append,
    )

    result = await cascade.run()

    assert result.value == "synthetic"
    assert result.tier is FallbackTier.SYNTHETIC
    assert result.degraded
    assert [t.to_tier for t in transitions] == [FallbackTier.SIMPLIFIED, FallbackTier.SYNTHETIC]
    assert [t.error.kind for t in transitions] == [ErrorKind.EMPTY_RESULT, ErrorKind.RATE_LIMITED]


@pytest.mark.asyncio
@pytest.mark.parametrize("kind", [ErrorKind.API_KEY_MISSING, ErrorKind.DEADLINE_EXCEEDED])
async def test_unfixable_errors_skip_the_simplified_tier(kind):
    simplified_calls = []
    cascade = FallbackCascade(
        "test",
        [
            (FallbackTier.PRIMARY, _fail(kind)),
            (FallbackTier.SIMPLIFIED, _fail(ErrorKind.NETWORK_ERROR, simplified_calls)),
        ],
        synthesize=lambda: "synthetic",
    )

    result = await cascade.run()

    assert result.tier is FallbackTier.SYNTHETIC
    assert simplified_calls == []


@pytest.mark.asyncio
async def test_single_tier_without_synthesizer_propagates_the_error():
    transitions = []
    cascade = FallbackCascade(
        "test",
        [(FallbackTier.PRIMARY, _fail(ErrorKind.API_KEY_MISSING))],
        on_tier_change=transitions.append,
    )

    with pytest.raises(GenerationError) as exc_info:
        await cascade.run()

    assert exc_info.value.kind is ErrorKind.API_KEY_MISSING
    assert len(transitions) == 1
    assert transitions[0].to_tier is None


@pytest.mark.asyncio
async def test_programming_errors_are_not_swallowed():
    async def broken():
        raise TypeError("bug")

    cascade = FallbackCascade("test", [(FallbackTier.PRIMARY, broken)], synthesize=lambda: "synthetic")

    with pytest.raises(TypeError):
        await cascade.run()


@pytest.mark.parametrize(
    "tiers",
    [
        [],
        [(FallbackTier.SIMPLIFIED, None), (FallbackTier.PRIMARY, None)],
        [(FallbackTier.PRIMARY, None), (FallbackTier.PRIMARY, None)],
        [(FallbackTier.SYNTHETIC, None)],
    ],
)
def test_tiers_must_move_forward(tiers):
    with pytest.raises(ValueError):
        FallbackCascade("test", tiers)


def test_tier_ordering():
    assert FallbackTier.PRIMARY < FallbackTier.SIMPLIFIED < FallbackTier.SYNTHETIC
    assert FallbackTier.SYNTHETIC.label == "synthetic"
