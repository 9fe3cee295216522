"""Retry with exponential backoff for async provider calls.

Only transient, typed failures are retried (see `errors.RETRYABLE_KINDS`).
Credential, request and structural errors are re-raised on the first attempt
so the caller can escalate or surface them. The final error always reaches
the caller unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from ..config import RetrySettings
from .errors import ErrorKind, GenerationError, is_retryable

logger = logging.getLogger(__name__)

T = TypeVar("T")

OnRetry = Callable[[int, BaseException], None]
Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryOptions:
    max_attempts: int = 3
    initial_delay: float = 1.0   # seconds
    max_delay: float = 10.0      # seconds
    backoff_factor: float = 2.0
    on_retry: Optional[OnRetry] = None

    @classmethod
    def from_settings(cls, settings: RetrySettings, on_retry: Optional[OnRetry] = None) -> "RetryOptions":
        return cls(
            max_attempts=settings.max_attempts,
            initial_delay=settings.initial_delay,
            max_delay=settings.max_delay,
            backoff_factor=settings.backoff_factor,
            on_retry=on_retry,
        )

    def delay_for(self, attempt: int) -> float:
        """Backoff before the retry that follows *attempt* (1-based)."""
        return min(self.initial_delay * self.backoff_factor ** (attempt - 1), self.max_delay)


@dataclass
class RetryState:
    attempt: int = 1
    last_error: Optional[BaseException] = None
    next_delay: float = 0.0


def remaining_time(deadline: Optional[float]) -> Optional[float]:
    """Seconds left until a `time.monotonic()` deadline, or None when unbounded."""
    if deadline is None:
        return None
    return deadline - time.monotonic()


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    options: Optional[RetryOptions] = None,
    *,
    deadline: Optional[float] = None,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Run *operation* until it succeeds, fails permanently, or attempts run out.

    Parameters
    ----------
    operation : callable
        Zero-argument coroutine factory. Called once per attempt.
    options : RetryOptions
        Backoff policy and optional `on_retry(attempt, error)` observer.
    deadline : float, optional
        Absolute `time.monotonic()` value. No attempt starts and no backoff
        is scheduled past it; a `DEADLINE_EXCEEDED` error is raised instead.
    sleep : callable
        Awaitable used for the backoff wait (injected by tests).
    """
    opts = options or RetryOptions()
    state = RetryState()

    while True:
        left = remaining_time(deadline)
        if left is not None and left <= 0:
            raise GenerationError(
                ErrorKind.DEADLINE_EXCEEDED,
                f"Deadline reached before attempt {state.attempt}",
            ) from state.last_error

        try:
            return await operation()
        except Exception as exc:
            state.last_error = exc

            if not is_retryable(exc):
                raise

            if state.attempt >= opts.max_attempts:
                logger.warning("[RETRY] Giving up after %d attempt(s): %r", state.attempt, exc)
                raise

            state.next_delay = opts.delay_for(state.attempt)
            left = remaining_time(deadline)
            if left is not None and state.next_delay >= left:
                raise GenerationError(
                    ErrorKind.DEADLINE_EXCEEDED,
                    f"Deadline leaves no room for retry after attempt {state.attempt}",
                ) from exc

            logger.warning(
                "[RETRY] Attempt %d/%d failed (%s) — retrying in %.2fs",
                state.attempt,
                opts.max_attempts,
                getattr(getattr(exc, "kind", None), "value", type(exc).__name__),
                state.next_delay,
            )
            if opts.on_retry is not None:
                opts.on_retry(state.attempt, exc)

            await sleep(state.next_delay)
            state.attempt += 1
