"""Typed error taxonomy for the generation pipeline.

Every failure that crosses a layer boundary is a `GenerationError` carrying an
`ErrorKind`. Callers branch on the kind (retry, escalate tier, surface to the
user) instead of matching substrings of exception messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from ..config import ErrorMessages


class ErrorKind(str, Enum):
    API_KEY_MISSING = "api_key_missing"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    PROVIDER_EMPTY_RESPONSE = "provider_empty_response"
    PROVIDER_OTHER = "provider_other"
    MALFORMED_RESPONSE = "malformed_response"
    EMPTY_RESULT = "empty_result"
    INVALID_REQUEST = "invalid_request"
    DEADLINE_EXCEEDED = "deadline_exceeded"


# Transient provider-level failures. Everything else is handled one level up.
RETRYABLE_KINDS: frozenset[ErrorKind] = frozenset({
    ErrorKind.RATE_LIMITED,
    ErrorKind.NETWORK_ERROR,
    ErrorKind.PROVIDER_EMPTY_RESPONSE,
    ErrorKind.PROVIDER_OTHER,
})

# A simpler prompt cannot fix these; the cascade goes straight to its terminal tier.
SKIP_TO_TERMINAL_KINDS: frozenset[ErrorKind] = frozenset({
    ErrorKind.API_KEY_MISSING,
    ErrorKind.DEADLINE_EXCEEDED,
})


class GenerationError(Exception):
    """Raised when any stage of the generation pipeline fails."""

    def __init__(self, kind: ErrorKind, message: str, *, detail: Optional[Any] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.detail = detail

    @property
    def retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS

    def user_message(self, messages: ErrorMessages) -> str:
        if self.kind is ErrorKind.API_KEY_MISSING:
            return messages.api_key_missing
        if self.kind is ErrorKind.RATE_LIMITED:
            return messages.rate_limit
        if self.kind is ErrorKind.NETWORK_ERROR:
            return messages.network_error
        if self.kind is ErrorKind.INVALID_REQUEST:
            return messages.invalid_request
        if self.kind is ErrorKind.DEADLINE_EXCEEDED:
            return messages.deadline_exceeded
        return messages.generation_failed

    def __repr__(self) -> str:
        return f"GenerationError(kind={self.kind.value!r}, message={self.message!r})"


def is_retryable(exc: BaseException) -> bool:
    """Only typed transient errors are retried; unknown exceptions propagate."""
    return isinstance(exc, GenerationError) and exc.retryable
