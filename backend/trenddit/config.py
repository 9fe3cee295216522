"""Generation settings — model, provider, retry policy and user-facing error copy.

All values can be read from the environment with safe defaults via
`GenerationSettings.from_env()`. Only the app factory does that; generators,
the retry wrapper and the completion client receive these objects through
their constructors and never read the environment themselves.

Environment variables:
  LLM_PROVIDER                      — "openai" (default) or "anthropic"
  OPENAI_API_KEY / ANTHROPIC_API_KEY — provider credentials
  LLM_MODEL                         — model id (provider default when unset)
  LLM_TEMPERATURE, LLM_MAX_TOKENS   — base sampling config
  LLM_REQUEST_TIMEOUT               — per-call timeout in seconds (default 40)
  LLM_BASE_URL                      — provider base URL override
  GENERATION_RETRY_*                — MAX_ATTEMPTS, INITIAL_DELAY, MAX_DELAY, BACKOFF_FACTOR
  GENERATION_REQUEST_DEADLINE       — per inbound request budget in seconds (default 90)
"""

from __future__ import annotations

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

_DEFAULT_MODELS = {
    "openai": "gpt-4o",
    "anthropic": "claude-sonnet-4-20250514",
}
_DEFAULT_BASE_URLS = {
    "openai": "https://api.openai.com/v1",
    "anthropic": "https://api.anthropic.com/v1",
}
_API_KEY_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


def _env_float(environ: Mapping[str, str], key: str, default: float) -> float:
    try:
        return float(environ.get(key, str(default)))
    except ValueError:
        return default


def _env_int(environ: Mapping[str, str], key: str, default: int) -> int:
    try:
        return int(environ.get(key, str(default)))
    except ValueError:
        return default


class ModelConfig(BaseModel):
    """Sampling config for one provider call."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model: str = Field(..., min_length=1, description="Provider model id")
    temperature: float = Field(0.7, ge=0.0, le=1.0)
    max_tokens: int = Field(3000, gt=0)

    def with_overrides(
        self,
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> "ModelConfig":
        update = {}
        if temperature is not None:
            update["temperature"] = temperature
        if max_tokens is not None:
            update["max_tokens"] = max_tokens
        if not update:
            return self
        # model_copy skips validation, so re-validate the merged values
        return ModelConfig(**{**self.model_dump(), **update})


class RetrySettings(BaseModel):
    """Exponential backoff policy. Delays are in seconds."""

    max_attempts: int = Field(3, ge=1)
    initial_delay: float = Field(1.0, ge=0.0)
    max_delay: float = Field(10.0, ge=0.0)
    backoff_factor: float = Field(2.0, ge=1.0)


class ProviderSettings(BaseModel):
    provider: Literal["openai", "anthropic"] = "openai"
    api_key: str = Field("", repr=False)
    base_url: str = ""
    request_timeout: float = Field(40.0, gt=0.0)

    def resolved_base_url(self) -> str:
        return (self.base_url or _DEFAULT_BASE_URLS[self.provider]).rstrip("/")


class ErrorMessages(BaseModel):
    """User-facing copy, one line per error family."""

    api_key_missing: str = "The AI provider API key is not configured. Please contact support."
    rate_limit: str = "You've reached the rate limit. Please try again in a few minutes."
    network_error: str = "Unable to connect to the AI service. Please check your internet connection."
    generation_failed: str = (
        "Failed to generate content. Please try again or contact support if the issue persists."
    )
    invalid_request: str = "The request could not be processed. Please review the inputs and try again."
    deadline_exceeded: str = "The AI service took too long to respond. Please try again."


class DomainTuning(BaseModel):
    """Per call-site overrides applied on top of the base ModelConfig."""

    temperature: float = Field(..., ge=0.0, le=1.0)
    max_tokens: int = Field(..., gt=0)


class GenerationSettings(BaseModel):
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    model: ModelConfig = Field(default_factory=lambda: ModelConfig(model=_DEFAULT_MODELS["openai"]))
    retry: RetrySettings = Field(default_factory=RetrySettings)
    messages: ErrorMessages = Field(default_factory=ErrorMessages)
    request_deadline: float = Field(90.0, gt=0.0)

    trend_analysis: DomainTuning = DomainTuning(temperature=0.5, max_tokens=1500)
    needs: DomainTuning = DomainTuning(temperature=0.7, max_tokens=3000)
    solutions: DomainTuning = DomainTuning(temperature=0.3, max_tokens=3000)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GenerationSettings":
        env = os.environ if environ is None else environ

        provider_name = env.get("LLM_PROVIDER", "openai").strip().lower()
        if provider_name not in _DEFAULT_MODELS:
            print(f"⚠️  [CONFIG] Unknown LLM_PROVIDER={provider_name!r} — using openai")
            provider_name = "openai"

        provider = ProviderSettings(
            provider=provider_name,
            api_key=env.get(_API_KEY_VARS[provider_name], "").strip(),
            base_url=env.get("LLM_BASE_URL", "").strip(),
            request_timeout=max(_env_float(env, "LLM_REQUEST_TIMEOUT", 40.0), 1.0),
        )

        temperature = min(max(_env_float(env, "LLM_TEMPERATURE", 0.7), 0.0), 1.0)
        model = ModelConfig(
            model=env.get("LLM_MODEL", "").strip() or _DEFAULT_MODELS[provider_name],
            temperature=temperature,
            max_tokens=max(_env_int(env, "LLM_MAX_TOKENS", 3000), 1),
        )

        retry = RetrySettings(
            max_attempts=max(_env_int(env, "GENERATION_RETRY_MAX_ATTEMPTS", 3), 1),
            initial_delay=max(_env_float(env, "GENERATION_RETRY_INITIAL_DELAY", 1.0), 0.0),
            max_delay=max(_env_float(env, "GENERATION_RETRY_MAX_DELAY", 10.0), 0.0),
            backoff_factor=max(_env_float(env, "GENERATION_RETRY_BACKOFF_FACTOR", 2.0), 1.0),
        )

        return cls(
            provider=provider,
            model=model,
            retry=retry,
            request_deadline=max(_env_float(env, "GENERATION_REQUEST_DEADLINE", 90.0), 1.0),
        )

    def summary(self) -> dict:
        """Settings without secrets — safe to expose on health endpoints."""
        return {
            "provider": self.provider.provider,
            "api_key_configured": bool(self.provider.api_key),
            "model": self.model.model,
            "temperature": self.model.temperature,
            "max_tokens": self.model.max_tokens,
            "request_timeout": self.provider.request_timeout,
            "request_deadline": self.request_deadline,
            "retry": self.retry.model_dump(),
        }
