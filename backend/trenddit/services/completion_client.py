"""Provider-agnostic completion client — one call in, raw text out.

All generators MUST reach the language model through `CompletionClient`.
This ensures:
  - One provider call per invocation (no batching, no internal retries).
  - JSON output mode is requested wherever the provider supports it.
  - An explicit per-call timeout, clipped to the caller's deadline.
  - Provider failures are translated into `GenerationError` kinds so the
    retry wrapper can classify them without string matching.

Supported providers: OpenAI chat completions and Anthropic messages, both
called over a shared `httpx.AsyncClient`.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx

from ..config import ModelConfig, ProviderSettings
from .errors import ErrorKind, GenerationError
from .retry import remaining_time

logger = logging.getLogger(__name__)

_ANTHROPIC_VERSION = "2023-06-01"

_JSON_ONLY_INSTRUCTION = (
    "Respond with a single valid JSON object only. "
    "No markdown, no code fences, no commentary before or after the JSON."
)

ANALYST_SYSTEM_PROMPT = (
    "You are a senior business and technology analyst. "
    "You return precise, structured analysis as a JSON object."
)

# Status codes the provider uses for requests that will never succeed as sent.
_INVALID_REQUEST_CODES = {400, 404, 422}
_AUTH_CODES = {401, 403}


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------
def classify_provider_error(status_code: int, body: str) -> ErrorKind:
    """Map a non-2xx provider response to an error kind.

    Status wins when it is unambiguous; the body text refines the rest
    (some gateways report auth or throttling with a generic 400/500).
    """
    text = (body or "").lower()

    if status_code in _AUTH_CODES:
        return ErrorKind.API_KEY_MISSING
    if status_code == 429:
        return ErrorKind.RATE_LIMITED
    if "api key" in text or "api_key" in text or "unauthorized" in text:
        return ErrorKind.API_KEY_MISSING
    if "rate limit" in text or "rate_limit" in text:
        return ErrorKind.RATE_LIMITED
    if status_code in _INVALID_REQUEST_CODES:
        return ErrorKind.INVALID_REQUEST
    return ErrorKind.PROVIDER_OTHER


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------
class CompletionClient:
    """Sends a system + user prompt pair to the configured provider."""

    def __init__(
        self,
        settings: ProviderSettings,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.settings = settings
        self.base_url = settings.resolved_base_url()
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout, connect=5.0),
            limits=httpx.Limits(max_keepalive_connections=20, max_connections=50),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    # ── Public API ────────────────────────────────────────────

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        model_config: ModelConfig,
        *,
        json_mode: bool = True,
        deadline: Optional[float] = None,
    ) -> str:
        """Issue one provider call and return the raw response text.

        Raises
        ------
        GenerationError
            With a kind from the provider taxonomy on any failure.
        """
        if not system_prompt or not system_prompt.strip():
            raise GenerationError(ErrorKind.INVALID_REQUEST, "System prompt must not be empty")
        if not user_prompt or not user_prompt.strip():
            raise GenerationError(ErrorKind.INVALID_REQUEST, "User prompt must not be empty")

        api_key = self.settings.api_key.strip()
        if not api_key:
            logger.error("[LLM] API key missing for provider=%s", self.settings.provider)
            raise GenerationError(
                ErrorKind.API_KEY_MISSING,
                f"{self.settings.provider} API key is not configured",
            )

        timeout = self._call_timeout(deadline)

        if self.settings.provider == "anthropic":
            url = f"{self.base_url}/messages"
            headers = {
                "x-api-key": api_key,
                "anthropic-version": _ANTHROPIC_VERSION,
                "Content-Type": "application/json",
            }
            payload = build_anthropic_payload(
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                model_config=model_config,
                json_mode=json_mode,
            )
        else:
            url = f"{self.base_url}/chat/completions"
            headers = {
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }
            payload = build_openai_payload(
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                model_config=model_config,
                json_mode=json_mode,
            )

        logger.info(
            "[LLM] Calling %s model=%s max_tokens=%d timeout=%.1fs",
            self.settings.provider,
            model_config.model,
            model_config.max_tokens,
            timeout,
        )

        t0 = time.monotonic()
        try:
            response = await self.client.post(url, headers=headers, json=payload, timeout=timeout)
        except httpx.TimeoutException as exc:
            raise GenerationError(
                ErrorKind.NETWORK_ERROR,
                f"Provider request timed out after {time.monotonic() - t0:.1f}s",
            ) from exc
        except httpx.TransportError as exc:
            raise GenerationError(ErrorKind.NETWORK_ERROR, f"Provider request failed: {exc}") from exc

        logger.info("[LLM] HTTP %d (%.1fs)", response.status_code, time.monotonic() - t0)

        if response.status_code != 200:
            body = response.text[:400]
            kind = classify_provider_error(response.status_code, body)
            logger.warning("[LLM] Error response (%s): %s", kind.value, body)
            raise GenerationError(
                kind,
                f"Provider returned HTTP {response.status_code}",
                detail=body,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise GenerationError(ErrorKind.PROVIDER_OTHER, "Provider returned a non-JSON envelope") from exc

        if self.settings.provider == "anthropic":
            text = extract_anthropic_text(data)
        else:
            text = extract_openai_text(data)

        usage = data.get("usage") if isinstance(data, dict) else None
        if usage:
            logger.debug("[LLM] Tokens used: %s", usage)

        if not text.strip():
            raise GenerationError(ErrorKind.PROVIDER_EMPTY_RESPONSE, "Provider returned an empty completion")

        logger.info("[LLM] Raw output length: %d chars", len(text))
        return text

    async def analyze_structured(
        self,
        prompt: str,
        model_config: ModelConfig,
        *,
        deadline: Optional[float] = None,
    ) -> str:
        """Single-prompt analysis call with strict JSON-object output."""
        return await self.complete(
            f"{ANALYST_SYSTEM_PROMPT}\n\n{_JSON_ONLY_INSTRUCTION}",
            prompt,
            model_config,
            json_mode=True,
            deadline=deadline,
        )

    # ── Helpers ───────────────────────────────────────────────

    def _call_timeout(self, deadline: Optional[float]) -> float:
        timeout = self.settings.request_timeout
        left = remaining_time(deadline)
        if left is None:
            return timeout
        if left <= 0:
            raise GenerationError(ErrorKind.DEADLINE_EXCEEDED, "Deadline reached before provider call")
        return min(timeout, left)


# ---------------------------------------------------------------------------
# Payload builders / response extractors
# ---------------------------------------------------------------------------
def build_openai_payload(
    *,
    system_prompt: str,
    user_prompt: str,
    model_config: ModelConfig,
    json_mode: bool,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "model": model_config.model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "temperature": model_config.temperature,
        "max_tokens": model_config.max_tokens,
    }
    if json_mode:
        payload["response_format"] = {"type": "json_object"}
    return payload


def build_anthropic_payload(
    *,
    system_prompt: str,
    user_prompt: str,
    model_config: ModelConfig,
    json_mode: bool,
) -> Dict[str, Any]:
    # No response-format switch on this API; the instruction goes in the system prompt.
    system = system_prompt
    if json_mode and _JSON_ONLY_INSTRUCTION not in system_prompt:
        system = f"{system_prompt}\n\n{_JSON_ONLY_INSTRUCTION}"
    return {
        "model": model_config.model,
        "system": system,
        "messages": [{"role": "user", "content": user_prompt}],
        "temperature": model_config.temperature,
        "max_tokens": model_config.max_tokens,
    }


def extract_openai_text(data: Any) -> str:
    try:
        return data["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError) as exc:
        raise GenerationError(ErrorKind.PROVIDER_OTHER, "Unexpected chat completion shape") from exc


def extract_anthropic_text(data: Any) -> str:
    try:
        blocks = data["content"]
    except (KeyError, TypeError) as exc:
        raise GenerationError(ErrorKind.PROVIDER_OTHER, "Unexpected messages response shape") from exc
    texts = [b.get("text", "") for b in blocks if isinstance(b, dict) and b.get("type") == "text"]
    return "".join(texts)
