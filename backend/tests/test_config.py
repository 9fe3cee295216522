import pytest
from pydantic import ValidationError

from trenddit.config import GenerationSettings, ModelConfig


def test_defaults_without_environment():
    settings = GenerationSettings.from_env({})

    assert settings.provider.provider == "openai"
    assert settings.provider.api_key == ""
    assert settings.provider.resolved_base_url() == "https://api.openai.com/v1"
    assert settings.model.model == "gpt-4o"
    assert settings.retry.max_attempts == 3
    assert settings.retry.initial_delay == 1.0
    assert settings.retry.max_delay == 10.0
    assert settings.request_deadline == 90.0


def test_anthropic_provider_reads_its_own_key():
    settings = GenerationSettings.from_env(
        {"LLM_PROVIDER": "Anthropic", "ANTHROPIC_API_KEY": "ak-1", "OPENAI_API_KEY": "sk-1"}
    )

    assert settings.provider.provider == "anthropic"
    assert settings.provider.api_key == "ak-1"
    assert settings.model.model.startswith("claude")


def test_invalid_values_fall_back_to_safe_defaults():
    settings = GenerationSettings.from_env(
        {
            "LLM_PROVIDER": "mystery",
            "LLM_TEMPERATURE": "7",
            "LLM_MAX_TOKENS": "lots",
            "GENERATION_RETRY_MAX_ATTEMPTS": "0",
            "GENERATION_REQUEST_DEADLINE": "-5",
        }
    )

    assert settings.provider.provider == "openai"
    assert settings.model.temperature == 1.0
    assert settings.model.max_tokens == 3000
    assert settings.retry.max_attempts == 1
    assert settings.request_deadline == 1.0


def test_summary_hides_the_key():
    summary = GenerationSettings.from_env({"OPENAI_API_KEY": "sk-secret"}).summary()

    assert summary["api_key_configured"] is True
    assert "sk-secret" not in str(summary)


def test_model_config_overrides_are_validated():
    base = ModelConfig(model="m", temperature=0.7, max_tokens=100)

    assert base.with_overrides() is base
    assert base.with_overrides(temperature=0.2).temperature == 0.2
    with pytest.raises(ValidationError):
        base.with_overrides(max_tokens=0)
