"""Tests for generation configuration."""

import pytest
from pydantic import ValidationError

from src.config import DEFAULT_MODELS, GenerationConfig, ModelPair


def test_from_env_defaults():
    config = GenerationConfig.from_env({})
    assert config.provider == "openai"
    assert config.retry_budget == 2
    assert config.temperature == 0.3
    assert config.request_timeout == 60.0
    settings = config.settings_for()
    assert settings.api_key is None
    assert settings.models == ModelPair(small="gpt-4.1-mini", large="gpt-4.1")


def test_from_env_overrides():
    config = GenerationConfig.from_env({
        "AI_PROVIDER": " Anthropic ",
        "ANTHROPIC_API_KEY": "ak-test",
        "ANTHROPIC_LARGE_MODEL": "claude-big",
        "OPENAI_BASE_URL": "http://llama:8080/v1",
        "ROUTER_MAX_RETRIES": "4",
        "ROUTER_TEMPERATURE": "0.5",
        "ROUTER_REQUEST_TIMEOUT": "15",
    })
    assert config.provider == "anthropic"
    assert config.retry_budget == 4
    assert config.temperature == 0.5
    assert config.request_timeout == 15.0

    anthropic = config.settings_for()
    assert anthropic.api_key == "ak-test"
    assert anthropic.models.small == DEFAULT_MODELS["anthropic"][0]
    assert anthropic.models.large == "claude-big"
    assert config.settings_for("openai").base_url == "http://llama:8080/v1"


@pytest.mark.parametrize("raw, expected", [
    ("0", 1),
    ("-3", 1),
    ("abc", 2),
    ("", 2),
    ("1", 1),
])
def test_retry_budget_parsing(raw, expected):
    assert GenerationConfig.from_env({"ROUTER_MAX_RETRIES": raw}).retry_budget == expected


def test_settings_for_unknown_provider_has_no_models():
    settings = GenerationConfig().settings_for("mistral")
    assert settings.models == ModelPair(small="", large="")


def test_config_is_frozen():
    config = GenerationConfig()
    with pytest.raises(ValidationError):
        config.retry_budget = 5
