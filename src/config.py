"""Generation configuration.

One immutable GenerationConfig is read per task. It names the active
provider, the per-provider credential and small/large model pair, and the
retry budget of full-scope tasks.

Build it explicitly, or from the environment:

  AI_PROVIDER              openai | anthropic | google   (default: openai)
  OPENAI_API_KEY           credential for the openai provider
  OPENAI_SMALL_MODEL       default gpt-4.1-mini
  OPENAI_LARGE_MODEL       default gpt-4.1
  OPENAI_BASE_URL          optional OpenAI-compatible endpoint (llama.cpp, vLLM, ...)
  ANTHROPIC_API_KEY / ANTHROPIC_SMALL_MODEL / ANTHROPIC_LARGE_MODEL
  GOOGLE_API_KEY / GOOGLE_SMALL_MODEL / GOOGLE_LARGE_MODEL
  ROUTER_MAX_RETRIES       retry budget, default 2, values below 1 clamp to 1
  ROUTER_TEMPERATURE       sampling temperature, default 0.3
  ROUTER_REQUEST_TIMEOUT   provider timeout in seconds, default 60
"""

import os
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.utils.logging import log, get_logger

MODULE = "config"
logger = get_logger()

DEFAULT_PROVIDER = "openai"
DEFAULT_RETRY_BUDGET = 2

DEFAULT_MODELS = {
    "openai": ("gpt-4.1-mini", "gpt-4.1"),
    "anthropic": ("claude-3-5-haiku-latest", "claude-3-7-sonnet-latest"),
    "google": ("gemini-2.0-flash", "gemini-1.5-pro"),
}


class ModelPair(BaseModel):
    """Cheap model for first attempts, capable model for escalation."""

    model_config = ConfigDict(frozen=True)

    small: str
    large: str


class ProviderSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = None
    models: ModelPair
    base_url: Optional[str] = None


class GenerationConfig(BaseModel):
    """Process-wide generation settings, immutable for a task's duration."""

    model_config = ConfigDict(frozen=True)

    provider: str = DEFAULT_PROVIDER
    providers: dict[str, ProviderSettings] = Field(default_factory=dict)
    retry_budget: int = DEFAULT_RETRY_BUDGET
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    request_timeout: float = Field(default=60.0, gt=0)

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower() or DEFAULT_PROVIDER
        return v

    @field_validator("retry_budget", mode="before")
    @classmethod
    def clamp_retry_budget(cls, v: Any) -> int:
        """Unparseable budgets fall back to the default; small ones clamp to 1."""
        try:
            budget = int(v)
        except (TypeError, ValueError):
            log.warning(logger, MODULE, "retry_budget_fallback",
                        "Invalid retry budget, using default",
                        value=repr(v), default=DEFAULT_RETRY_BUDGET)
            return DEFAULT_RETRY_BUDGET
        if budget < 1:
            log.warning(logger, MODULE, "retry_budget_clamped",
                        "Retry budget below 1, clamping", value=budget)
            return 1
        return budget

    def settings_for(self, name: Optional[str] = None) -> ProviderSettings:
        """Settings of a provider, falling back to its default model pair."""
        name = name or self.provider
        if name in self.providers:
            return self.providers[name]
        small, large = DEFAULT_MODELS.get(name, ("", ""))
        return ProviderSettings(models=ModelPair(small=small, large=large))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GenerationConfig":
        env = os.environ if environ is None else environ

        providers = {}
        for name, (small, large) in DEFAULT_MODELS.items():
            prefix = name.upper()
            providers[name] = ProviderSettings(
                api_key=env.get(f"{prefix}_API_KEY") or None,
                models=ModelPair(
                    small=env.get(f"{prefix}_SMALL_MODEL") or small,
                    large=env.get(f"{prefix}_LARGE_MODEL") or large,
                ),
                base_url=env.get(f"{prefix}_BASE_URL") or None,
            )

        values: dict[str, Any] = {
            "provider": env.get("AI_PROVIDER", DEFAULT_PROVIDER),
            "providers": providers,
            "retry_budget": env.get("ROUTER_MAX_RETRIES", DEFAULT_RETRY_BUDGET),
        }
        if env.get("ROUTER_TEMPERATURE"):
            values["temperature"] = env["ROUTER_TEMPERATURE"]
        if env.get("ROUTER_REQUEST_TIMEOUT"):
            values["request_timeout"] = env["ROUTER_REQUEST_TIMEOUT"]

        return cls(**values)
