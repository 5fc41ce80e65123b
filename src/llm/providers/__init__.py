"""Provider registry.

Maps a provider name to its class. The router resolves the active provider
once per task from GenerationConfig.provider:

  provider = get_provider(config)
  text = await provider.generate_text(model, prompt, temperature=0.3)
"""

from src.config import GenerationConfig
from src.errors import ProviderConfigurationError
from src.llm.providers.base import GenerationProvider
from src.llm.providers.openai_provider import OpenAIProvider
from src.llm.providers.stubs import AnthropicProvider, GoogleProvider

PROVIDERS: dict[str, type[GenerationProvider]] = {
    OpenAIProvider.name: OpenAIProvider,
    AnthropicProvider.name: AnthropicProvider,
    GoogleProvider.name: GoogleProvider,
}


def register_provider(name: str, provider_cls: type[GenerationProvider]) -> None:
    """Add or replace a backend in the registry."""
    PROVIDERS[name.lower()] = provider_cls


def get_provider(config: GenerationConfig) -> GenerationProvider:
    """Construct the configured provider.

    Raises:
        ProviderConfigurationError: Unknown provider or missing credential
    """
    provider_cls = PROVIDERS.get(config.provider)
    if provider_cls is None:
        raise ProviderConfigurationError(
            f"Unsupported AI_PROVIDER: {config.provider}", provider=config.provider
        )
    return provider_cls(
        config.settings_for(config.provider),
        request_timeout=config.request_timeout,
    )


__all__ = [
    "PROVIDERS",
    "GenerationProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "GoogleProvider",
    "register_provider",
    "get_provider",
]
