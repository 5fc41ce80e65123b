"""Generation provider interface.

A provider is pure transport: (model id, prompt, sampling parameters) in,
raw text out. No retries, no parsing, no validation. Those belong to the
router.

Construction fails fast when the provider's credential is missing, so a
misconfigured deployment fails before any task runs.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.config import ModelPair, ProviderSettings
from src.errors import ProviderConfigurationError


class GenerationProvider(ABC):
    """Base class for generation backends."""

    name: str = "base"

    def __init__(self, settings: ProviderSettings, *, request_timeout: float = 60.0):
        if not settings.api_key:
            raise ProviderConfigurationError(
                f"{self.name.upper()}_API_KEY is required when AI_PROVIDER={self.name}.",
                provider=self.name,
            )
        self.settings = settings
        self.request_timeout = request_timeout

    @abstractmethod
    async def generate_text(
        self,
        model: str,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Return the model's raw text reply to a single user prompt.

        Raises:
            ProviderError: If the backend cannot produce a reply
        """

    def model_config(self) -> ModelPair:
        """The concrete small/large model identifiers for this provider."""
        return self.settings.models
