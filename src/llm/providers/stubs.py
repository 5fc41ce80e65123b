"""Named providers without a transport yet.

They validate their credential like a real provider, so configuration
errors still surface at startup, but every call fails immediately.
"""

from typing import Optional

from src.errors import ProviderNotImplementedError
from src.llm.providers.base import GenerationProvider


class _StubProvider(GenerationProvider):

    async def generate_text(
        self,
        model: str,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        raise ProviderNotImplementedError(
            f"The {self.name} provider has no transport yet; "
            "set AI_PROVIDER=openai or register a real implementation.",
            provider=self.name,
        )


class AnthropicProvider(_StubProvider):
    name = "anthropic"


class GoogleProvider(_StubProvider):
    name = "google"
