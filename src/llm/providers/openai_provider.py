"""OpenAI generation provider.

Uses LangChain's ChatOpenAI, so any OpenAI-compatible /v1/chat/completions
endpoint works too (llama.cpp, vLLM, ...) by setting OPENAI_BASE_URL.

Requests ask for a JSON-object response format. The reply is still treated
as untrusted free text downstream: the router extracts and validates it.
"""

import time
from typing import Optional

from langchain_core.messages import HumanMessage
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI

from src.errors import ProviderTransportError
from src.llm.providers.base import GenerationProvider
from src.utils.logging import log, get_logger

MODULE = "llm.openai"
logger = get_logger()

DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_TOKENS = 2500


class OpenAIProvider(GenerationProvider):
    name = "openai"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._clients: dict[tuple[str, float, int], Runnable] = {}

    def _client(self, model: str, temperature: float, max_tokens: int) -> Runnable:
        """One JSON-mode client per (model, temperature, max_tokens), reused across calls."""
        key = (model, temperature, max_tokens)
        if key in self._clients:
            return self._clients[key]

        client = ChatOpenAI(
            model=model,
            api_key=self.settings.api_key,
            base_url=self.settings.base_url,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=self.request_timeout,
            max_retries=0,  # the router owns the attempt budget
        )
        log.debug(logger, MODULE, "client_init", "OpenAI client created",
                  model=model, base_url=self.settings.base_url,
                  temperature=temperature, max_tokens=max_tokens)
        self._clients[key] = client.bind(response_format={"type": "json_object"})
        return self._clients[key]

    async def generate_text(
        self,
        model: str,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        llm = self._client(
            model,
            DEFAULT_TEMPERATURE if temperature is None else temperature,
            DEFAULT_MAX_TOKENS if max_tokens is None else max_tokens,
        )

        _t0 = time.monotonic()
        try:
            response = await llm.ainvoke([HumanMessage(content=prompt)])
        except Exception as e:
            log.error(logger, MODULE, "request_failed", "OpenAI request failed",
                      error=str(e), error_type=type(e).__name__, model=model)
            raise ProviderTransportError(
                f"openai request failed: {e}", provider=self.name
            ) from e

        latency_ms = int((time.monotonic() - _t0) * 1000)
        content = response.content
        if not isinstance(content, str):
            # Content blocks: keep the text parts only
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part)
                for part in content
            )

        log.debug(logger, MODULE, "provider_call", "OpenAI call complete",
                  model=model, latency_ms=latency_ms, raw_length=len(content))
        return content
