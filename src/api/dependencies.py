"""FastAPI dependencies for generation tasks.

Both are overridable through app.dependency_overrides, which is how tests
swap in a scripted provider.
"""

from fastapi import Depends, Request

from src.config import GenerationConfig
from src.llm.providers import GenerationProvider, get_provider


def get_config(request: Request) -> GenerationConfig:
    """The config loaded at startup, or a fresh read of the environment."""
    config = getattr(request.app.state, "config", None)
    return config or GenerationConfig.from_env()


def get_task_provider(config: GenerationConfig = Depends(get_config)) -> GenerationProvider:
    """Resolve the configured provider once per request."""
    return get_provider(config)
