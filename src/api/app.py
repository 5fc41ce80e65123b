"""FastAPI application for Campaign Forge.

Logging: Uses structured JSON logging for Grafana Loki.
Set LOG_FORMAT=pretty for development-friendly output.
"""

from contextlib import asynccontextmanager

# Configure structured logging BEFORE importing anything else
from src.utils.logging import configure_logging, get_logger, log  # noqa: E402

configure_logging()

MODULE = "api"
logger = get_logger()

from fastapi import FastAPI, Request  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402

from src.api.routes.health import router as health_router  # noqa: E402
from src.api.routes.tasks import router as tasks_router  # noqa: E402
from src.config import GenerationConfig  # noqa: E402
from src.errors import ContractViolation, ExhaustedRetries, ProviderError  # noqa: E402
from src.llm.providers import get_provider  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown."""
    config = GenerationConfig.from_env()

    # Fail before serving traffic if the provider cannot be constructed
    try:
        provider = get_provider(config)
    except ProviderError as e:
        log.error(logger, MODULE, "provider_failed", "Provider configuration invalid",
                  error=str(e), provider=config.provider)
        raise

    app.state.config = config
    models = provider.model_config()
    log.info(logger, MODULE, "config_ready", "Generation config loaded",
             provider=provider.name, small_model=models.small,
             large_model=models.large, retry_budget=config.retry_budget)

    yield

    log.info(logger, MODULE, "shutdown", "Application shutdown complete")


app = FastAPI(
    title="Campaign Forge",
    description="Campaign outline and post generation API",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(ContractViolation)
async def contract_violation_handler(request: Request, exc: ContractViolation):
    log.warning(logger, MODULE, "contract_violation", "Rejected task request",
                error=str(exc), path=request.url.path)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError):
    log.error(logger, MODULE, "provider_failed", "Provider unavailable",
              error=str(exc), error_type=type(exc).__name__, provider=exc.provider)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(ExhaustedRetries)
async def exhausted_handler(request: Request, exc: ExhaustedRetries):
    return JSONResponse(
        status_code=502,
        content={
            "detail": {
                "message": str(exc),
                "errors": exc.errors,
                "attempts": exc.attempts,
            }
        },
    )


app.include_router(health_router)
app.include_router(tasks_router, prefix="/tasks", tags=["tasks"])
