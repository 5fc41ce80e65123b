"""Task orchestration: compose, invoke, validate, self-correct.

This module provides the single entry point for generation tasks. It
handles the full lifecycle:

  1. RESOLVE:  pick the configured provider and its small/large models
  2. PLAN:     fix the model sequence before the first call
  3. COMPOSE:  build the base prompt once
  4. LOOP:     invoke → extract → structural → semantic
               on failure, the next attempt gets a fix prompt carrying the
               previous attempt's complete error list
  5. RESULT:   first valid payload wins; otherwise ExhaustedRetries

Model sequence:

  OUTLINE_ALL, POST_ALL                 → large × (1 + retry_budget)
  OUTLINE_ACT, OUTLINE_DAY, POST_DAY    → small, small, large

Narrow tasks start cheap and escalate once; full-scope tasks already run
on the large model, so retry_budget only controls how many times.

Provider failures and contract violations are not retried: they are raised
at once. Cancellation of the calling task propagates into the in-flight
provider call and no further attempt is started.
"""

from dataclasses import dataclass
from typing import Any, Literal, Optional, Union

from pydantic import TypeAdapter, ValidationError

from src.config import GenerationConfig, ModelPair
from src.errors import (
    ContractViolation,
    ExhaustedRetries,
    ProviderError,
    ProviderTransportError,
)
from src.llm.providers import GenerationProvider, get_provider
from src.llm.validators import validate_output
from src.prompts.campaign import compose_fix_prompt, compose_prompt
from src.schemas.api import RunTaskResult, TaskMeta
from src.schemas.campaign import TaskContext, TaskType
from src.utils.logging import log, get_logger, task_scope

MODULE = "llm.router"
logger = get_logger()

NARROW_SEQUENCE = ("small", "small", "large")
MAX_TOKENS = {"outline": 3500, "post": 3000}

_context_adapter = TypeAdapter(TaskContext)


@dataclass(frozen=True)
class PlannedAttempt:
    tier: Literal["small", "large"]
    model: str


def build_model_sequence(
    task_type: Union[TaskType, str],
    models: ModelPair,
    retry_budget: int,
) -> list[PlannedAttempt]:
    """Compute the fixed per-attempt model plan for a task."""
    task_type = TaskType(task_type)
    if task_type.is_full_scope:
        large = PlannedAttempt("large", models.large)
        return [large] * (1 + max(retry_budget, 0))
    return [PlannedAttempt(tier, getattr(models, tier)) for tier in NARROW_SEQUENCE]


def _coerce_inputs(task_type: Any, context: Any) -> tuple[TaskType, Any]:
    try:
        task_type = TaskType(task_type)
    except ValueError as e:
        raise ContractViolation(f"Unknown task type: {task_type!r}") from e

    if isinstance(context, dict):
        try:
            context = _context_adapter.validate_python(context)
        except ValidationError as e:
            raise ContractViolation(f"Invalid task context: {e}") from e
    return task_type, context


async def _generate(
    provider: GenerationProvider,
    model: str,
    prompt: str,
    temperature: float,
    max_tokens: int,
) -> str:
    try:
        return await provider.generate_text(
            model, prompt, temperature=temperature, max_tokens=max_tokens,
        )
    except ProviderError:
        raise
    except Exception as e:
        raise ProviderTransportError(
            f"{provider.name} provider failed: {e}", provider=provider.name
        ) from e


async def run_task(
    task_type: Union[TaskType, str],
    context: TaskContext,
    *,
    config: Optional[GenerationConfig] = None,
    provider: Optional[GenerationProvider] = None,
) -> RunTaskResult:
    """Run one generation task to a fully validated payload.

    Args:
        task_type: Which artifact to generate and at which scope
        context: Outline- or post-shaped context matching the task type
        config: Generation settings (default: read from the environment)
        provider: Provider instance to use instead of the configured one

    Returns:
        RunTaskResult with the typed payload and provider/model/retry meta

    Raises:
        ContractViolation: Context does not fit the task type
        ProviderError: Provider misconfigured, unimplemented or unreachable
        ExhaustedRetries: No attempt produced a valid payload
    """
    task_type, context = _coerce_inputs(task_type, context)
    config = config or GenerationConfig.from_env()
    provider = provider or get_provider(config)

    sequence = build_model_sequence(task_type, provider.model_config(), config.retry_budget)
    starts_small = sequence[0].tier == "small"
    base_prompt = compose_prompt(task_type, context)
    max_tokens = MAX_TOKENS[task_type.family]

    with task_scope(task_type=task_type.value, campaign_id=context.campaign_id,
                    provider=provider.name):
        log.info(logger, MODULE, "task_start", f"Running {task_type.value}",
                 attempts=len(sequence), models=[attempt.model for attempt in sequence])

        last_errors: list[str] = []
        last_stage: Optional[str] = None

        for index, attempt in enumerate(sequence):
            prompt = base_prompt if index == 0 else compose_fix_prompt(base_prompt, last_errors)

            raw = await _generate(provider, attempt.model, prompt, config.temperature, max_tokens)
            result = validate_output(task_type, raw, context)

            if result.ok:
                escalated = starts_small and attempt.tier == "large"
                log.info(logger, MODULE, "task_done", f"{task_type.value} validated",
                         model=attempt.model, retries=index, escalated=escalated)
                return RunTaskResult(
                    data=result.data,
                    meta=TaskMeta(
                        provider=provider.name,
                        model=attempt.model,
                        retries=index,
                        escalated=escalated,
                    ),
                )

            last_errors, last_stage = result.errors, result.stage
            log.warning(logger, MODULE, "attempt_failed",
                        f"{result.stage.capitalize()} validation failed",
                        attempt=index + 1, model=attempt.model, stage=result.stage,
                        errors=last_errors[:5], error_count=len(last_errors),
                        raw_length=len(raw))

        log.error(logger, MODULE, "task_exhausted",
                  f"{task_type.value} failed after {len(sequence)} attempts",
                  error=" | ".join(last_errors), stage=last_stage)
    raise ExhaustedRetries(task_type.value, last_errors, attempts=len(sequence), stage=last_stage)
