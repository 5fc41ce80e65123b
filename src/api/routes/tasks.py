"""Generation task endpoint.

POST /tasks/{task_type} runs one task to a validated payload. Nothing is
stored: the caller applies the returned data to its own storage.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_config, get_task_provider
from src.config import GenerationConfig
from src.llm import run_task
from src.llm.providers import GenerationProvider
from src.schemas import RunTaskRequest, TaskType
from src.utils.logging import log, get_logger

MODULE = "tasks"
logger = get_logger()

router = APIRouter()


@router.post("/{task_type}")
async def run_generation_task(
    task_type: TaskType,
    body: RunTaskRequest,
    config: GenerationConfig = Depends(get_config),
    provider: GenerationProvider = Depends(get_task_provider),
):
    log.info(logger, MODULE, "request", "Task requested",
             task_type=task_type.value, campaign_id=body.context.campaign_id,
             context_kind=body.context.kind)
    result = await run_task(task_type, body.context, config=config, provider=provider)
    return result.model_dump(mode="json", by_alias=True)
