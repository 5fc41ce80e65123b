"""Pydantic schemas for structured data validation.

This package contains:
- calendar.py: the 30-day / 3-act campaign structure
- campaign.py: task types, campaign bible and task contexts (inputs)
- llm_outputs.py: schemas for validating LLM outputs
- api.py: task request/result schemas

All LLM outputs are validated against Pydantic models BEFORE being returned
to callers. This provides a clear contract and catches malformed outputs
early.
"""

from src.schemas.campaign import (
    TaskType,
    CampaignBible,
    CampaignTemplate,
    OutlineDayInput,
    OutlineTaskContext,
    PostTaskContext,
    TaskContext,
)

from src.schemas.llm_outputs import (
    OutlineDay,
    OutlineResponse,
    PostDay,
    PostDayResponse,
    PostAllResponse,
)

from src.schemas.api import (
    RunTaskRequest,
    RunTaskResult,
    TaskMeta,
)

__all__ = [
    # Inputs
    "TaskType",
    "CampaignBible",
    "CampaignTemplate",
    "OutlineDayInput",
    "OutlineTaskContext",
    "PostTaskContext",
    "TaskContext",
    # LLM outputs
    "OutlineDay",
    "OutlineResponse",
    "PostDay",
    "PostDayResponse",
    "PostAllResponse",
    # API
    "RunTaskRequest",
    "RunTaskResult",
    "TaskMeta",
]
