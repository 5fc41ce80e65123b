"""Pydantic schemas for task requests/results."""

from typing import Any

from src.schemas.campaign import TaskContext
from src.schemas.llm_outputs import CamelModel


class RunTaskRequest(CamelModel):
    """Request body for running a generation task."""
    context: TaskContext


class TaskMeta(CamelModel):
    """How a task result was produced."""
    provider: str
    model: str
    retries: int
    escalated: bool


class RunTaskResult(CamelModel):
    """A fully validated task payload plus its provenance.

    ``data`` is the task's typed payload (OutlineResponse, PostDayResponse
    or PostAllResponse). Dump with ``by_alias=True`` for the wire format.
    """
    data: Any
    meta: TaskMeta
