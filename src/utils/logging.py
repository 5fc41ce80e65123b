"""
Structured Logging for Grafana Loki

Every line is one JSON object with the same top-level keys
(ts, level, module, action, msg) plus free-form context fields.

Inside a generation task, the router binds task_type and campaign_id once
with ``task_scope()``; every log line emitted while the task runs (provider
calls, validation failures) carries them without passing them around.

GRAFANA LOKI QUERIES
====================
# All errors
{project="campaign-forge"} | json | level="ERROR"

# Tasks that ran out of attempts
{project="campaign-forge"} | json | module="llm.router" action="task_exhausted"

# Everything one campaign produced, across tasks
{project="campaign-forge"} | json | campaign_id="<id>"

# Failed attempts by validation stage
{project="campaign-forge"} | json | action="attempt_failed" | stage="semantic"

# Provider latency per model
{project="campaign-forge"} | json | action="provider_call" | unwrap latency_ms

USAGE
=====
from src.utils.logging import log, get_logger, task_scope

logger = get_logger()

with task_scope(task_type="POST_DAY", campaign_id=campaign_id):
    log.info(logger, "llm.router", "task_start", "Running POST_DAY", attempts=3)

log.error(logger, "api", "provider_failed", "Provider unavailable",
          error=str(e), provider="openai")

ACTION NAMING
=============
  *_start     beginning of an operation
  *_done      successful completion
  *_failed    error/failure
  *_fallback  falling back to a default
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from functools import partialmethod
from typing import Any, Iterator, Optional

LOGGER_NAME = "campaign-forge"

RESERVED_KEYS = ("ts", "level", "module", "action", "msg")

# Third-party loggers that are chatty below WARNING
NOISY_LOGGERS = (
    "langchain",
    "langchain_core",
    "langchain_openai",
    "openai",
    "httpx",
    "httpcore",
    "asyncio",
)

_task_fields: ContextVar[dict[str, Any]] = ContextVar("task_fields", default={})


@contextmanager
def task_scope(**fields: Any) -> Iterator[None]:
    """Attach fields to every structured log emitted inside the block.

    Scopes nest; inner values win. The binding is per asyncio task, so
    concurrent generation tasks never see each other's fields.
    """
    merged = {**_task_fields.get(), **{k: v for k, v in fields.items() if v is not None}}
    token = _task_fields.set(merged)
    try:
        yield
    finally:
        _task_fields.reset(token)


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class StructuredFormatter(logging.Formatter):
    """Renders records as Loki-ready JSON, or as one readable line in pretty mode."""

    def __init__(self, pretty: bool = False):
        super().__init__()
        self.pretty = pretty

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "ts": _timestamp(),
            "level": record.levelname,
            "module": getattr(record, "_module", "legacy"),
            "action": getattr(record, "_action", "log"),
            "msg": record.getMessage(),
        }
        data.update(getattr(record, "_fields", {}))

        if self.pretty:
            return self._pretty(data)
        return json.dumps(data, default=str, separators=(",", ":"))

    @staticmethod
    def _pretty(data: dict) -> str:
        ts = data["ts"][11:23]  # HH:MM:SS.mmm
        head = f"{ts} {data['level'][0]} [{data['module'].upper()[:14].ljust(14)}]"
        ctx = " ".join(f"{k}={v}" for k, v in data.items() if k not in RESERVED_KEYS)
        line = f"{head} {data['action']}: {data['msg']}"
        return f"{line} | {ctx}" if ctx else line


class StructuredLogger:
    """
    Emits structured records through a stdlib logger.

    Every level method takes (logger, module, action, msg, **fields).
    Fields set to None are dropped; task-scoped fields are merged in
    underneath the call's own fields.
    """

    def _log(
        self,
        level: int,
        logger: logging.Logger,
        module: str,
        action: str,
        msg: str,
        **fields: Any,
    ) -> None:
        if not logger.isEnabledFor(level):
            return
        merged = {**_task_fields.get(), **{k: v for k, v in fields.items() if v is not None}}
        logger.log(level, msg, extra={
            "_module": module,
            "_action": action,
            "_fields": merged,
        })

    debug = partialmethod(_log, logging.DEBUG)
    info = partialmethod(_log, logging.INFO)
    warning = partialmethod(_log, logging.WARNING)
    error = partialmethod(_log, logging.ERROR)


# Shared instance
log = StructuredLogger()


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """The project logger, or a named child of it."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)


def configure_logging() -> None:
    """Install the structured formatter on the root logger. Call once at startup.

    Reads from environment:
      LOG_FORMAT: "json" (default, for Loki) or "pretty" (for development)
      LOG_LEVEL: "INFO" (default), "DEBUG", "WARNING", "ERROR"
    """
    pretty = os.environ.get("LOG_FORMAT", "json") == "pretty"
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter(pretty=pretty))
    logging.basicConfig(level=level, handlers=[handler], force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
