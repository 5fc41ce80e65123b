"""Tests for structured logging."""

import json
import logging

import pytest

from src.utils.logging import StructuredFormatter, get_logger, log, task_scope


@pytest.fixture
def captured(caplog):
    caplog.set_level(logging.DEBUG, logger="campaign-forge")
    return caplog


def test_fields_and_none_dropped(captured):
    log.warning(get_logger(), "llm.router", "attempt_failed", "Semantic validation failed",
                stage="semantic", model=None)
    (record,) = captured.records
    assert record._module == "llm.router"
    assert record._action == "attempt_failed"
    assert record._fields == {"stage": "semantic"}


def test_task_scope_binds_and_restores(captured):
    logger = get_logger()
    with task_scope(task_type="POST_DAY", campaign_id="camp-1"):
        with task_scope(campaign_id="camp-2"):
            log.info(logger, "llm.router", "task_start", "Running POST_DAY")
        log.info(logger, "llm.router", "task_done", "POST_DAY validated", retries=0)
    log.info(logger, "api", "shutdown", "Application shutdown complete")

    assert captured.records[0]._fields == {"task_type": "POST_DAY", "campaign_id": "camp-2"}
    assert captured.records[1]._fields == {"task_type": "POST_DAY", "campaign_id": "camp-1", "retries": 0}
    assert captured.records[2]._fields == {}


def test_json_format(captured):
    log.error(get_logger(), "api", "provider_failed", "Provider unavailable",
              error="boom", provider="openai")
    line = json.loads(StructuredFormatter().format(captured.records[0]))
    assert line["level"] == "ERROR"
    assert line["module"] == "api"
    assert line["action"] == "provider_failed"
    assert line["msg"] == "Provider unavailable"
    assert line["error"] == "boom"
    assert line["provider"] == "openai"


def test_third_party_record_is_wrapped():
    record = logging.LogRecord("httpx", logging.WARNING, __file__, 1, "retrying", None, None)
    line = json.loads(StructuredFormatter().format(record))
    assert line["module"] == "legacy"
    assert line["msg"] == "retrying"


def test_pretty_format(captured):
    log.info(get_logger(), "llm.router", "task_done", "OUTLINE_ALL validated", retries=1)
    line = StructuredFormatter(pretty=True).format(captured.records[0])
    assert "[LLM.ROUTER" in line
    assert line.endswith("task_done: OUTLINE_ALL validated | retries=1")
