"""Tests for prompt composition."""

import json

import pytest

from src.errors import ContractViolation
from src.prompts.campaign import (
    JSON_REQUIREMENT,
    compose_fix_prompt,
    compose_prompt,
    normalize_format_rotation,
)
from src.schemas import TaskType


def test_compose_is_deterministic(outline_context, post_context):
    for task_type, context in [
        (TaskType.OUTLINE_ALL, outline_context),
        (TaskType.POST_DAY, post_context),
        (TaskType.POST_ALL, post_context),
    ]:
        assert compose_prompt(task_type, context) == compose_prompt(task_type, context)


def test_bible_block_in_every_prompt(outline_context, post_context):
    for prompt in [
        compose_prompt(TaskType.OUTLINE_ALL, outline_context),
        compose_prompt(TaskType.POST_DAY, post_context),
    ]:
        assert "Campaign Name: Pricing Month" in prompt
        assert "Voice Style: Direct, practical, no fluff" in prompt
        assert "Pillars: pricing | retention | positioning" in prompt
        assert "Forbidden: emoji | guaranteed results" in prompt
        assert "CTA Preference: Invite comments" in prompt
        assert JSON_REQUIREMENT in prompt


def test_outline_all_scope(outline_context):
    prompt = compose_prompt("OUTLINE_ALL", outline_context)
    assert "Generate exactly 30 days. Each act must have exactly 10 days." in prompt
    assert "Act 2 intent: frameworks + teaching" in prompt
    assert "Format rotation suggestion: story | list | mini-case" in prompt
    assert '"keyPoints":["","",""]' in prompt


def test_outline_act_scope(outline_context):
    prompt = compose_prompt(
        TaskType.OUTLINE_ACT, outline_context.model_copy(update={"target_act": 2})
    )
    assert "Regenerate only Act 2." in prompt
    assert "Generate exactly 10 days for dayNumber 11-20." in prompt
    assert "All days in output must have actNumber 2." in prompt


def test_outline_day_scope(outline_context):
    prompt = compose_prompt(
        TaskType.OUTLINE_DAY, outline_context.model_copy(update={"target_day": 25})
    )
    assert "Regenerate only day 25." in prompt
    assert "exactly one day object with dayNumber 25 and actNumber 3." in prompt


def test_post_day_uses_target_outline(post_context):
    prompt = compose_prompt(TaskType.POST_DAY, post_context)
    assert "Target day: 5" in prompt
    assert "Title: Pricing lesson 5 for founders" in prompt
    assert "Key points: Anchor on value | Test price increases | Talk to customers" in prompt
    assert "CTA: Comment with your biggest pricing question" in prompt
    assert "no markdown headings" in prompt
    assert "<= 2200 characters" in prompt
    assert 'Return schema: {"text":"","altHooks":["","",""]}.' in prompt


def test_post_all_serializes_outlines(post_context):
    prompt = compose_prompt(TaskType.POST_ALL, post_context)
    line = next(row for row in prompt.splitlines() if row.startswith("[{"))
    outlines = json.loads(line)
    assert len(outlines) == 30
    assert list(outlines[0]) == [
        "dayNumber", "actNumber", "title", "hook", "format", "keyPoints", "cta",
    ]


def test_default_format_rotation(outline_context):
    context = outline_context.model_copy(
        update={"template": outline_context.template.model_copy(update={"format_rotation": None})}
    )
    prompt = compose_prompt(TaskType.OUTLINE_ALL, context)
    assert "Format rotation suggestion: story | list | myth-bust | mini-case" in prompt


def test_normalize_format_rotation_drops_junk():
    assert normalize_format_rotation([" story ", 3, "", "list"]) == ["story", "list"]
    assert normalize_format_rotation("story")[0] == "story"


@pytest.mark.parametrize("task_type", ["POST_DAY", "POST_ALL"])
def test_post_task_rejects_outline_context(outline_context, task_type):
    with pytest.raises(ContractViolation):
        compose_prompt(task_type, outline_context)


@pytest.mark.parametrize("task_type", ["OUTLINE_ALL", "OUTLINE_ACT", "OUTLINE_DAY"])
def test_outline_task_rejects_post_context(post_context, task_type):
    with pytest.raises(ContractViolation):
        compose_prompt(task_type, post_context)


def test_scoped_tasks_require_targets(outline_context, post_context):
    with pytest.raises(ContractViolation, match="targetAct"):
        compose_prompt(TaskType.OUTLINE_ACT, outline_context)
    with pytest.raises(ContractViolation, match="targetDay"):
        compose_prompt(TaskType.OUTLINE_DAY, outline_context)
    with pytest.raises(ContractViolation, match="targetDay"):
        compose_prompt(TaskType.POST_DAY, post_context.model_copy(update={"target_day": None}))


def test_post_day_requires_outline_for_target(post_context):
    context = post_context.model_copy(
        update={"day_outlines": post_context.day_outlines[:3], "target_day": 9}
    )
    with pytest.raises(ContractViolation, match="target day 9"):
        compose_prompt(TaskType.POST_DAY, context)


def test_unknown_task_type(outline_context):
    with pytest.raises(ContractViolation):
        compose_prompt("OUTLINE_WEEK", outline_context)


def test_fix_prompt_appends_errors():
    fixed = compose_fix_prompt("BASE PROMPT", ["days: Field required", "Expected 30 days, got 2."])
    assert fixed.startswith("BASE PROMPT\n\nThe previous response failed validation.")
    assert fixed.endswith("Validation errors: days: Field required | Expected 30 days, got 2.")
