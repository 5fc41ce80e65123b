"""Prompts for campaign outline and post generation.

Every generation task goes through compose_prompt(). The prompt is built
from three blocks:

  1. The campaign bible: voice, audience, goal, pillars, forbidden list,
     CTA preference. Injected into EVERY prompt so the model never drifts
     from the brand guardrails.
  2. Task instructions: what to generate and at which scope (all 30 days,
     one act, one day, one post, all posts).
  3. The reply schema, with an explicit "JSON only" requirement.

compose_prompt() is pure. The same (task_type, context) always gives the
same bytes, which keeps fix-prompt retries comparable across attempts and
makes the prompts testable.

On a failed attempt the router calls compose_fix_prompt() with the ORIGINAL
prompt and the validator's errors. It never rebuilds the prompt from the
context.

Example (OUTLINE_DAY, targetDay=25):

  ...
  Regenerate only day 25.
  The output must include exactly one day object with dayNumber 25 and actNumber 3.
  Return schema: {"days":[{...single entry...}]}.
"""

import json
from typing import Any, Union

from src.errors import ContractViolation
from src.schemas.calendar import ACT_COUNT, CAMPAIGN_DAYS, DAYS_PER_ACT, act_for_day, act_window
from src.schemas.campaign import (
    OutlineTaskContext,
    PostTaskContext,
    TaskType,
)
from src.schemas.llm_outputs import POST_MAX_CHARS

JSON_REQUIREMENT = (
    "Return JSON only. No markdown fences, no explanations, "
    "no extra keys outside the schema."
)

DEFAULT_FORMAT_ROTATION = (
    "story",
    "list",
    "myth-bust",
    "mini-case",
    "how-to",
    "contrarian take",
    "behind-the-scenes",
)

OUTLINE_DAY_SCHEMA = (
    f'{{"dayNumber":1..{CAMPAIGN_DAYS},"actNumber":1..{ACT_COUNT},"title":"","hook":"",'
    '"format":"","keyPoints":["","",""],"cta":"","constraints":""}'
)
POST_DAY_SCHEMA = '{"text":"","altHooks":["","",""]}'
POST_ALL_SCHEMA = (
    f'{{"posts":[{{"dayNumber":1..{CAMPAIGN_DAYS},"text":"","altHooks":["","",""]}}]}}'
)

# Fields of each outline the POST_ALL prompt serializes as generation input.
_POST_ALL_OUTLINE_FIELDS = {
    "day_number", "act_number", "title", "hook", "format", "key_points", "cta",
}


def normalize_format_rotation(rotation: Any) -> list[str]:
    """Turn a stored format rotation into a clean list of format names."""
    if not isinstance(rotation, (list, tuple)):
        return list(DEFAULT_FORMAT_ROTATION)
    cleaned = [item.strip() for item in rotation if isinstance(item, str) and item.strip()]
    return cleaned or list(DEFAULT_FORMAT_ROTATION)


def campaign_bible_block(context: Union[OutlineTaskContext, PostTaskContext]) -> str:
    bible = context.bible
    return "\n".join([
        f"Campaign Name: {context.campaign_name}",
        f"Theme: {context.theme}",
        f"Voice Style: {bible.voice_style}",
        f"Audience: {bible.audience}",
        f"Goal: {bible.goal}",
        f"Pillars: {' | '.join(bible.pillars)}",
        f"Forbidden: {' | '.join(bible.forbidden)}",
        f"CTA Preference: {bible.cta_preference or 'None specified'}",
    ])


# =============================================================================
# OUTLINES
# =============================================================================

def _outline_prompt(task_type: TaskType, context: OutlineTaskContext) -> str:
    template = context.template
    rotation = normalize_format_rotation(template.format_rotation)

    lines = [
        "You are generating a LinkedIn campaign outline.",
        campaign_bible_block(context),
        f"Template: {template.name}",
        *(
            f"Act {act} intent: {template.intent_for_act(act)}"
            for act in range(1, ACT_COUNT + 1)
        ),
        f"Format rotation suggestion: {' | '.join(rotation)}",
        "Each day must include title, hook, format, 3 keyPoints, and cta.",
        "Hooks must feel distinct across days.",
        JSON_REQUIREMENT,
    ]

    if task_type is TaskType.OUTLINE_ALL:
        lines += [
            f"Generate exactly {CAMPAIGN_DAYS} days. "
            f"Each act must have exactly {DAYS_PER_ACT} days.",
            f'Return schema: {{"days":[{OUTLINE_DAY_SCHEMA}]}}.',
        ]
    elif task_type is TaskType.OUTLINE_ACT:
        if context.target_act is None:
            raise ContractViolation("OUTLINE_ACT requires targetAct in the context.")
        start, end = act_window(context.target_act)
        lines += [
            f"Regenerate only Act {context.target_act}.",
            f"Generate exactly {DAYS_PER_ACT} days for dayNumber {start}-{end}.",
            f"All days in output must have actNumber {context.target_act}.",
            f"Each day object follows: {OUTLINE_DAY_SCHEMA}.",
            f'Return schema: {{"days":[{{...{DAYS_PER_ACT} entries...}}]}}.',
        ]
    elif task_type is TaskType.OUTLINE_DAY:
        if context.target_day is None:
            raise ContractViolation("OUTLINE_DAY requires targetDay in the context.")
        day = context.target_day
        lines += [
            f"Regenerate only day {day}.",
            "The output must include exactly one day object with "
            f"dayNumber {day} and actNumber {act_for_day(day)}.",
            f"Each day object follows: {OUTLINE_DAY_SCHEMA}.",
            'Return schema: {"days":[{...single entry...}]}.',
        ]
    else:
        raise ContractViolation(f"Unsupported outline task: {task_type.value}")

    return "\n".join(lines)


# =============================================================================
# POSTS
# =============================================================================

def _post_prompt(task_type: TaskType, context: PostTaskContext) -> str:
    lines = [
        "You are writing LinkedIn posts from a locked outline.",
        campaign_bible_block(context),
        "Rules:"
        "\n- Respect forbidden list exactly (if forbidden says no emojis, use no emojis)."
        "\n- LinkedIn style, skimmable, no markdown headings."
        f"\n- Keep each post <= {POST_MAX_CHARS} characters.",
        JSON_REQUIREMENT,
    ]

    if task_type is TaskType.POST_DAY:
        if context.target_day is None:
            raise ContractViolation("POST_DAY requires targetDay in the context.")
        day = context.outline_for_day(context.target_day)
        if day is None:
            raise ContractViolation(
                f"No outline found for target day {context.target_day}."
            )
        lines += [
            f"Target day: {day.day_number}",
            f"Title: {day.title}",
            f"Hook: {day.hook}",
            f"Format: {day.format}",
            f"Key points: {' | '.join(day.key_points)}",
            f"CTA: {day.cta}",
            f"Return schema: {POST_DAY_SCHEMA}.",
        ]
    elif task_type is TaskType.POST_ALL:
        outlines = [
            day.model_dump(by_alias=True, include=_POST_ALL_OUTLINE_FIELDS)
            for day in context.day_outlines
        ]
        lines += [
            f"Generate all {CAMPAIGN_DAYS} posts from these outlines:",
            json.dumps(outlines, ensure_ascii=False, separators=(",", ":")),
            f"Return schema: {POST_ALL_SCHEMA}.",
        ]
    else:
        raise ContractViolation(f"Unsupported post task: {task_type.value}")

    return "\n".join(lines)


def compose_prompt(
    task_type: Union[TaskType, str],
    context: Union[OutlineTaskContext, PostTaskContext],
) -> str:
    """Render a task request into the exact instruction text.

    Raises:
        ContractViolation: If the context kind does not match the task
            family, or a scoped task is missing its target
    """
    try:
        task_type = TaskType(task_type)
    except ValueError as e:
        raise ContractViolation(f"Unknown task type: {task_type!r}") from e

    kind = getattr(context, "kind", None)
    if kind != task_type.family:
        raise ContractViolation(
            f"{task_type.value} requires a context of kind {task_type.family!r}, got {kind!r}."
        )

    if task_type.family == "outline":
        return _outline_prompt(task_type, context)
    return _post_prompt(task_type, context)


def compose_fix_prompt(original_prompt: str, errors: list[str]) -> str:
    """Append the previous attempt's validation errors to the original prompt."""
    return "\n".join([
        original_prompt,
        "",
        "The previous response failed validation.",
        "Fix all issues and return valid JSON only.",
        f"Validation errors: {' | '.join(errors)}",
    ])
