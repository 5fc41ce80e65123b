"""Structural and semantic validation of generation output.

Validation runs in phases; each phase only runs if the previous one passed:

  1. EXTRACT:    recover one JSON object from the raw text (parser.py)
  2. STRUCTURAL: validate against the task's Pydantic schema
  3. SEMANTIC:   business rules on the typed payload

Schema validation ensures the JSON has the right shape.
Semantic validation ensures the content is what the campaign asked for:

- Outlines: right number of days, unique day numbers, hooks not recycled,
  days inside the requested act window / matching the requested day
- Posts: no markdown headings, no forbidden phrases, topically aligned
  with the day outline, CTA intent carried over

Errors inside a phase are accumulated, never cut at the first hit. The
complete list goes back to the router, which feeds it verbatim into the
next attempt's fix prompt.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Literal, Type, Union

from pydantic import BaseModel, ValidationError

from src.errors import (
    ContractViolation,
    OutputValidationError,
    SemanticError,
    StructuralError,
)
from src.llm.parser import extract_json
from src.schemas.calendar import ACT_COUNT, CAMPAIGN_DAYS, DAYS_PER_ACT, act_for_day, act_window
from src.schemas.campaign import (
    OutlineDayInput,
    OutlineTaskContext,
    PostTaskContext,
    TaskContext,
    TaskType,
)
from src.schemas.llm_outputs import (
    POST_MAX_CHARS,
    OutlineResponse,
    PostAllResponse,
    PostDayResponse,
)
from src.utils.logging import log, get_logger

MODULE = "llm.validators"
logger = get_logger()

TASK_SCHEMAS: dict[TaskType, Type[BaseModel]] = {
    TaskType.OUTLINE_ALL: OutlineResponse,
    TaskType.OUTLINE_ACT: OutlineResponse,
    TaskType.OUTLINE_DAY: OutlineResponse,
    TaskType.POST_DAY: PostDayResponse,
    TaskType.POST_ALL: PostAllResponse,
}

EXPECTED_DAY_COUNT = {
    TaskType.OUTLINE_ALL: CAMPAIGN_DAYS,
    TaskType.OUTLINE_ACT: DAYS_PER_ACT,
    TaskType.OUTLINE_DAY: 1,
}

MAX_HOOK_REPEATS = 2
MIN_KEYWORD_OVERLAP = 2
MIN_KEYWORD_LENGTH = 4

STOP_WORDS = frozenset({
    "the", "and", "that", "with", "from", "this",
    "into", "your", "have", "will", "about", "their",
})

HEADING_LINE = re.compile(r"^#{1,6}\s", re.MULTILINE)
_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass(frozen=True)
class ValidationSuccess:
    data: BaseModel
    ok: Literal[True] = True


@dataclass(frozen=True)
class ValidationFailure:
    errors: list[str] = field(default_factory=list)
    stage: str = "validation"
    ok: Literal[False] = False


ValidationResult = Union[ValidationSuccess, ValidationFailure]


# =============================================================================
# HELPERS
# =============================================================================

def format_schema_errors(error: ValidationError) -> list[str]:
    """Flatten a Pydantic ValidationError into "path: message" strings."""
    messages = []
    for issue in error.errors():
        path = ".".join(str(part) for part in issue["loc"]) or "root"
        messages.append(f"{path}: {issue['msg']}")
    return messages


def significant_keywords(text: str) -> list[str]:
    """Distinct lower-cased tokens of 4+ characters that are not stop words."""
    tokens = _TOKEN_SPLIT.split(text.lower())
    keywords = (
        token for token in tokens
        if len(token) >= MIN_KEYWORD_LENGTH and token not in STOP_WORDS
    )
    return list(dict.fromkeys(keywords))


def _require_kind(task_type: TaskType, context: Any) -> None:
    kind = getattr(context, "kind", None)
    if kind != task_type.family:
        raise ContractViolation(
            f"{task_type.value} requires a context of kind {task_type.family!r}, got {kind!r}."
        )


# =============================================================================
# OUTLINE RULES
# =============================================================================

def validate_outline_rules(
    task_type: TaskType,
    payload: OutlineResponse,
    context: OutlineTaskContext,
) -> list[str]:
    """Check an outline batch against the scope it was requested for.

    Checks:
    1. Day count matches the scope (30 / 10 / 1)
    2. Day numbers are unique
    3. No hook is used more than twice (case-insensitive)
    4. OUTLINE_ALL: every act has exactly 10 days
    5. OUTLINE_ACT: every day sits in the target act and its window
    6. OUTLINE_DAY: the day is the target day with its derived act
    """
    errors: list[str] = []
    days = payload.days

    expected = EXPECTED_DAY_COUNT[task_type]
    if len(days) != expected:
        errors.append(f"Expected {expected} days, got {len(days)}.")

    day_numbers = [day.day_number for day in days]
    duplicates = sorted(n for n, count in Counter(day_numbers).items() if count > 1)
    if duplicates:
        errors.append(
            "Day numbers must be unique. Repeated: "
            + ", ".join(str(n) for n in duplicates) + "."
        )

    hook_counts = Counter(day.hook.strip().lower() for day in days)
    for hook, count in hook_counts.items():
        if count > MAX_HOOK_REPEATS:
            errors.append(
                f'Hook "{hook}" is used {count} times; '
                f"at most {MAX_HOOK_REPEATS} allowed."
            )

    if task_type is TaskType.OUTLINE_ALL:
        act_counts = [
            sum(1 for day in days if day.act_number == act)
            for act in range(1, ACT_COUNT + 1)
        ]
        if any(count != DAYS_PER_ACT for count in act_counts):
            errors.append(
                f"Each act must contain {DAYS_PER_ACT} days. "
                f"Got counts: {', '.join(str(c) for c in act_counts)}."
            )

    elif task_type is TaskType.OUTLINE_ACT:
        if context.target_act is None:
            raise ContractViolation("OUTLINE_ACT requires targetAct in the context.")
        target = context.target_act
        start, end = act_window(target)
        for day in days:
            if day.act_number != target:
                errors.append(
                    f"Day {day.day_number} has act {day.act_number}, expected {target}."
                )
            if not start <= day.day_number <= end:
                errors.append(
                    f"Day {day.day_number} outside expected range {start}-{end}."
                )

    elif task_type is TaskType.OUTLINE_DAY:
        if context.target_day is None:
            raise ContractViolation("OUTLINE_DAY requires targetDay in the context.")
        target = context.target_day
        expected_act = act_for_day(target)
        for day in days:
            if day.day_number != target:
                errors.append(f"Expected only day {target}, got day {day.day_number}.")
            if day.act_number != expected_act:
                errors.append(
                    f"Day {day.day_number} has act {day.act_number}, "
                    f"expected {expected_act}."
                )

    return errors


# =============================================================================
# POST RULES
# =============================================================================

def validate_post_text(
    text: str,
    forbidden: tuple[str, ...],
    outline: OutlineDayInput,
) -> list[str]:
    """Check one post against the campaign guardrails and its day outline.

    Checks:
    1. Length within the LinkedIn limit
    2. No markdown headings
    3. No forbidden phrase (case-insensitive substring)
    4. At least two outline keywords appear in the post (topical alignment)
    5. If the CTA has keywords, at least one appears in the post
    """
    errors: list[str] = []
    lowered = text.lower()

    if len(text) > POST_MAX_CHARS:
        errors.append(f"Post exceeds {POST_MAX_CHARS} characters.")

    if HEADING_LINE.search(text):
        errors.append("Post contains markdown headings.")

    for phrase in forbidden:
        token = phrase.strip()
        if token and token.lower() in lowered:
            errors.append(f"Forbidden phrase used: {token}")

    keywords = significant_keywords(
        " ".join([outline.title, outline.hook, *outline.key_points])
    )
    overlap = [token for token in keywords if token in lowered]
    if len(overlap) < MIN_KEYWORD_OVERLAP:
        errors.append("Post appears misaligned with day outline intent.")

    cta_keywords = significant_keywords(outline.cta)
    if cta_keywords and not any(token in lowered for token in cta_keywords):
        errors.append("Post does not reflect CTA intent.")

    return errors


def validate_post_day(payload: PostDayResponse, context: PostTaskContext) -> list[str]:
    if context.target_day is None:
        raise ContractViolation("POST_DAY requires targetDay in the context.")
    outline = context.outline_for_day(context.target_day)
    if outline is None:
        raise ContractViolation(f"No outline found for target day {context.target_day}.")
    return validate_post_text(payload.text, context.bible.forbidden, outline)


def validate_post_all(payload: PostAllResponse, context: PostTaskContext) -> list[str]:
    """Check a full batch of posts.

    A post whose day has no outline is reported for that day; the remaining
    posts are still checked.
    """
    errors: list[str] = []

    day_numbers = {post.day_number for post in payload.posts}
    if len(day_numbers) != CAMPAIGN_DAYS or len(payload.posts) != CAMPAIGN_DAYS:
        missing = sorted(set(range(1, CAMPAIGN_DAYS + 1)) - day_numbers)
        errors.append(
            f"POST_ALL must return {CAMPAIGN_DAYS} unique day numbers. "
            f"Missing: {', '.join(str(n) for n in missing) or 'none'}."
        )

    for post in payload.posts:
        outline = context.outline_for_day(post.day_number)
        if outline is None:
            errors.append(f"Post day {post.day_number} has no matching outline.")
            continue

        post_errors = validate_post_text(post.text, context.bible.forbidden, outline)
        if post_errors:
            errors.append(f"Day {post.day_number}: {'; '.join(post_errors)}")

    return errors


# =============================================================================
# PHASES
# =============================================================================

def parse_structure(task_type: TaskType, raw: str) -> BaseModel:
    """Phases 1+2: extract the JSON object and validate its shape.

    Raises:
        JSONExtractionError: If no JSON object can be recovered
        StructuralError: If the object does not match the task schema
    """
    parsed = extract_json(raw)
    schema = TASK_SCHEMAS[task_type]
    try:
        return schema.model_validate(parsed)
    except ValidationError as e:
        raise StructuralError(format_schema_errors(e)) from e


def check_semantics(task_type: TaskType, payload: BaseModel, context: TaskContext) -> None:
    """Phase 3: business rules on a structurally valid payload.

    Raises:
        SemanticError: With every rule violation found
        ContractViolation: If the context cannot support the task
    """
    _require_kind(task_type, context)

    if task_type.family == "outline":
        errors = validate_outline_rules(task_type, payload, context)
    elif task_type is TaskType.POST_DAY:
        errors = validate_post_day(payload, context)
    else:
        errors = validate_post_all(payload, context)

    if errors:
        raise SemanticError(errors)


def validate_output(
    task_type: Union[TaskType, str],
    raw_output: str,
    context: TaskContext,
) -> ValidationResult:
    """Run extraction, structural and semantic validation on raw output.

    Returns:
        ValidationSuccess with the typed payload, or ValidationFailure with
        the complete error list of the phase that rejected it

    Raises:
        ContractViolation: If the context does not fit the task type
    """
    try:
        task_type = TaskType(task_type)
    except ValueError as e:
        raise ContractViolation(f"Unknown task type: {task_type!r}") from e
    _require_kind(task_type, context)

    try:
        payload = parse_structure(task_type, raw_output)
        check_semantics(task_type, payload, context)
    except OutputValidationError as e:
        log.debug(logger, MODULE, "validation_failed",
                  f"{e.stage.capitalize()} validation failed for {task_type.value}",
                  stage=e.stage, error_count=len(e.errors))
        return ValidationFailure(errors=e.errors, stage=e.stage)

    return ValidationSuccess(data=payload)
