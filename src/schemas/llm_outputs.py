"""Pydantic schemas for LLM outputs.

These schemas define the EXACT structure expected from each generation task.
All LLM responses are validated against these schemas before any business
rule runs on them.

Field names are snake_case in Python and camelCase on the wire
(dayNumber, keyPoints, altHooks); dump with ``by_alias=True`` to get the
wire format back.

  OUTLINE_ALL / OUTLINE_ACT / OUTLINE_DAY → OutlineResponse {"days": [...]}
  POST_DAY                                → PostDayResponse {"text", "altHooks"}
  POST_ALL                                → PostAllResponse {"posts": [...30...]}
"""

from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.schemas.calendar import ACT_COUNT, CAMPAIGN_DAYS

POST_MIN_CHARS = 30
POST_MAX_CHARS = 2200
MAX_ALT_HOOKS = 3
KEY_POINT_COUNT = 3


def _json_number(value):
    """Accept JSON numbers only; 25.0 passes, "25" and true do not."""
    if isinstance(value, (str, bool)):
        raise ValueError("must be a JSON number")
    return value


# Integral floats coerce to int, fractional ones fail int validation.
JSONInt = Annotated[int, BeforeValidator(_json_number)]


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# OUTLINES
# =============================================================================

class OutlineDay(CamelModel):
    """One day's content skeleton."""

    day_number: JSONInt = Field(..., ge=1, le=CAMPAIGN_DAYS)
    act_number: JSONInt = Field(..., ge=1, le=ACT_COUNT)
    title: str = Field(..., min_length=3)
    hook: str = Field(..., min_length=3)
    format: str = Field(..., min_length=2)
    key_points: list[str] = Field(
        ...,
        min_length=KEY_POINT_COUNT,
        max_length=KEY_POINT_COUNT,
        description="Exactly three talking points",
    )
    cta: str = Field(..., min_length=3)
    constraints: Optional[str] = None

    @field_validator("key_points")
    @classmethod
    def key_points_not_blank(cls, v: list[str]) -> list[str]:
        if any(not point.strip() for point in v):
            raise ValueError("key points must be non-empty strings")
        return v


class OutlineResponse(CamelModel):
    """Reply shape shared by all three outline tasks."""

    days: list[OutlineDay]


# =============================================================================
# POSTS
# =============================================================================

AltHook = Annotated[str, Field(min_length=3)]


class PostDayResponse(CamelModel):
    """Reply shape for POST_DAY: the day is implied by the request."""

    text: str = Field(..., min_length=POST_MIN_CHARS, max_length=POST_MAX_CHARS)
    alt_hooks: list[AltHook] = Field(default_factory=list, max_length=MAX_ALT_HOOKS)


class PostDay(PostDayResponse):
    """One post inside a POST_ALL batch."""

    day_number: JSONInt = Field(..., ge=1, le=CAMPAIGN_DAYS)


class PostAllResponse(CamelModel):
    """Reply shape for POST_ALL. Length is checked before duplicates."""

    posts: list[PostDay] = Field(
        ..., min_length=CAMPAIGN_DAYS, max_length=CAMPAIGN_DAYS
    )
