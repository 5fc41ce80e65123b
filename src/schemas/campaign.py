"""Campaign inputs for generation tasks.

A task context is built fresh by the caller for every task from the current
campaign state, then treated as read-only by every attempt of that task.
All models here are frozen.

The context is a tagged union on ``kind``:

  "outline" → OutlineTaskContext (needs the template's act intents)
  "post"    → PostTaskContext    (writes posts from locked outlines)
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from src.schemas.calendar import ACT_COUNT, CAMPAIGN_DAYS, act_for_day
from src.schemas.llm_outputs import CamelModel, OutlineDay

FROZEN = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class TaskType(str, Enum):
    """Kind of generation request: outline vs. post, at full/act/day scope."""

    OUTLINE_ALL = "OUTLINE_ALL"
    OUTLINE_ACT = "OUTLINE_ACT"
    OUTLINE_DAY = "OUTLINE_DAY"
    POST_DAY = "POST_DAY"
    POST_ALL = "POST_ALL"

    @property
    def family(self) -> Literal["outline", "post"]:
        return "outline" if self.value.startswith("OUTLINE") else "post"

    @property
    def is_full_scope(self) -> bool:
        return self in (TaskType.OUTLINE_ALL, TaskType.POST_ALL)


class CampaignBible(CamelModel):
    """Voice/audience/goal/pillars/forbidden/CTA guardrails for every prompt."""

    model_config = FROZEN

    voice_style: str
    audience: str
    goal: str
    pillars: tuple[str, ...] = ()
    forbidden: tuple[str, ...] = ()
    cta_preference: Optional[str] = None


class CampaignTemplate(CamelModel):
    """The narrative template an outline is generated against."""

    model_config = FROZEN

    name: str
    act1_intent: str
    act2_intent: str
    act3_intent: str
    # Stored rotations may be any JSON value; the composer normalizes them.
    format_rotation: Any = None

    def intent_for_act(self, act_number: int) -> str:
        return (self.act1_intent, self.act2_intent, self.act3_intent)[act_number - 1]


class OutlineDayInput(OutlineDay):
    """A stored day outline supplied by the caller.

    actNumber is derived from dayNumber. It may be omitted; if supplied it
    must agree with the day's act.
    """

    model_config = FROZEN

    @model_validator(mode="before")
    @classmethod
    def derive_act_number(cls, data: Any) -> Any:
        if isinstance(data, dict):
            day = data.get("dayNumber", data.get("day_number"))
            has_act = "actNumber" in data or "act_number" in data
            if isinstance(day, int) and not has_act and 1 <= day <= CAMPAIGN_DAYS:
                data = {**data, "actNumber": act_for_day(day)}
        return data

    @model_validator(mode="after")
    def act_matches_day(self) -> "OutlineDayInput":
        expected = act_for_day(self.day_number)
        if self.act_number != expected:
            raise ValueError(
                f"day {self.day_number} belongs to act {expected}, not {self.act_number}"
            )
        return self


class _TaskContextBase(CamelModel):
    model_config = FROZEN

    campaign_id: str
    campaign_name: str
    theme: str
    bible: CampaignBible
    day_outlines: tuple[OutlineDayInput, ...] = ()

    def outline_for_day(self, day_number: int) -> Optional[OutlineDayInput]:
        for day in self.day_outlines:
            if day.day_number == day_number:
                return day
        return None


class OutlineTaskContext(_TaskContextBase):
    """Context for OUTLINE_ALL / OUTLINE_ACT / OUTLINE_DAY."""

    kind: Literal["outline"] = "outline"
    template: CampaignTemplate
    target_act: Optional[int] = Field(default=None, ge=1, le=ACT_COUNT)
    target_day: Optional[int] = Field(default=None, ge=1, le=CAMPAIGN_DAYS)


class PostTaskContext(_TaskContextBase):
    """Context for POST_DAY / POST_ALL."""

    kind: Literal["post"] = "post"
    target_day: Optional[int] = Field(default=None, ge=1, le=CAMPAIGN_DAYS)


TaskContext = Annotated[
    Union[OutlineTaskContext, PostTaskContext],
    Field(discriminator="kind"),
]
