"""Shared fixtures: a small campaign, payload builders, a scripted provider."""

from typing import Optional

import pytest

from src.config import GenerationConfig, ModelPair, ProviderSettings
from src.llm.providers import GenerationProvider
from src.schemas import (
    CampaignBible,
    CampaignTemplate,
    OutlineDayInput,
    OutlineTaskContext,
    PostTaskContext,
)
from src.schemas.calendar import act_for_day


class ScriptedProvider(GenerationProvider):
    """Replays canned replies in order; the last reply repeats.

    A reply that is an exception instance is raised instead of returned.
    """

    name = "scripted"

    def __init__(self, replies, models: Optional[ModelPair] = None):
        super().__init__(ProviderSettings(
            api_key="test-key",
            models=models or ModelPair(small="small-model", large="large-model"),
        ))
        self.replies = list(replies)
        self.calls: list[dict] = []

    async def generate_text(self, model, prompt, temperature=None, max_tokens=None):
        self.calls.append({
            "model": model,
            "prompt": prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        reply = self.replies[min(len(self.calls), len(self.replies)) - 1]
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def scripted_provider():
    return ScriptedProvider


@pytest.fixture
def config():
    return GenerationConfig(retry_budget=2)


# =============================================================================
# CAMPAIGN
# =============================================================================

def _outline_day(day: int) -> dict:
    return {
        "dayNumber": day,
        "actNumber": act_for_day(day),
        "title": f"Pricing lesson {day} for founders",
        "hook": f"Why founders underprice in week {day}",
        "format": "story",
        "keyPoints": ["Anchor on value", "Test price increases", "Talk to customers"],
        "cta": "Comment with your biggest pricing question",
    }


def _post_text(day: int) -> str:
    return (
        f"Day {day} lesson: pricing is a founders problem, not a finance one.\n"
        "Anchor every conversation on value.\n"
        "Comment below with your pricing question and I will answer it."
    )


@pytest.fixture
def make_outline_day():
    return _outline_day


@pytest.fixture
def make_post_text():
    return _post_text


@pytest.fixture
def outline_all_payload():
    return {"days": [_outline_day(day) for day in range(1, 31)]}


@pytest.fixture
def post_all_payload():
    return {
        "posts": [
            {"dayNumber": day, "text": _post_text(day), "altHooks": []}
            for day in range(1, 31)
        ]
    }


@pytest.fixture
def bible():
    return CampaignBible(
        voice_style="Direct, practical, no fluff",
        audience="Early-stage SaaS founders",
        goal="Book discovery calls",
        pillars=("pricing", "retention", "positioning"),
        forbidden=("emoji", "guaranteed results"),
        cta_preference="Invite comments",
    )


@pytest.fixture
def template():
    return CampaignTemplate(
        name="Authority Builder",
        act1_intent="worldview + credibility",
        act2_intent="frameworks + teaching",
        act3_intent="proof + invites",
        format_rotation=["story", "list", "mini-case"],
    )


@pytest.fixture
def day_outlines():
    return tuple(OutlineDayInput.model_validate(_outline_day(day)) for day in range(1, 31))


@pytest.fixture
def outline_context(bible, template, day_outlines):
    return OutlineTaskContext(
        campaign_id="camp-1",
        campaign_name="Pricing Month",
        theme="Pricing with confidence",
        bible=bible,
        template=template,
        day_outlines=day_outlines,
    )


@pytest.fixture
def post_context(bible, day_outlines):
    return PostTaskContext(
        campaign_id="camp-1",
        campaign_name="Pricing Month",
        theme="Pricing with confidence",
        bible=bible,
        day_outlines=day_outlines,
        target_day=5,
    )
