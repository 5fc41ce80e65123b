"""JSON extraction from LLM responses.

LLMs often wrap JSON in markdown code blocks, <think> tags, or preamble text.
This module recovers the single JSON object a generation task asked for.

Extraction order:
  (pre) strip a leading <think>...</think> block from reasoning models
  (a)   the trimmed text already is {...}     → use as-is
  (b)   a ```json fenced block is present     → use its contents
  (c)   first "{" to last "}"                 → use that slice

Failures raise JSONExtractionError, which the router treats as a retryable
validation error rather than a crash.
"""

import json
import re
from typing import Any, Optional

from src.errors import ExtractionError
from src.utils.logging import log, get_logger

MODULE = "llm.parser"
logger = get_logger()

NO_JSON_MESSAGE = "No JSON object found in model output."

_THINK_BLOCK = re.compile(r"\s*<think>(.*?)</think>", re.DOTALL)
_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


class JSONExtractionError(ExtractionError):
    """Raised when JSON cannot be extracted from LLM output."""

    def __init__(self, message: str, raw_output: str):
        super().__init__([message])
        self.raw_output = raw_output


def strip_think_tags(raw: str) -> tuple[str, Optional[str]]:
    """Strip a leading <think>...</think> block from reasoning model output.

    Only a block at the very start counts; tags inside the JSON body are
    content.

    Returns:
        Tuple of (content_after_think, thinking_content). If no tags are
        found the original text comes back with None.
    """
    think_match = _THINK_BLOCK.match(raw)
    if think_match:
        thinking = think_match.group(1)
        after = raw[think_match.end():].strip()
        return after, thinking
    return raw, None


def extract_json_text(raw: str) -> str:
    """Return the substring of ``raw`` that should hold the JSON object.

    Raises:
        JSONExtractionError: If no candidate object is present
    """
    text, thinking = strip_think_tags(raw.strip())
    if thinking is not None:
        log.debug(logger, MODULE, "stripped_think", "Stripped <think> tags from response")

    trimmed = text.strip()
    if trimmed.startswith("{") and trimmed.endswith("}"):
        return trimmed

    block = _FENCED_BLOCK.search(trimmed)
    if block and block.group(1).strip():
        return block.group(1).strip()

    first = trimmed.find("{")
    last = trimmed.rfind("}")
    if first >= 0 and last > first:
        return trimmed[first:last + 1]

    raise JSONExtractionError(NO_JSON_MESSAGE, raw_output=raw)


def extract_json(raw: str) -> dict[str, Any]:
    """Extract and parse the JSON object from LLM output.

    Args:
        raw: Raw LLM output string

    Returns:
        The parsed JSON object

    Raises:
        JSONExtractionError: If no object is present, it does not parse,
            or it parses to something other than an object
    """
    candidate = extract_json_text(raw)
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise JSONExtractionError(
            f"Model output is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno}).",
            raw_output=raw,
        ) from e

    if not isinstance(parsed, dict):
        raise JSONExtractionError(
            f"Expected a JSON object, got {type(parsed).__name__}.",
            raw_output=raw,
        )
    return parsed
