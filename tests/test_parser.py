"""Tests for JSON extraction from raw LLM output."""

import json

import pytest

from src.llm.parser import (
    NO_JSON_MESSAGE,
    JSONExtractionError,
    extract_json,
    extract_json_text,
)


def test_plain_object_used_as_is():
    assert extract_json_text('  {"a": 1}  \n') == '{"a": 1}'


def test_fenced_json_block():
    raw = 'Here:\n```json\n{"a":1}\n```'
    assert extract_json_text(raw) == '{"a":1}'
    assert extract_json(raw) == {"a": 1}


def test_unlabelled_fence():
    assert extract_json("Result:\n```\n{\"a\": 2}\n```\nDone.") == {"a": 2}


def test_prefix_and_suffix_text():
    raw = 'prefix {"a":1} suffix'
    assert extract_json_text(raw) == '{"a":1}'
    assert extract_json(raw) == {"a": 1}


def test_think_block_is_ignored():
    raw = '<think>maybe {"draft": true}</think>\n{"a": 3}'
    assert extract_json(raw) == {"a": 3}


def test_no_braces_fails():
    with pytest.raises(JSONExtractionError) as exc_info:
        extract_json("I could not produce an outline today.")
    assert exc_info.value.errors == [NO_JSON_MESSAGE]
    assert exc_info.value.stage == "extraction"


def test_unparseable_candidate_fails():
    with pytest.raises(JSONExtractionError) as exc_info:
        extract_json('Sure! {"days": [ }')
    assert "not valid JSON" in exc_info.value.errors[0]


def test_non_object_json_fails():
    with pytest.raises(JSONExtractionError) as exc_info:
        extract_json('```json\n[{"a": 1}]\n```')
    assert exc_info.value.errors == ["Expected a JSON object, got list."]


def test_think_tags_inside_json_are_content():
    raw = json.dumps({"a": "use <think>x</think> tags", "b": 1})
    assert extract_json_text(raw) == raw
    assert extract_json(raw) == {"a": "use <think>x</think> tags", "b": 1}


def test_only_leading_think_block_is_stripped():
    raw = '  <think>plan</think>\n{"note": "<think>kept</think>"}'
    assert extract_json(raw) == {"note": "<think>kept</think>"}
