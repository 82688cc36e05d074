"""Tests for the LLM structuring client (fake OpenAI client, no network)."""

import asyncio

import pytest

from cv_pipeline.cv_extractor import CandidateStructurer, build_openai_client
from cv_pipeline.cv_schema import SCHEMA_NAME, build_candidate_schema
from cv_pipeline.errors import MalformedModelOutput, ModelUnavailable, NoCandidateFound

from fakes import (
    RESUME_TEXT,
    FakeOpenAIClient,
    completion,
    connection_error,
    make_config,
    reply,
    status_error,
    timeout_error,
)


def _structure(replies, text=RESUME_TEXT, **config_overrides):
    client = FakeOpenAIClient(replies)
    structurer = CandidateStructurer(make_config(**config_overrides), client=client)
    return asyncio.run(structurer.structure(text)), client


def _structure_error(replies, **config_overrides):
    with pytest.raises(Exception) as exc_info:
        _structure(replies, **config_overrides)
    return exc_info.value


def test_structures_candidate():
    candidate, client = _structure(
        [reply({"first_name": "Jane", "last_name": "Doe", "email": "jane@x.com", "skills": ["Go", "Rust"],
                "phone": None, "summary": None})]
    )
    assert candidate.first_name == "Jane"
    assert candidate.skills == ["Go", "Rust"]
    assert candidate.present_fields() == ["first_name", "last_name", "email", "skills"]


def test_request_uses_strict_schema_by_default():
    _, client = _structure([reply({"first_name": "Jane"})])
    call = client.completions.calls[0]
    assert call["model"] == "gpt-4o-mini"
    assert call["temperature"] == 0.1
    fmt = call["response_format"]
    assert fmt["type"] == "json_schema"
    assert fmt["json_schema"]["name"] == SCHEMA_NAME
    assert fmt["json_schema"]["strict"] is True
    assert call["messages"][0]["role"] == "system"
    assert RESUME_TEXT in call["messages"][1]["content"]


def test_json_object_mode_describes_schema_in_prompt():
    _, client = _structure([reply({"first_name": "Jane"})], structured_output_mode="json_object")
    call = client.completions.calls[0]
    assert call["response_format"] == {"type": "json_object"}
    assert "Return only valid JSON" in call["messages"][0]["content"]


def test_long_text_is_truncated():
    text = "Jane Doe " * 200
    _, client = _structure([reply({"first_name": "Jane"})], text=text, max_input_chars=100)
    content = client.completions.calls[0]["messages"][1]["content"]
    assert content.endswith("[Content truncated.]")
    assert text.strip() not in content


def test_code_fences_are_stripped():
    fenced = "```json\n" + reply({"first_name": "Jane"}) + "\n```"
    candidate, _ = _structure([fenced])
    assert candidate.first_name == "Jane"


@pytest.mark.parametrize("content", ["not json", "[1, 2]", '"Jane"', '{"success": "maybe"}'])
def test_malformed_output(content):
    assert isinstance(_structure_error([content]), MalformedModelOutput)


def test_empty_content_is_malformed():
    assert isinstance(_structure_error([completion(None)]), MalformedModelOutput)


def test_success_false_is_no_candidate():
    error = _structure_error([reply(None, success=False, error="Text is a cooking recipe")])
    assert isinstance(error, NoCandidateFound)
    assert error.message == "Text is a cooking recipe"


def test_success_false_without_reason_uses_default_message():
    error = _structure_error([reply(None, success=False)])
    assert isinstance(error, NoCandidateFound)
    assert error.message == NoCandidateFound.default_message


def test_invalid_fields_dropped_not_fatal():
    candidate, _ = _structure([reply({"first_name": "Jane", "experience_years": "ten", "skills": "Go"})])
    assert candidate.first_name == "Jane"
    assert candidate.experience_years is None
    assert candidate.skills is None


@pytest.mark.parametrize("make_error", [connection_error, timeout_error, lambda: status_error(500),
                                        lambda: status_error(429)])
def test_transient_errors_are_retryable(make_error):
    error = _structure_error([make_error()])
    assert isinstance(error, ModelUnavailable)
    assert error.retryable is True


def test_client_errors_are_not_retryable():
    error = _structure_error([status_error(400)])
    assert isinstance(error, ModelUnavailable)
    assert error.retryable is False
    assert "bad request" not in error.message


def test_missing_api_key():
    with pytest.raises(ModelUnavailable) as exc_info:
        build_openai_client(make_config(openai_api_key=""))
    assert exc_info.value.retryable is False


def test_schema_marks_every_property_required():
    schema = build_candidate_schema()
    candidate = schema["properties"]["candidate"]
    assert set(candidate["required"]) == set(candidate["properties"])
    assert candidate["additionalProperties"] is False
    assert "null" in candidate["properties"]["skills"]["type"]
