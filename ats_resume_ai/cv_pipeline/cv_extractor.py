"""LLM-based structuring of résumé text into a candidate record."""

import json
import re
from typing import Any, Optional

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError

from config import PipelineConfig
from cv_pipeline.cv_schema import response_format, system_prompt
from cv_pipeline.errors import MalformedModelOutput, ModelUnavailable, NoCandidateFound
from schemas.candidate import StructuredCandidate
from utils.helpers import truncate
from utils.logger import get_logger

logger = get_logger(__name__)


class _ModelReply(BaseModel):
    """Top-level shape of the model's JSON answer."""

    success: bool = True
    candidate: Optional[dict] = None
    error: Optional[str] = None


def _parse_llm_json(text: str) -> Optional[Any]:
    """Parse JSON from LLM response, stripping markdown code blocks if present."""
    raw = (text or "").strip()
    if raw.startswith("```"):
        raw = re.sub(r"^```(?:json)?\s*", "", raw)
        raw = re.sub(r"\s*```$", "", raw)
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return None


def build_openai_client(config: PipelineConfig) -> AsyncOpenAI:
    """Client without SDK-level retries; the retry controller owns retrying."""
    if not config.openai_api_key:
        raise ModelUnavailable("OpenAI API key not configured")
    return AsyncOpenAI(
        api_key=config.openai_api_key,
        timeout=config.llm_timeout_seconds,
        max_retries=0,
    )


class CandidateStructurer:
    """Sends extracted text to the chat-completions endpoint and validates the reply."""

    def __init__(self, config: PipelineConfig, client: Optional[AsyncOpenAI] = None) -> None:
        self._config = config
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = build_openai_client(self._config)
        return self._client

    async def _complete(self, text: str) -> str:
        mode = self._config.structured_output_mode
        content = truncate(text.strip(), self._config.max_input_chars)
        try:
            response = await self._get_client().chat.completions.create(
                model=self._config.model_name,
                messages=[
                    {"role": "system", "content": system_prompt(mode)},
                    {"role": "user", "content": f"Extract candidate information from this resume text:\n\n{content}"},
                ],
                response_format=response_format(mode),
                temperature=0.1,
                max_tokens=1500,
            )
        except (openai.APIConnectionError, openai.RateLimitError, openai.InternalServerError) as e:
            # APITimeoutError is an APIConnectionError
            logger.warning("LLM call failed (transient): %s", type(e).__name__)
            raise ModelUnavailable("Resume analysis service is temporarily unavailable", retryable=True) from e
        except openai.APIStatusError as e:
            logger.error("LLM call rejected: status=%s", e.status_code)
            raise ModelUnavailable(f"Resume analysis request failed: {e.status_code}") from e

        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message or not choice.message.content:
            raise MalformedModelOutput("Resume analysis returned an empty response")
        return choice.message.content

    async def structure(self, text: str) -> StructuredCandidate:
        """
        Structure résumé text. Raises ModelUnavailable, MalformedModelOutput or
        NoCandidateFound; invalid individual fields are dropped, not fatal.
        """
        parsed = _parse_llm_json(await self._complete(text))
        if not isinstance(parsed, dict):
            logger.warning("LLM output is not a JSON object")
            raise MalformedModelOutput()
        try:
            reply = _ModelReply(**parsed)
        except ValidationError as e:
            logger.warning("LLM output validation failed: %s", e.error_count())
            raise MalformedModelOutput() from e
        if not reply.success:
            raise NoCandidateFound(reply.error or None)
        candidate = StructuredCandidate.from_model_output(reply.candidate or {})
        logger.info("LLM structured candidate: fields=%s", candidate.present_fields())
        return candidate
