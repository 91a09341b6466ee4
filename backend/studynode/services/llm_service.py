"""
LLM inference service for StudyNode.

Talks to any OpenAI-compatible chat completions endpoint (OpenAI or Groq,
picked by settings.llm_provider) and returns the model's JSON answer.

Usage:
    result_dict = await chat_json(system_prompt, user_prompt)
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any

import httpx

from studynode.config import settings

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_JSON_SPAN_RE = re.compile(r"(\{[\s\S]*\}|\[[\s\S]*\])")


class LLMError(Exception):
    """Base class for failures talking to the hosted LLM."""


class LLMUnavailableError(LLMError):
    """Raised when no provider is configured or the provider cannot be reached."""


class LLMResponseError(LLMError):
    """Raised when the provider answers but the content is empty or not JSON."""


def _provider_config() -> tuple[str, str, str]:
    """Return (base_url, api_key, model) for the configured provider."""
    provider = settings.llm_provider.lower()
    if provider == "groq":
        return settings.groq_base_url, settings.groq_api_key, settings.groq_model
    if provider == "openai":
        return settings.openai_base_url, settings.openai_api_key, settings.openai_model
    raise LLMUnavailableError(f"Unknown LLM provider: {settings.llm_provider!r}")


def parse_json_response(content: str) -> Any:
    """
    Parse JSON out of a model reply.

    Accepts bare JSON, JSON wrapped in ``` fences, or a JSON object/array
    surrounded by prose. Raises LLMResponseError when nothing parses.
    """
    if not content or not content.strip():
        raise LLMResponseError("Empty response from LLM")

    text = content.strip()
    fenced = _FENCE_RE.search(text)
    if fenced:
        text = fenced.group(1).strip()

    span = _JSON_SPAN_RE.search(text)
    if span:
        text = span.group(1)

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse LLM response as JSON: %.200s", content)
        raise LLMResponseError("Failed to parse LLM response as JSON") from e


async def chat_json(
    system_prompt: str,
    user_prompt: str,
    max_tokens: int | None = None,
    client: httpx.AsyncClient | None = None,
) -> dict:
    """
    Send a chat request to the configured provider expecting a JSON object back.

    Raises LLMUnavailableError if no API key is set, the request fails or the
    provider returns an error status.
    Raises LLMResponseError if the reply is empty or not a JSON object.
    """
    base_url, api_key, model = _provider_config()
    if not api_key:
        raise LLMUnavailableError(
            f"No API key configured for LLM provider {settings.llm_provider!r}"
        )

    payload = {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "max_completion_tokens": max_tokens or settings.llm_max_tokens,
    }
    headers = {"Authorization": f"Bearer {api_key}"}
    url = f"{base_url.rstrip('/')}/chat/completions"

    logger.info("Calling %s model %s", settings.llm_provider, model)
    try:
        if client is None:
            async with httpx.AsyncClient() as own_client:
                res = await own_client.post(
                    url, json=payload, headers=headers, timeout=settings.llm_timeout_s
                )
        else:
            res = await client.post(
                url, json=payload, headers=headers, timeout=settings.llm_timeout_s
            )
        res.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.warning("LLM provider returned %s", e.response.status_code)
        raise LLMUnavailableError(
            f"LLM provider error: {e.response.status_code}"
        ) from e
    except httpx.HTTPError as e:
        logger.warning("LLM request failed: %s", e)
        raise LLMUnavailableError(f"LLM request failed: {e}") from e

    try:
        data = res.json()
    except ValueError as e:
        raise LLMResponseError("LLM provider returned a non-JSON body") from e
    if not isinstance(data, dict):
        raise LLMResponseError("Unexpected LLM provider payload")

    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        raise LLMResponseError("Unexpected LLM provider payload")
    choice = choices[0]
    if choice.get("finish_reason") == "length":
        logger.warning("LLM response truncated by token limit")
    message = choice.get("message")
    if not isinstance(message, dict):
        raise LLMResponseError("Unexpected LLM provider payload")
    content = message.get("content") or ""
    if not isinstance(content, str):
        raise LLMResponseError("Unexpected LLM provider payload")

    result = parse_json_response(content)
    if not isinstance(result, dict):
        raise LLMResponseError("Expected a JSON object from LLM")
    return result
