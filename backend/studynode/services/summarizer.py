"""
Note summarization service.

Asks the LLM for {"oneLiner", "shortSummary", "detailedBullets"} and
normalises the reply into a Summary. Input is truncated to MAX_INPUT_CHARS.
"""
from __future__ import annotations

import logging

from studynode.models.study import Summary
from studynode.services.llm_service import LLMResponseError, chat_json

logger = logging.getLogger(__name__)

MAX_INPUT_CHARS = 8000

SYSTEM_PROMPT = (
    "You are a friendly AI study companion. Summarize notes in JSON format.\n"
    "Respond with ONLY valid JSON, no other text.\n"
    "Required format:\n"
    '{"oneLiner": "Catchy one-sentence summary", "shortSummary": "2-3 sentence overview", '
    '"detailedBullets": ["Point 1", "Point 2", "Point 3"]}\n'
    "Use simple language and helpful analogies."
)


def _user_prompt(text: str, title: str) -> str:
    heading = f" ({title})" if title else ""
    return (
        f"Summarize these notes{heading}:\n\n{text[:MAX_INPUT_CHARS]}\n\n"
        "Respond with ONLY valid JSON."
    )


def _clean_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip()]


async def summarize(text: str, title: str = "") -> Summary:
    result = await chat_json(SYSTEM_PROMPT, _user_prompt(text, title))

    short_summary = str(result.get("shortSummary") or "").strip()
    bullets = _clean_list(result.get("detailedBullets"))
    if not short_summary and not bullets:
        raise LLMResponseError("LLM returned an empty summary")

    return Summary(
        one_liner=str(result.get("oneLiner") or "").strip(),
        short_summary=short_summary,
        detailed_bullets=bullets,
    )
