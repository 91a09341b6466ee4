"""
Doubt resolver: answers casual chat briefly and study questions in depth.

The LLM labels its reply "chat" or "doubt". Anything that is not labelled
"chat" is treated as a study doubt; a doubt reply without any explanation
is rejected.
"""
from __future__ import annotations

import logging

from studynode.models.study import DoubtAnswer
from studynode.services.llm_service import LLMResponseError, chat_json

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a friendly AI study assistant. First decide whether the user is asking "
    "a STUDY/ACADEMIC doubt or just having CASUAL CHAT.\n\n"
    'For casual chat respond with: {"type": "chat", "reply": "short friendly reply"}\n\n'
    "For study doubts respond with:\n"
    '{"type": "doubt", "simpleExplanation": "2-3 sentence explanation", '
    '"detailedExplanation": "Comprehensive explanation with examples", '
    '"analogy": "Real-world analogy", "oneLiner": "One catchy sentence", '
    '"stepByStep": ["Step 1", "Step 2", "Step 3"]}\n\n'
    "Respond with ONLY valid JSON."
)


def _text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


async def resolve_doubt(doubt: str, context: str = "") -> DoubtAnswer:
    if context:
        user_prompt = (
            f"User message: {doubt}\n\nContext from their notes:\n{context}\n\n"
            "Respond appropriately based on whether this is casual chat or a study doubt."
        )
    else:
        user_prompt = (
            f"User message: {doubt}\n\nIf it's casual chat, keep it short and friendly. "
            "If it's a study question, provide a detailed explanation."
        )
    result = await chat_json(SYSTEM_PROMPT, user_prompt, max_tokens=2000)

    if str(result.get("type") or "").strip().lower() == "chat":
        reply = _text(result.get("reply"))
        if reply is None:
            raise LLMResponseError("LLM returned an empty chat reply")
        return DoubtAnswer(type="chat", reply=reply)

    steps = result.get("stepByStep")
    answer = DoubtAnswer(
        type="doubt",
        simple_explanation=_text(result.get("simpleExplanation")),
        detailed_explanation=_text(result.get("detailedExplanation")),
        analogy=_text(result.get("analogy")),
        one_liner=_text(result.get("oneLiner")),
        step_by_step=[s for s in (_text(v) for v in steps) if s] if isinstance(steps, list) else [],
    )
    if not (answer.simple_explanation or answer.detailed_explanation):
        raise LLMResponseError("LLM returned no explanation")
    logger.info("Resolved study doubt (%d steps)", len(answer.step_by_step))
    return answer
