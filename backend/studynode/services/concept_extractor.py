"""
Concept extraction service.

Sends a note's text (truncated to MAX_INPUT_CHARS) to the LLM via
llm_service.chat_json() and parses {"concepts": [{"term", "definition",
"difficulty", "category"}]}. Entries without a term are skipped and every
concept gets a fresh id.
"""
from __future__ import annotations

import logging
import uuid

from studynode.models.flashcard import Concept, Difficulty
from studynode.services.llm_service import chat_json

logger = logging.getLogger(__name__)

MAX_INPUT_CHARS = 8000

SYSTEM_PROMPT = (
    "Extract key concepts from educational text. Respond with ONLY valid JSON.\n\n"
    'Format: {"concepts":[{"term":"Name","definition":"Definition",'
    '"difficulty":"easy|medium|hard","category":"Category"}]}\n\n'
    "Extract 4-8 important concepts."
)


def _user_prompt(text: str) -> str:
    return (
        f"Extract concepts from:\n\n{text[:MAX_INPUT_CHARS]}\n\n"
        "Respond with ONLY valid JSON."
    )


def coerce_difficulty(value: object) -> Difficulty:
    try:
        return Difficulty(str(value).strip().lower())
    except ValueError:
        return Difficulty.MEDIUM


async def extract_concepts(text: str) -> list[Concept]:
    """Ask the LLM for the key concepts in text. LLM errors propagate to the caller."""
    result = await chat_json(SYSTEM_PROMPT, _user_prompt(text))

    concepts: list[Concept] = []
    for raw in result.get("concepts") or []:
        if not isinstance(raw, dict):
            continue
        term = str(raw.get("term") or "").strip()
        if not term:
            continue
        concepts.append(
            Concept(
                id=f"concept-{uuid.uuid4().hex[:12]}",
                term=term,
                definition=str(raw.get("definition") or "").strip(),
                difficulty=coerce_difficulty(raw.get("difficulty")),
                category=str(raw.get("category") or "").strip(),
            )
        )

    logger.info("Extracted %d concepts", len(concepts))
    return concepts
