"""
Flashcard generation service.

Given extracted concepts:
  1. Calls the LLM via llm_service.chat_json()
  2. Parses {"flashcards": [{"question", "answer", "difficulty"}]}
  3. Returns drafts; persisting them is the caller's job

Cards with a blank question or answer are dropped.
"""
from __future__ import annotations

import logging

from studynode.models.flashcard import Concept, FlashcardDraft
from studynode.services.concept_extractor import coerce_difficulty
from studynode.services.llm_service import chat_json

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert flashcard creator for effective learning. "
    "Create engaging, educational flashcards that help students learn and remember concepts.\n\n"
    "For each concept, create:\n"
    "1. A clear, specific question\n"
    "2. A comprehensive but concise answer\n"
    '3. Vary question types: "What is...", "Explain...", "How does...", "Why is...", etc.\n\n'
    "Also create 1-2 additional flashcards that test understanding across multiple concepts.\n\n"
    "Respond ONLY with valid JSON in exactly this structure:\n"
    '{"flashcards": [{"question": "string", "answer": "string", '
    '"difficulty": "easy|medium|hard"}]}'
)


def _user_prompt(concepts: list[Concept], additional_context: str) -> str:
    lines = "\n".join(
        f"- {c.term}: {c.definition} (Difficulty: {c.difficulty.value})" for c in concepts
    )
    prompt = f"Create flashcards for these concepts:\n\n{lines}\n"
    if additional_context:
        prompt += f"\nAdditional context: {additional_context}\n"
    return prompt + "\nRespond with ONLY a valid JSON object."


async def generate_flashcards(
    concepts: list[Concept],
    additional_context: str = "",
) -> list[FlashcardDraft]:
    """Return flashcard drafts for the given concepts. Empty input makes no LLM call."""
    if not concepts:
        return []

    result = await chat_json(SYSTEM_PROMPT, _user_prompt(concepts, additional_context))

    drafts: list[FlashcardDraft] = []
    for card in result.get("flashcards") or []:
        if not isinstance(card, dict):
            continue
        question = str(card.get("question") or "").strip()
        answer = str(card.get("answer") or "").strip()
        if not question or not answer:
            continue
        drafts.append(
            FlashcardDraft(
                question=question,
                answer=answer,
                difficulty=coerce_difficulty(card.get("difficulty")),
            )
        )

    logger.info("Generated %d flashcards from %d concepts", len(drafts), len(concepts))
    return drafts
