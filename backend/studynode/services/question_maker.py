"""
Quiz question generation and answer validation.

generate_questions() asks for a mix of multiple-choice, short-answer and
true/false questions about a set of concepts. Replies are cleaned up:
  - unknown question types become short answer
  - multiple choice with fewer than two options becomes short answer
  - true/false always carries the options ["True", "False"]
  - questions without text or a correct answer are dropped

validate_answer() has the LLM grade a free-text answer on a 0-10 scale;
an answer passes at PASS_SCORE or above.
"""
from __future__ import annotations

import logging
import uuid

from studynode.models.flashcard import Concept, Difficulty
from studynode.models.study import AnswerValidation, Question, QuestionType
from studynode.services.concept_extractor import coerce_difficulty
from studynode.services.llm_service import LLMResponseError, chat_json

logger = logging.getLogger(__name__)

PASS_SCORE = 7
TRUE_FALSE_OPTIONS = ["True", "False"]

QUESTIONS_PROMPT = (
    "You are an expert quiz question creator for educational assessment. "
    "Create diverse, challenging questions that test understanding of concepts.\n\n"
    "Create a mix of:\n"
    "1. MCQ (Multiple Choice) - with 4 options, one correct\n"
    "2. Short Answer - requiring brief written response\n"
    "3. True/False - statement to evaluate\n\n"
    "Respond ONLY with valid JSON in exactly this structure:\n"
    '{"questions": [{"type": "mcq|short|truefalse", "question": "Question text", '
    '"options": ["Option A", "Option B", "Option C", "Option D"], '
    '"correctAnswer": "The correct answer", "explanation": "Why this is correct", '
    '"difficulty": "easy|medium|hard"}]}\n'
    'The "options" field is only for MCQ questions.'
)

VALIDATE_PROMPT = (
    "You are an expert educational assessor. "
    "Evaluate the user's answer compared to the correct answer, considering semantic "
    "similarity, key concept coverage, accuracy and completeness.\n\n"
    "Respond ONLY with valid JSON in exactly this structure:\n"
    '{"score": 8, "feedback": "Detailed feedback on the answer", '
    '"modelAnswer": "An ideal answer for reference"}\n'
    "Score is 0-10: 9-10 excellent, 7-8 mostly correct, 5-6 partial, "
    "3-4 limited, 0-2 incorrect or off-topic."
)


def _questions_prompt(
    concepts: list[Concept], count: int, summary: str, difficulty: Difficulty | None
) -> str:
    lines = "\n".join(f"- {c.term}: {c.definition}" for c in concepts)
    prompt = f"Create {count} quiz questions based on these concepts:\n\n{lines}\n"
    if summary:
        prompt += f"\nSummary context: {summary}\n"
    target = difficulty.value if difficulty else "mixed"
    return (
        prompt
        + f"\nTarget difficulty: {target}\n"
        "Include at least 2 MCQs and 1 True/False; the rest can be short answer.\n"
        "Respond with ONLY a valid JSON object."
    )


def _parse_question(raw: dict) -> Question | None:
    text = str(raw.get("question") or "").strip()
    answer = str(raw.get("correctAnswer") or "").strip()
    if not text or not answer:
        return None

    try:
        qtype = QuestionType(str(raw.get("type") or "").strip().lower())
    except ValueError:
        qtype = QuestionType.SHORT

    options: list[str] = []
    if qtype is QuestionType.MCQ:
        raw_options = raw.get("options")
        if isinstance(raw_options, list):
            options = [str(o).strip() for o in raw_options if str(o).strip()]
        if len(options) < 2:
            qtype, options = QuestionType.SHORT, []
    elif qtype is QuestionType.TRUE_FALSE:
        options = list(TRUE_FALSE_OPTIONS)

    return Question(
        id=f"q-{qtype.value}-{uuid.uuid4().hex[:12]}",
        type=qtype,
        question=text,
        options=options,
        correct_answer=answer,
        explanation=str(raw.get("explanation") or "").strip(),
        difficulty=coerce_difficulty(raw.get("difficulty")),
    )


async def generate_questions(
    concepts: list[Concept],
    count: int = 5,
    summary: str = "",
    difficulty: Difficulty | None = None,
) -> list[Question]:
    """Return at most count questions about the concepts. Empty input makes no LLM call."""
    if not concepts:
        return []

    result = await chat_json(
        QUESTIONS_PROMPT, _questions_prompt(concepts, count, summary, difficulty)
    )

    questions: list[Question] = []
    for raw in result.get("questions") or []:
        if not isinstance(raw, dict):
            continue
        question = _parse_question(raw)
        if question is not None:
            questions.append(question)

    logger.info("Generated %d questions from %d concepts", len(questions), len(concepts))
    return questions[:count]


async def validate_answer(question: str, user_answer: str, correct_answer: str) -> AnswerValidation:
    """Grade user_answer against correct_answer. Raises LLMResponseError without a usable score."""
    result = await chat_json(
        VALIDATE_PROMPT,
        f"Evaluate this answer:\n\nQuestion: {question}\n"
        f"User's Answer: {user_answer}\nCorrect Answer: {correct_answer}\n\n"
        "Respond with ONLY a valid JSON object.",
    )

    raw_score = result.get("score")
    if isinstance(raw_score, bool):
        raise LLMResponseError("LLM returned no numeric score")
    try:
        score = round(float(raw_score))  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise LLMResponseError("LLM returned no numeric score") from e
    score = max(0, min(10, score))

    return AnswerValidation(
        score=score,
        feedback=str(result.get("feedback") or "").strip(),
        model_answer=str(result.get("modelAnswer") or correct_answer).strip(),
        was_correct=score >= PASS_SCORE,
    )
