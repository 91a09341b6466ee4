"""
Quiz & Spaced Repetition router.

Endpoints:
  GET  /quiz/due             — cards due for review today, plus weak cards
  GET  /quiz/retention       — due cards, weak concepts and study suggestions
  POST /quiz/{id}/review     — record a right/wrong answer for a card
  POST /quiz/validate        — grade a free-text answer with the LLM
  GET  /quiz/cards           — list all cards (optionally filtered by note_id)
  GET  /quiz/stats           — summary stats (totals, reviewed today, per-note)
  GET  /quiz/{id}            — single card
  PATCH/quiz/{id}            — edit question / answer / difficulty
  DELETE /quiz/{id}          — delete card
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException, Query

from studynode.db.sqlite import (
    delete_flashcard,
    get_db,
    get_flashcard,
    get_review_stats,
    list_flashcards,
    record_review,
    update_flashcard_content,
)
from studynode.models.flashcard import (
    DueCards,
    Flashcard,
    FlashcardList,
    FlashcardUpdate,
    RetentionReportOut,
    ReviewRequest,
    ReviewResult,
)
from studynode.models.study import AnswerValidation, AnswerValidationRequest
from studynode.routers import llm_http_error
from studynode.services.llm_service import LLMError
from studynode.services.question_maker import validate_answer
from studynode.services.retention import analyze_retention
from studynode.services.review_scheduler import (
    ReviewableItem,
    next_review_at,
    select_due_items,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _as_reviewable(card: Flashcard) -> ReviewableItem:
    return ReviewableItem(
        id=card.id,
        prompt_text=card.question,
        last_reviewed_at=card.last_reviewed_at,
        times_reviewed=card.times_reviewed,
        last_outcome_correct=card.last_outcome_correct,
    )


async def _snapshot(
    db: aiosqlite.Connection, note_id: str | None
) -> tuple[dict[str, Flashcard], list[ReviewableItem]]:
    cards, _ = await list_flashcards(db, note_id=note_id, limit=None)
    return {c.id: c for c in cards}, [_as_reviewable(c) for c in cards]


# --- Endpoints ---

@router.get("/due", response_model=DueCards)
async def get_due(
    note_id: str | None = Query(default=None),
    db: aiosqlite.Connection = Depends(get_db),
) -> DueCards:
    """Return cards due for review now and cards last answered wrong, in creation order."""
    by_id, items = await _snapshot(db, note_id)
    selection = select_due_items(items, datetime.now(timezone.utc))
    return DueCards(
        due=[by_id[i.id] for i in selection.due],
        weak=[by_id[i.id] for i in selection.weak],
    )


@router.get("/retention", response_model=RetentionReportOut)
async def get_retention(
    note_id: str | None = Query(default=None),
    db: aiosqlite.Connection = Depends(get_db),
) -> RetentionReportOut:
    by_id, items = await _snapshot(db, note_id)
    report = analyze_retention(items, datetime.now(timezone.utc))
    return RetentionReportOut(
        cards_to_review=[by_id[i.id] for i in report.cards_to_review],
        weak_concepts=report.weak_concepts,
        suggestions=report.suggestions,
    )


@router.post("/{card_id}/review", response_model=ReviewResult)
async def review_card(
    card_id: str,
    body: ReviewRequest,
    db: aiosqlite.Connection = Depends(get_db),
) -> ReviewResult:
    """Record one review outcome for a flashcard."""
    updated = await record_review(db, card_id, body.correct)
    if not updated:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    if updated.last_reviewed_at is None:
        raise HTTPException(status_code=500, detail="Failed to record review")

    logger.info(
        "Card %s reviewed (correct=%s, times_reviewed=%d)",
        card_id, body.correct, updated.times_reviewed,
    )
    return ReviewResult(
        id=card_id,
        times_reviewed=updated.times_reviewed,
        last_reviewed_at=updated.last_reviewed_at,
        last_outcome_correct=body.correct,
        next_review_at=next_review_at(_as_reviewable(updated)),
    )


@router.post("/validate", response_model=AnswerValidation)
async def validate(body: AnswerValidationRequest) -> AnswerValidation:
    """Score a free-text answer 0-10 against the expected answer."""
    try:
        return await validate_answer(body.question, body.user_answer, body.correct_answer)
    except LLMError as e:
        logger.warning("Answer validation failed: %s", e)
        raise llm_http_error(e) from e


@router.get("/cards", response_model=FlashcardList)
async def list_cards(
    note_id: str | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    db: aiosqlite.Connection = Depends(get_db),
) -> FlashcardList:
    """List all flashcards, optionally filtered by note."""
    items, total = await list_flashcards(db, note_id=note_id, offset=offset, limit=limit)
    return FlashcardList(items=items, total=total)


@router.get("/stats")
async def quiz_stats(db: aiosqlite.Connection = Depends(get_db)) -> dict:
    """Return summary statistics with the number of cards due right now."""
    stats = await get_review_stats(db)
    _, items = await _snapshot(db, None)
    stats["due_now"] = len(select_due_items(items, datetime.now(timezone.utc)).due)
    return stats


@router.get("/{card_id}", response_model=Flashcard)
async def get_card(
    card_id: str,
    db: aiosqlite.Connection = Depends(get_db),
) -> Flashcard:
    card = await get_flashcard(db, card_id)
    if not card:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    return card


@router.patch("/{card_id}", response_model=Flashcard)
async def edit_card(
    card_id: str,
    body: FlashcardUpdate,
    db: aiosqlite.Connection = Depends(get_db),
) -> Flashcard:
    updated = await update_flashcard_content(db, card_id, body)
    if not updated:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    return updated


@router.delete("/{card_id}", status_code=204)
async def remove_card(
    card_id: str,
    db: aiosqlite.Connection = Depends(get_db),
) -> None:
    deleted = await delete_flashcard(db, card_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Flashcard not found")
