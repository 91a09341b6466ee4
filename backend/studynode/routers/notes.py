import logging

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException, Query

from studynode.db.sqlite import (
    create_note,
    delete_note,
    get_db,
    get_note,
    insert_flashcards,
    list_notes,
    update_note,
)
from studynode.models.flashcard import ConceptList, FlashcardList, GenerateFlashcardsRequest
from studynode.models.note import Note, NoteCreate, NoteList, NoteUpdate
from studynode.models.study import GenerateQuestionsRequest, QuestionList, Summary
from studynode.routers import llm_http_error
from studynode.services.concept_extractor import extract_concepts
from studynode.services.flashcard_generator import generate_flashcards
from studynode.services.llm_service import LLMError
from studynode.services.question_maker import generate_questions
from studynode.services.summarizer import summarize

logger = logging.getLogger(__name__)
router = APIRouter()


async def _require_note(db: aiosqlite.Connection, note_id: str) -> Note:
    note = await get_note(db, note_id)
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return note


@router.post("/", response_model=Note, status_code=201)
async def create(body: NoteCreate, db: aiosqlite.Connection = Depends(get_db)):
    return await create_note(db, body)


@router.get("/", response_model=NoteList)
async def list_all(
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    db: aiosqlite.Connection = Depends(get_db),
):
    items, total = await list_notes(db, offset, limit)
    return NoteList(items=items, total=total, offset=offset, limit=limit)


@router.get("/{note_id}", response_model=Note)
async def get_one(note_id: str, db: aiosqlite.Connection = Depends(get_db)):
    return await _require_note(db, note_id)


@router.patch("/{note_id}", response_model=Note)
async def update(
    note_id: str, body: NoteUpdate, db: aiosqlite.Connection = Depends(get_db)
):
    note = await update_note(db, note_id, body)
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return note


@router.delete("/{note_id}", status_code=204)
async def delete(note_id: str, db: aiosqlite.Connection = Depends(get_db)):
    deleted = await delete_note(db, note_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Note not found")


@router.post("/{note_id}/concepts", response_model=ConceptList)
async def concepts(note_id: str, db: aiosqlite.Connection = Depends(get_db)):
    """Extract the key concepts of a note with the LLM."""
    note = await _require_note(db, note_id)
    try:
        items = await extract_concepts(note.content)
    except LLMError as e:
        logger.warning("Concept extraction failed for note %s: %s", note_id, e)
        raise llm_http_error(e) from e
    return ConceptList(items=items, total=len(items))


@router.post("/{note_id}/flashcards", response_model=FlashcardList, status_code=201)
async def flashcards(
    note_id: str,
    body: GenerateFlashcardsRequest | None = None,
    db: aiosqlite.Connection = Depends(get_db),
):
    """Generate flashcards for a note and store them as never-reviewed cards.

    Concepts are extracted from the note first unless the caller supplies them.
    """
    note = await _require_note(db, note_id)
    body = body or GenerateFlashcardsRequest()
    try:
        concept_items = body.concepts or await extract_concepts(note.content)
        drafts = await generate_flashcards(concept_items, body.additional_context)
    except LLMError as e:
        logger.warning("Flashcard generation failed for note %s: %s", note_id, e)
        raise llm_http_error(e) from e

    cards = await insert_flashcards(db, note_id, drafts)
    return FlashcardList(items=cards, total=len(cards))


@router.post("/{note_id}/summary", response_model=Summary)
async def summary(note_id: str, db: aiosqlite.Connection = Depends(get_db)):
    """Summarize a note as a one-liner, a short overview and bullet points."""
    note = await _require_note(db, note_id)
    try:
        return await summarize(note.content, note.title)
    except LLMError as e:
        logger.warning("Summarization failed for note %s: %s", note_id, e)
        raise llm_http_error(e) from e


@router.post("/{note_id}/questions", response_model=QuestionList)
async def questions(
    note_id: str,
    body: GenerateQuestionsRequest | None = None,
    db: aiosqlite.Connection = Depends(get_db),
):
    """Generate quiz questions for a note. Questions are not stored."""
    note = await _require_note(db, note_id)
    body = body or GenerateQuestionsRequest()
    try:
        concept_items = body.concepts or await extract_concepts(note.content)
        items = await generate_questions(
            concept_items, body.count, body.summary, body.difficulty
        )
    except LLMError as e:
        logger.warning("Question generation failed for note %s: %s", note_id, e)
        raise llm_http_error(e) from e
    return QuestionList(items=items, total=len(items))
