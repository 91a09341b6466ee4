from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Concept(BaseModel):
    id: str = ""
    term: str
    definition: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    category: str = ""


class ConceptList(BaseModel):
    items: list[Concept]
    total: int


class FlashcardDraft(BaseModel):
    question: str
    answer: str
    difficulty: Difficulty = Difficulty.MEDIUM


class Flashcard(BaseModel):
    id: str
    note_id: str
    question: str
    answer: str
    difficulty: Difficulty
    times_reviewed: int                  # completed reviews; +1 per recorded review
    last_reviewed_at: datetime | None    # UTC; None iff times_reviewed == 0
    last_outcome_correct: bool | None    # None = never evaluated
    created_at: str
    updated_at: str


class FlashcardList(BaseModel):
    items: list[Flashcard]
    total: int


class FlashcardUpdate(BaseModel):
    question: str | None = None
    answer: str | None = None
    difficulty: Difficulty | None = None


class GenerateFlashcardsRequest(BaseModel):
    concepts: list[Concept] = Field(default_factory=list)
    additional_context: str = ""


class ReviewRequest(BaseModel):
    correct: bool


class ReviewResult(BaseModel):
    id: str
    times_reviewed: int
    last_reviewed_at: datetime
    last_outcome_correct: bool
    next_review_at: datetime | None


class DueCards(BaseModel):
    due: list[Flashcard]
    weak: list[Flashcard]


class RetentionReportOut(BaseModel):
    cards_to_review: list[Flashcard]
    weak_concepts: list[str]
    suggestions: list[str]
