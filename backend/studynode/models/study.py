from __future__ import annotations

import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from studynode.models.flashcard import Concept, Difficulty


class Summary(BaseModel):
    one_liner: str
    short_summary: str
    detailed_bullets: list[str]


class QuestionType(str, Enum):
    MCQ = "mcq"
    SHORT = "short"
    TRUE_FALSE = "truefalse"


class Question(BaseModel):
    id: str
    type: QuestionType
    question: str
    options: list[str] = Field(default_factory=list)  # mcq and truefalse only
    correct_answer: str
    explanation: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM


class QuestionList(BaseModel):
    items: list[Question]
    total: int


class GenerateQuestionsRequest(BaseModel):
    concepts: list[Concept] = Field(default_factory=list, max_length=50)
    summary: str = ""
    difficulty: Difficulty | None = None  # None = mixed
    count: int = Field(default=5, ge=1, le=20)


class AnswerValidationRequest(BaseModel):
    question: str = Field(min_length=1)
    user_answer: str = Field(min_length=1)
    correct_answer: str = Field(min_length=1)


class AnswerValidation(BaseModel):
    score: int           # 0-10
    feedback: str
    model_answer: str
    was_correct: bool    # score >= PASS_SCORE

    model_config = {"protected_namespaces": ()}


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class StudyTask(BaseModel):
    id: str
    day: int             # 1-based
    date: datetime.date
    topics: list[str]
    duration: int        # minutes
    priority: Priority
    description: str = ""
    completed: bool = False


class StudyPlanRequest(BaseModel):
    topics: list[str] = Field(min_length=1, max_length=50)
    time_per_day: int = Field(default=60, ge=5, le=720)
    days_until_exam: int = Field(default=14, ge=1)
    weak_topics: list[str] = Field(default_factory=list, max_length=50)


class StudyPlan(BaseModel):
    plan: list[StudyTask]
    total_hours: float
    recommendation: str


class DoubtRequest(BaseModel):
    doubt: str = Field(min_length=1, max_length=4000)
    context: str = ""


class DoubtAnswer(BaseModel):
    type: Literal["chat", "doubt"]
    reply: str | None = None
    simple_explanation: str | None = None
    detailed_explanation: str | None = None
    analogy: str | None = None
    one_liner: str | None = None
    step_by_step: list[str] = Field(default_factory=list)
