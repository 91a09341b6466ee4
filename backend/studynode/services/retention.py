from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from studynode.services.review_scheduler import ReviewableItem, select_due_items

ACTIVE_RECALL_TIP = "Try active recall instead of passive reading for better retention."
FOCUS_SESSION_TIP = "Consider studying in 25-minute focused sessions (Pomodoro technique)."


@dataclass(frozen=True)
class RetentionReport:
    cards_to_review: list[ReviewableItem]
    weak_concepts: list[str]
    suggestions: list[str]


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def analyze_retention(items: Iterable[ReviewableItem], now: datetime) -> RetentionReport:
    """Summarise today's review load and the concepts the learner keeps missing."""
    selection = select_due_items(items, now)
    weak_concepts = [item.prompt_text for item in selection.weak]

    if selection.due:
        review_hint = (
            f"Review {_plural(len(selection.due), 'flashcard')} today for optimal retention."
        )
    else:
        review_hint = "Great job! You're up to date with your reviews."

    if weak_concepts:
        weak_hint = (
            f"Focus extra time on {_plural(len(weak_concepts), 'concept')} "
            "you previously struggled with."
        )
    else:
        weak_hint = "Your understanding is solid across all concepts."

    return RetentionReport(
        cards_to_review=selection.due,
        weak_concepts=weak_concepts,
        suggestions=[review_hint, weak_hint, ACTIVE_RECALL_TIP, FOCUS_SESSION_TIP],
    )
