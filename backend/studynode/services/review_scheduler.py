"""
Spaced-repetition review scheduler.

Classifies flashcard-like items into "due today" and "weak" using a fixed
interval table keyed by how many times the item has been reviewed:

  times_reviewed   due when days since last review >=
  0                always
  1                1
  2                3
  3                7
  4+               14

Pure: no storage access, inputs are never mutated, output order follows input order.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable

NEVER_REVIEWED_DAYS = 999

_INTERVALS = {1: 1, 2: 3, 3: 7}
_MAX_INTERVAL = 14


@dataclass(frozen=True)
class ReviewableItem:
    id: str
    prompt_text: str
    last_reviewed_at: datetime | None = None
    times_reviewed: int = 0
    last_outcome_correct: bool | None = None  # None = never evaluated


@dataclass(frozen=True)
class DueSelection:
    due: list[ReviewableItem] = field(default_factory=list)
    weak: list[ReviewableItem] = field(default_factory=list)


def _as_utc(moment: datetime) -> datetime:
    # Naive timestamps come from SQLite and are stored in UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def review_count(item: ReviewableItem) -> int:
    """times_reviewed with missing, negative or non-integer values treated as never reviewed."""
    count = item.times_reviewed
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        return 0
    return count


def review_interval_days(times_reviewed: int) -> int | None:
    """Days an item must rest before it is due again. None means always due."""
    if times_reviewed <= 0:
        return None
    return _INTERVALS.get(times_reviewed, _MAX_INTERVAL)


def days_since_review(item: ReviewableItem, now: datetime) -> int:
    """Whole days since the last review; a review in the future counts as 0."""
    if item.last_reviewed_at is None:
        return NEVER_REVIEWED_DAYS
    elapsed = _as_utc(now) - _as_utc(item.last_reviewed_at)
    return max(0, elapsed.days)


def is_due(item: ReviewableItem, now: datetime) -> bool:
    interval = review_interval_days(review_count(item))
    if interval is None:
        return True
    return days_since_review(item, now) >= interval


def next_review_at(item: ReviewableItem) -> datetime | None:
    """Moment the item becomes due again, or None when it is due unconditionally."""
    interval = review_interval_days(review_count(item))
    if interval is None or item.last_reviewed_at is None:
        return None
    return _as_utc(item.last_reviewed_at) + timedelta(days=interval)


def select_due_items(items: Iterable[ReviewableItem], now: datetime) -> DueSelection:
    """Partition items into those due for review and those last answered wrong.

    An item can land in both lists. Neither list is re-sorted.
    """
    due: list[ReviewableItem] = []
    weak: list[ReviewableItem] = []
    for item in items:
        if is_due(item, now):
            due.append(item)
        if item.last_outcome_correct is False:
            weak.append(item)
    return DueSelection(due=due, weak=weak)
