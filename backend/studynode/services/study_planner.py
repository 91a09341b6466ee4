"""
Study plan generation service.

Asks the LLM for a day-by-day plan covering the given topics, then:
  - caps the horizon at MAX_PLAN_DAYS
  - drops tasks outside day 1..horizon or without topics
  - fills missing durations with the daily study time, coerces priority
  - dates each task from `today` and orders tasks by day
total_hours is computed from the kept tasks.
"""
from __future__ import annotations

import logging
import uuid
from datetime import date, timedelta

from studynode.models.study import Priority, StudyPlan, StudyTask
from studynode.services.llm_service import chat_json

logger = logging.getLogger(__name__)

MAX_PLAN_DAYS = 30

SYSTEM_PROMPT = (
    "You are an expert study planner. Create study schedules in JSON format.\n"
    "Respond with ONLY a valid JSON object, no explanations, no markdown.\n"
    "Required JSON structure:\n"
    '{"plan": [{"day": 1, "topics": ["Topic"], "duration": 60, "priority": "high", '
    '"description": "Focus area"}], "recommendation": "Study advice"}\n'
    "Rules:\n"
    '- priority must be "high", "medium", or "low"\n'
    "- duration is in minutes\n"
    "- day starts from 1\n"
    "- Include at least 1 task per day"
)


def _user_prompt(topics: list[str], days: int, time_per_day: int, weak_topics: list[str]) -> str:
    prompt = (
        f"Create a {days}-day study plan for: {', '.join(topics)}\n"
        f"Daily study time: {time_per_day} minutes\n"
    )
    if weak_topics:
        prompt += f"Weak topics (prioritize): {', '.join(weak_topics)}\n"
    return prompt + "Respond with ONLY valid JSON. No other text."


def _coerce_priority(value: object) -> Priority:
    try:
        return Priority(str(value).strip().lower())
    except ValueError:
        return Priority.MEDIUM


def _coerce_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


async def create_study_plan(
    topics: list[str],
    time_per_day: int = 60,
    days_until_exam: int = 14,
    weak_topics: list[str] | None = None,
    today: date | None = None,
) -> StudyPlan:
    days = min(days_until_exam, MAX_PLAN_DAYS)
    today = today or date.today()
    result = await chat_json(
        SYSTEM_PROMPT,
        _user_prompt(topics, days, time_per_day, weak_topics or []),
        max_tokens=3000,
    )

    tasks: list[StudyTask] = []
    for raw in result.get("plan") or []:
        if not isinstance(raw, dict):
            continue
        day = _coerce_int(raw.get("day"))
        if day is None or not 1 <= day <= days:
            continue
        raw_topics = raw.get("topics")
        task_topics = (
            [str(t).strip() for t in raw_topics if str(t).strip()]
            if isinstance(raw_topics, list)
            else []
        )
        if not task_topics:
            continue
        duration = _coerce_int(raw.get("duration"))
        tasks.append(
            StudyTask(
                id=f"task-{uuid.uuid4().hex[:12]}",
                day=day,
                date=today + timedelta(days=day - 1),
                topics=task_topics,
                duration=duration if duration and duration > 0 else time_per_day,
                priority=_coerce_priority(raw.get("priority")),
                description=str(raw.get("description") or "").strip(),
            )
        )

    tasks.sort(key=lambda t: t.day)
    total_minutes = sum(t.duration for t in tasks)
    logger.info("Study plan: %d tasks over %d days", len(tasks), days)
    return StudyPlan(
        plan=tasks,
        total_hours=round(total_minutes / 60, 1),
        recommendation=str(result.get("recommendation") or "").strip(),
    )
