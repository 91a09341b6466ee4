from datetime import date

import pytest
from fastapi.testclient import TestClient

from studynode.models.flashcard import Concept
from studynode.models.study import (
    DoubtAnswer,
    Priority,
    Question,
    QuestionType,
    StudyPlan,
    StudyTask,
    Summary,
)
from studynode.routers import notes as notes_router
from studynode.routers import study as study_router
from studynode.services.llm_service import LLMResponseError


def test_note_summary(client: TestClient, note: dict, monkeypatch: pytest.MonkeyPatch):
    async def fake_summarize(text, title=""):
        assert (text, title) == (note["content"], "Cells")
        return Summary(one_liner="Powerhouse", short_summary="Mitochondria.", detailed_bullets=["ATP"])

    monkeypatch.setattr(notes_router, "summarize", fake_summarize)
    resp = client.post(f"/notes/{note['id']}/summary")
    assert resp.status_code == 200
    assert resp.json()["detailed_bullets"] == ["ATP"]


def test_note_summary_errors(client: TestClient, note: dict):
    assert client.post("/notes/nope/summary").status_code == 404
    assert client.post(f"/notes/{note['id']}/summary").status_code == 503


def test_note_questions_extracts_concepts_first(
    client: TestClient, note: dict, monkeypatch: pytest.MonkeyPatch
):
    seen = {}

    async def fake_extract(text):
        return [Concept(term="Mitochondria", definition="Powerhouse")]

    async def fake_questions(concepts, count=5, summary="", difficulty=None):
        seen.update(terms=[c.term for c in concepts], count=count, difficulty=difficulty)
        return [
            Question(id="q-truefalse-1", type=QuestionType.TRUE_FALSE, question="Cells need ATP?",
                     options=["True", "False"], correct_answer="True"),
        ]

    monkeypatch.setattr(notes_router, "extract_concepts", fake_extract)
    monkeypatch.setattr(notes_router, "generate_questions", fake_questions)

    resp = client.post(f"/notes/{note['id']}/questions", json={"count": 3, "difficulty": "easy"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    assert body["items"][0]["type"] == "truefalse"
    assert seen["terms"] == ["Mitochondria"]
    assert seen["count"] == 3
    assert seen["difficulty"].value == "easy"


def test_note_questions_validates_count(client: TestClient, note: dict):
    resp = client.post(f"/notes/{note['id']}/questions", json={"count": 0})
    assert resp.status_code == 422
    assert client.post("/notes/nope/questions").status_code == 404


def test_study_plan(client: TestClient, monkeypatch: pytest.MonkeyPatch):
    async def fake_plan(topics, time_per_day, days_until_exam, weak_topics):
        assert (topics, time_per_day, days_until_exam, weak_topics) == (["Cells"], 30, 2, [])
        task = StudyTask(id="task-1", day=1, date=date(2024, 5, 20), topics=["Cells"],
                         duration=30, priority=Priority.HIGH)
        return StudyPlan(plan=[task], total_hours=0.5, recommendation="Go")

    monkeypatch.setattr(study_router, "create_study_plan", fake_plan)
    resp = client.post("/plan", json={"topics": ["Cells"], "time_per_day": 30, "days_until_exam": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert body["plan"][0]["date"] == "2024-05-20"
    assert body["plan"][0]["completed"] is False
    assert body["total_hours"] == 0.5


@pytest.mark.parametrize(
    "payload",
    [{"topics": []}, {"topics": ["x"], "days_until_exam": 0}, {"topics": ["x"], "time_per_day": 1}],
)
def test_study_plan_rejects_bad_request(client: TestClient, payload):
    assert client.post("/plan", json=payload).status_code == 422


def test_doubt(client: TestClient, monkeypatch: pytest.MonkeyPatch):
    async def fake_resolve(doubt, context=""):
        return DoubtAnswer(type="doubt", simple_explanation=f"About {doubt}", step_by_step=["a"])

    monkeypatch.setattr(study_router, "resolve_doubt", fake_resolve)
    resp = client.post("/doubt", json={"doubt": "osmosis"})
    assert resp.status_code == 200
    assert resp.json()["simple_explanation"] == "About osmosis"


def test_doubt_errors(client: TestClient, monkeypatch: pytest.MonkeyPatch):
    assert client.post("/doubt", json={"doubt": ""}).status_code == 422
    assert client.post("/doubt", json={"doubt": "why?"}).status_code == 503

    async def bad_reply(doubt, context=""):
        raise LLMResponseError("LLM returned no explanation")

    monkeypatch.setattr(study_router, "resolve_doubt", bad_reply)
    assert client.post("/doubt", json={"doubt": "why?"}).status_code == 502
