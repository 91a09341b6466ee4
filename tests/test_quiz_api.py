from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from studynode.db import sqlite
from studynode.models.study import AnswerValidation
from studynode.routers import quiz as quiz_router
from studynode.services.llm_service import LLMResponseError
from tests.helpers import insert_cards, run_db


def _backdate(card_id: str, times_reviewed: int, days_ago: float, correct: bool | None) -> None:
    reviewed_at = datetime.now(timezone.utc) - timedelta(days=days_ago)

    async def apply(db):
        await db.execute(
            """UPDATE flashcards
               SET times_reviewed = ?, last_reviewed_at = ?, last_outcome_correct = ?
               WHERE id = ?""",
            (
                times_reviewed,
                reviewed_at.isoformat(),
                None if correct is None else int(correct),
                card_id,
            ),
        )
        await db.commit()

    run_db(apply)


def test_new_cards_are_due(client: TestClient, note: dict):
    cards = insert_cards(note["id"], "q1", "q2", "q3")
    body = client.get("/quiz/due").json()
    assert [c["id"] for c in body["due"]] == [c.id for c in cards]
    assert body["weak"] == []


def test_due_and_weak_split(client: TestClient, note: dict):
    fresh, resting, missed, stale = insert_cards(note["id"], "fresh", "resting", "missed", "stale")
    _backdate(resting.id, 2, 2, True)
    _backdate(missed.id, 5, 0.1, False)
    _backdate(stale.id, 4, 15, False)

    body = client.get("/quiz/due").json()
    assert [c["question"] for c in body["due"]] == ["fresh", "stale"]
    assert [c["question"] for c in body["weak"]] == ["missed", "stale"]


def test_due_filtered_by_note(client: TestClient, note: dict):
    other = client.post("/notes/", json={"title": "Other", "content": "..."}).json()
    insert_cards(note["id"], "mine")
    insert_cards(other["id"], "theirs")

    body = client.get("/quiz/due", params={"note_id": other["id"]}).json()
    assert [c["question"] for c in body["due"]] == ["theirs"]


def test_review_records_outcome(client: TestClient, note: dict):
    (card,) = insert_cards(note["id"], "What is ATP?")

    resp = client.post(f"/quiz/{card.id}/review", json={"correct": False})
    assert resp.status_code == 200
    result = resp.json()
    assert result["times_reviewed"] == 1
    assert result["last_outcome_correct"] is False
    reviewed_at = datetime.fromisoformat(result["last_reviewed_at"])
    next_at = datetime.fromisoformat(result["next_review_at"])
    assert next_at - reviewed_at == timedelta(days=1)

    due = client.get("/quiz/due").json()
    assert due["due"] == []
    assert [c["id"] for c in due["weak"]] == [card.id]

    result = client.post(f"/quiz/{card.id}/review", json={"correct": True}).json()
    assert result["times_reviewed"] == 2
    stored = client.get(f"/quiz/{card.id}").json()
    assert stored["last_outcome_correct"] is True
    assert stored["times_reviewed"] == 2

    log_count = run_db(
        lambda db: _count(db, "SELECT COUNT(*) FROM review_log WHERE flashcard_id = ?", card.id)
    )
    assert log_count == 2


async def _count(db, sql, *params):
    cursor = await db.execute(sql, params)
    return (await cursor.fetchone())[0]


def test_review_missing_card(client: TestClient):
    assert client.post("/quiz/nope/review", json={"correct": True}).status_code == 404


def test_review_requires_outcome(client: TestClient, note: dict):
    (card,) = insert_cards(note["id"], "q")
    assert client.post(f"/quiz/{card.id}/review", json={}).status_code == 422


def test_retention_report(client: TestClient, note: dict):
    fresh, missed = insert_cards(note["id"], "What is ATP?", "What is osmosis?")
    _backdate(missed.id, 3, 1, False)

    body = client.get("/quiz/retention").json()
    assert [c["id"] for c in body["cards_to_review"]] == [fresh.id]
    assert body["weak_concepts"] == ["What is osmosis?"]
    assert len(body["suggestions"]) == 4


def test_stats(client: TestClient, note: dict):
    a, b = insert_cards(note["id"], "a", "b")
    client.post(f"/quiz/{a.id}/review", json={"correct": False})

    stats = client.get("/quiz/stats").json()
    assert stats["total_cards"] == 2
    assert stats["never_reviewed"] == 1
    assert stats["reviewed_today"] == 1
    assert stats["due_now"] == 1
    assert stats["per_note"] == [
        {"note_id": note["id"], "title": "Cells", "total": 2, "weak": 1}
    ]


def test_card_edit_list_delete(client: TestClient, note: dict):
    (card,) = insert_cards(note["id"], "old question")

    patched = client.patch(f"/quiz/{card.id}", json={"question": "new question", "difficulty": "easy"})
    assert patched.status_code == 200
    assert patched.json()["question"] == "new question"
    assert patched.json()["difficulty"] == "easy"
    assert patched.json()["answer"] == "answer to old question"

    listed = client.get("/quiz/cards", params={"note_id": note["id"]}).json()
    assert listed["total"] == 1

    assert client.delete(f"/quiz/{card.id}").status_code == 204
    assert client.get(f"/quiz/{card.id}").status_code == 404
    assert client.patch(f"/quiz/{card.id}", json={"question": "x"}).status_code == 404


def test_deleting_note_removes_its_cards(client: TestClient, note: dict):
    insert_cards(note["id"], "a", "b")
    client.delete(f"/notes/{note['id']}")
    assert client.get("/quiz/cards").json()["total"] == 0


def test_record_review_keeps_lifecycle_invariants(client: TestClient, note: dict):
    (card,) = insert_cards(note["id"], "q")
    assert card.times_reviewed == 0 and card.last_reviewed_at is None

    at = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    updated = run_db(lambda db: sqlite.record_review(db, card.id, True, reviewed_at=at))
    assert updated.times_reviewed == 1
    assert updated.last_reviewed_at == at
    assert run_db(lambda db: sqlite.record_review(db, "missing", True)) is None


def test_review_without_timestamp_is_server_error(
    client: TestClient, note: dict, monkeypatch: pytest.MonkeyPatch
):
    (card,) = insert_cards(note["id"], "q")

    async def broken_record(db, card_id, correct):
        return card.model_copy(update={"times_reviewed": 1})

    monkeypatch.setattr(quiz_router, "record_review", broken_record)
    resp = client.post(f"/quiz/{card.id}/review", json={"correct": True})
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to record review"


def test_validate_answer(client: TestClient, monkeypatch: pytest.MonkeyPatch):
    async def fake_validate(question, user_answer, correct_answer):
        assert (question, user_answer, correct_answer) == ("What is ATP?", "energy", "Energy currency")
        return AnswerValidation(score=8, feedback="Close", model_answer="Energy currency", was_correct=True)

    monkeypatch.setattr(quiz_router, "validate_answer", fake_validate)
    resp = client.post(
        "/quiz/validate",
        json={"question": "What is ATP?", "user_answer": "energy", "correct_answer": "Energy currency"},
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "score": 8,
        "feedback": "Close",
        "model_answer": "Energy currency",
        "was_correct": True,
    }


def test_validate_answer_errors(client: TestClient, monkeypatch: pytest.MonkeyPatch):
    body = {"question": "q", "user_answer": "a", "correct_answer": "b"}
    assert client.post("/quiz/validate", json=body).status_code == 503
    assert client.post("/quiz/validate", json={**body, "user_answer": ""}).status_code == 422

    async def bad_reply(question, user_answer, correct_answer):
        raise LLMResponseError("LLM returned no numeric score")

    monkeypatch.setattr(quiz_router, "validate_answer", bad_reply)
    assert client.post("/quiz/validate", json=body).status_code == 502
