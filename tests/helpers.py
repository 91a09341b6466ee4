import asyncio

from studynode.db import sqlite
from studynode.models.flashcard import FlashcardDraft


async def _with_db(fn):
    async for db in sqlite.get_db():
        return await fn(db)


def run_db(fn):
    """Run an async callable against a fresh connection to the initialised database."""
    return asyncio.run(_with_db(fn))


def insert_cards(note_id: str, *questions: str) -> list:
    drafts = [FlashcardDraft(question=q, answer=f"answer to {q}") for q in questions]
    return run_db(lambda db: sqlite.insert_flashcards(db, note_id, drafts))


def stub_llm(monkeypatch, module, reply: dict) -> list:
    """Replace module.chat_json with a stub returning reply; returns the user prompts it saw."""
    calls = []

    async def fake_chat_json(system_prompt, user_prompt, max_tokens=None, client=None):
        calls.append(user_prompt)
        return reply

    monkeypatch.setattr(module, "chat_json", fake_chat_json)
    return calls
