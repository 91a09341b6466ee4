import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from studynode.config import settings
from studynode.models.flashcard import Flashcard, FlashcardDraft, FlashcardUpdate
from studynode.models.note import Note, NoteCreate, NoteUpdate

_db_path: Path | None = None

SCHEMA_VERSION = 1

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA foreign_keys=ON;

CREATE TABLE IF NOT EXISTS notes (
    id          TEXT PRIMARY KEY,
    title       TEXT NOT NULL,
    content     TEXT NOT NULL DEFAULT '',
    source_type TEXT NOT NULL DEFAULT 'text',
    created_at  TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS flashcards (
    id                   TEXT PRIMARY KEY,
    note_id              TEXT NOT NULL REFERENCES notes(id) ON DELETE CASCADE,
    question             TEXT NOT NULL,
    answer               TEXT NOT NULL,
    difficulty           TEXT NOT NULL DEFAULT 'medium',
    times_reviewed       INTEGER NOT NULL DEFAULT 0,
    last_reviewed_at     TEXT,
    last_outcome_correct INTEGER,
    created_at           TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at           TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_flashcards_note ON flashcards(note_id);

CREATE TABLE IF NOT EXISTS review_log (
    id           TEXT PRIMARY KEY,
    flashcard_id TEXT NOT NULL REFERENCES flashcards(id) ON DELETE CASCADE,
    correct      INTEGER NOT NULL,
    reviewed_at  TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_review_log_card ON review_log(flashcard_id);
CREATE INDEX IF NOT EXISTS idx_review_log_time ON review_log(reviewed_at);

CREATE TABLE IF NOT EXISTS schema_version (
    version    INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


async def init_sqlite(data_dir: Path) -> None:
    global _db_path
    _db_path = data_dir / settings.sqlite_filename
    async with aiosqlite.connect(_db_path) as db:
        await db.executescript(SCHEMA_SQL)
        await db.execute(
            "INSERT OR IGNORE INTO schema_version(version) VALUES (?)", (SCHEMA_VERSION,)
        )
        await db.commit()


async def get_db() -> AsyncIterator[aiosqlite.Connection]:
    assert _db_path is not None, "SQLite not initialized"
    async with aiosqlite.connect(_db_path) as db:
        db.row_factory = aiosqlite.Row
        await db.execute("PRAGMA foreign_keys=ON")
        yield db


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


# --- Notes ---


def _row_to_note(row: aiosqlite.Row) -> Note:
    return Note(**dict(row))


async def create_note(db: aiosqlite.Connection, note: NoteCreate) -> Note:
    note_id = str(uuid.uuid4())
    now = _now()
    await db.execute(
        """INSERT INTO notes (id, title, content, source_type, created_at, updated_at)
           VALUES (?, ?, ?, ?, ?, ?)""",
        (note_id, note.title, note.content, note.source_type.value, now, now),
    )
    await db.commit()
    return await get_note(db, note_id)  # type: ignore[return-value]


async def get_note(db: aiosqlite.Connection, note_id: str) -> Note | None:
    cursor = await db.execute("SELECT * FROM notes WHERE id = ?", (note_id,))
    row = await cursor.fetchone()
    if row is None:
        return None
    return _row_to_note(row)


async def list_notes(
    db: aiosqlite.Connection, offset: int = 0, limit: int = 50
) -> tuple[list[Note], int]:
    cursor = await db.execute("SELECT COUNT(*) FROM notes")
    total = (await cursor.fetchone())[0]

    cursor = await db.execute(
        "SELECT * FROM notes ORDER BY created_at DESC, rowid DESC LIMIT ? OFFSET ?",
        (limit, offset),
    )
    rows = await cursor.fetchall()
    return [_row_to_note(r) for r in rows], total


async def update_note(
    db: aiosqlite.Connection, note_id: str, updates: NoteUpdate
) -> Note | None:
    fields = updates.model_dump(exclude_none=True)
    if not fields:
        return await get_note(db, note_id)

    fields["updated_at"] = _now()
    set_clause = ", ".join(f"{k} = ?" for k in fields)
    values = list(fields.values()) + [note_id]

    await db.execute(
        f"UPDATE notes SET {set_clause} WHERE id = ?",  # noqa: S608
        values,
    )
    await db.commit()
    return await get_note(db, note_id)


async def delete_note(db: aiosqlite.Connection, note_id: str) -> bool:
    cursor = await db.execute("DELETE FROM notes WHERE id = ?", (note_id,))
    await db.commit()
    return cursor.rowcount > 0


# --- Flashcards ---


def _row_to_flashcard(row: aiosqlite.Row) -> Flashcard:
    return Flashcard(**dict(row))


async def insert_flashcards(
    db: aiosqlite.Connection, note_id: str, drafts: list[FlashcardDraft]
) -> list[Flashcard]:
    """Insert new, never-reviewed cards for a note. Returns them in draft order."""
    now = _now()
    card_ids: list[str] = []
    for draft in drafts:
        card_id = str(uuid.uuid4())
        card_ids.append(card_id)
        await db.execute(
            """INSERT INTO flashcards
               (id, note_id, question, answer, difficulty, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (card_id, note_id, draft.question, draft.answer, draft.difficulty.value, now, now),
        )
    await db.commit()

    cards: list[Flashcard] = []
    for card_id in card_ids:
        card = await get_flashcard(db, card_id)
        if card is not None:
            cards.append(card)
    return cards


async def get_flashcard(db: aiosqlite.Connection, card_id: str) -> Flashcard | None:
    cursor = await db.execute("SELECT * FROM flashcards WHERE id = ?", (card_id,))
    row = await cursor.fetchone()
    return _row_to_flashcard(row) if row else None


async def list_flashcards(
    db: aiosqlite.Connection,
    note_id: str | None = None,
    offset: int = 0,
    limit: int | None = 50,
) -> tuple[list[Flashcard], int]:
    """List cards in creation order. limit=None returns every matching card."""
    where = "WHERE note_id = ?" if note_id else ""
    params: list = [note_id] if note_id else []

    count_cursor = await db.execute(
        f"SELECT COUNT(*) FROM flashcards {where}", params  # noqa: S608
    )
    count_row = await count_cursor.fetchone()
    total = count_row[0] if count_row else 0

    cursor = await db.execute(
        f"SELECT * FROM flashcards {where} "  # noqa: S608
        "ORDER BY created_at ASC, rowid ASC LIMIT ? OFFSET ?",
        params + [-1 if limit is None else limit, offset],
    )
    rows = await cursor.fetchall()
    return [_row_to_flashcard(r) for r in rows], total


async def record_review(
    db: aiosqlite.Connection,
    card_id: str,
    correct: bool,
    reviewed_at: datetime | None = None,
) -> Flashcard | None:
    """Apply one completed review: times_reviewed += 1, stamp time and outcome."""
    reviewed_at = reviewed_at or datetime.now(timezone.utc)
    stamp = reviewed_at.isoformat()
    cursor = await db.execute(
        """UPDATE flashcards
           SET times_reviewed = times_reviewed + 1,
               last_reviewed_at = ?,
               last_outcome_correct = ?,
               updated_at = ?
           WHERE id = ?""",
        (stamp, int(correct), _now(), card_id),
    )
    if not cursor.rowcount:
        await db.rollback()
        return None
    await db.execute(
        "INSERT INTO review_log (id, flashcard_id, correct, reviewed_at) VALUES (?, ?, ?, ?)",
        (str(uuid.uuid4()), card_id, int(correct), stamp),
    )
    await db.commit()
    return await get_flashcard(db, card_id)


async def update_flashcard_content(
    db: aiosqlite.Connection,
    card_id: str,
    update: FlashcardUpdate,
) -> Flashcard | None:
    card = await get_flashcard(db, card_id)
    if not card:
        return None
    new_q = update.question if update.question is not None else card.question
    new_a = update.answer if update.answer is not None else card.answer
    new_d = update.difficulty if update.difficulty is not None else card.difficulty
    now = _now()
    await db.execute(
        "UPDATE flashcards SET question = ?, answer = ?, difficulty = ?, updated_at = ? WHERE id = ?",
        (new_q, new_a, new_d.value, now, card_id),
    )
    await db.commit()
    return await get_flashcard(db, card_id)


async def delete_flashcard(db: aiosqlite.Connection, card_id: str) -> bool:
    cursor = await db.execute("DELETE FROM flashcards WHERE id = ?", (card_id,))
    await db.commit()
    return (cursor.rowcount or 0) > 0


async def get_review_stats(db: aiosqlite.Connection) -> dict:
    """Return card totals, review counts and a per-note breakdown."""
    total_cursor = await db.execute("SELECT COUNT(*) FROM flashcards")
    total_row = await total_cursor.fetchone()
    total_cards: int = total_row[0] if total_row else 0

    never_cursor = await db.execute(
        "SELECT COUNT(*) FROM flashcards WHERE times_reviewed = 0"
    )
    never_row = await never_cursor.fetchone()
    never_reviewed: int = never_row[0] if never_row else 0

    today_cursor = await db.execute(
        "SELECT COUNT(*) FROM review_log WHERE reviewed_at >= ?",
        (datetime.now(timezone.utc).date().isoformat(),),
    )
    today_row = await today_cursor.fetchone()
    reviewed_today: int = today_row[0] if today_row else 0

    per_note_cursor = await db.execute(
        """SELECT f.note_id, n.title,
                  COUNT(*) as total,
                  SUM(CASE WHEN f.last_outcome_correct = 0 THEN 1 ELSE 0 END) as weak
           FROM flashcards f
           LEFT JOIN notes n ON n.id = f.note_id
           GROUP BY f.note_id
           ORDER BY n.title ASC"""
    )
    per_note_rows = await per_note_cursor.fetchall()
    per_note = [
        {
            "note_id": row[0],
            "title": row[1] or row[0],
            "total": row[2],
            "weak": row[3] or 0,
        }
        for row in per_note_rows
    ]

    return {
        "total_cards": total_cards,
        "never_reviewed": never_reviewed,
        "reviewed_today": reviewed_today,
        "per_note": per_note,
    }
