"""
SQLite-backed key-value store.

Everything the generation engine persists is a JSON document under a
namespaced key:

  notes:{user_id}:{note_id}           NoteRecord
  flashcards:{user_id}:{card_id}      persisted Flashcard
  progress:{session_id}               GenerationProgress

Writes go through aiosqlite; any storage or serialization failure surfaces as
PersistenceError.
"""
from __future__ import annotations

import json
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, AsyncIterator, Iterable

import aiosqlite

from studybuddy.config import settings
from studybuddy.models.flashcard import Flashcard, StoredFlashcard
from studybuddy.models.note import NoteRecord

_db_path: Path | None = None

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS kv_store (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS schema_version (
    version    INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);
INSERT OR IGNORE INTO schema_version(version) VALUES (1);
"""


class PersistenceError(Exception):
    """Raised when a write to the key-value store fails."""


async def init_sqlite(data_dir: Path) -> None:
    global _db_path
    _db_path = data_dir / settings.sqlite_filename
    async with aiosqlite.connect(_db_path) as db:
        await db.executescript(SCHEMA_SQL)
        await db.commit()


async def get_db() -> AsyncIterator[aiosqlite.Connection]:
    assert _db_path is not None, "SQLite not initialized"
    async with aiosqlite.connect(_db_path) as db:
        db.row_factory = aiosqlite.Row
        yield db


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def _encode(value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"Value is not JSON serializable: {e}") from e


# --- Key-value operations ---


async def kv_get(db: aiosqlite.Connection, key: str) -> Any | None:
    cursor = await db.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
    row = await cursor.fetchone()
    return json.loads(row[0]) if row else None


async def kv_set(db: aiosqlite.Connection, key: str, value: Any) -> None:
    await kv_set_many(db, [(key, value)])


async def kv_set_many(
    db: aiosqlite.Connection,
    items: Iterable[tuple[str, Any]],
) -> None:
    """Write several entries in one transaction; either all land or none do."""
    now = _now()
    rows = [(key, _encode(value), now) for key, value in items]
    if not rows:
        return
    try:
        await db.executemany(
            "INSERT INTO kv_store(key, value, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
            "updated_at = excluded.updated_at",
            rows,
        )
        await db.commit()
    except sqlite3.Error as e:
        await db.rollback()
        raise PersistenceError(f"Key-value write failed: {e}") from e


async def kv_get_by_prefix(db: aiosqlite.Connection, prefix: str) -> list[Any]:
    """Return the values of every key starting with `prefix`, ordered by key."""
    cursor = await db.execute(
        "SELECT value FROM kv_store WHERE substr(key, 1, ?) = ? ORDER BY key",
        (len(prefix), prefix),
    )
    rows = await cursor.fetchall()
    return [json.loads(row[0]) for row in rows]


# --- Notes / Flashcards ---


def note_key(user_id: str, note_id: str) -> str:
    return f"notes:{user_id}:{note_id}"


def flashcard_key(user_id: str, card_id: str) -> str:
    return f"flashcards:{user_id}:{card_id}"


async def save_generation(
    db: aiosqlite.Connection,
    cards: list[Flashcard],
    user_id: str,
    notes: str,
) -> list[StoredFlashcard]:
    """
    Persist the source notes and their cards as one batch.

    Every card gets the user id, the new note id and one shared timestamp.
    """
    created_at = _now()
    note = NoteRecord(id=f"note_{uuid.uuid4().hex}", content=notes, created_at=created_at)
    stored = [
        StoredFlashcard(
            **card.model_dump(),
            user_id=user_id,
            note_id=note.id,
            created_at=created_at,
        )
        for card in cards
    ]

    items = [(note_key(user_id, note.id), note.model_dump(mode="json", by_alias=True))]
    items.extend(
        (flashcard_key(user_id, card.id), card.model_dump(mode="json", by_alias=True))
        for card in stored
    )
    await kv_set_many(db, items)
    return stored


async def list_user_flashcards(
    db: aiosqlite.Connection, user_id: str
) -> list[StoredFlashcard]:
    rows = await kv_get_by_prefix(db, f"flashcards:{user_id}:")
    return [StoredFlashcard.model_validate(row) for row in rows]


async def list_user_notes(db: aiosqlite.Connection, user_id: str) -> list[NoteRecord]:
    rows = await kv_get_by_prefix(db, f"notes:{user_id}:")
    return [NoteRecord.model_validate(row) for row in rows]
