"""
Flashcard generation entry point.

  1. Validate the notes and size the run (estimate_question_count)
  2. Try the generation strategies in order: AI tiers when a credential is
     configured, then the heuristic generator
  3. Persist the note and its cards in one batch, then mark progress completed

A strategy that raises hands over to the next one; only the last strategy's
error propagates. Input and persistence errors are the only failures a caller
ever sees.
"""
from __future__ import annotations

import logging
import traceback
import uuid
from dataclasses import dataclass
from typing import Any, Protocol

import aiosqlite

from studybuddy.config import settings
from studybuddy.db.sqlite import get_db, save_generation
from studybuddy.models.flashcard import Flashcard, StoredFlashcard
from studybuddy.models.progress import GenerationStatus
from studybuddy.services.ai_generator import AITierStrategy
from studybuddy.services.heuristic_generator import HeuristicStrategy
from studybuddy.services.progress import ProgressStore
from studybuddy.services.sizing import estimate_question_count

logger = logging.getLogger(__name__)


class InvalidInputError(ValueError):
    """Raised when the notes are missing, empty, or not a string."""


class GenerationStrategy(Protocol):
    name: str

    async def generate(self, notes: str, quota: int) -> list[Flashcard]: ...


@dataclass
class GenerationResult:
    flashcards: list[StoredFlashcard]
    total_generated: int
    session_id: str


def new_session_id() -> str:
    return f"session_{uuid.uuid4().hex}"


def validate_notes(notes: Any) -> str:
    if not isinstance(notes, str) or not notes.strip():
        raise InvalidInputError("Notes are required and must be a string")
    return notes


def default_strategies(progress: ProgressStore, session_id: str) -> list[GenerationStrategy]:
    strategies: list[GenerationStrategy] = []
    if settings.ai_enabled:
        strategies.append(
            AITierStrategy(progress, session_id, api_key=settings.huggingface_api_key)
        )
    else:
        logger.info("No Hugging Face API key configured, using heuristic generation")
    strategies.append(HeuristicStrategy())
    return strategies


async def run_strategies(
    strategies: list[GenerationStrategy],
    notes: str,
    quota: int,
) -> list[Flashcard]:
    fallbacks = [*strategies[1:], None]
    for strategy, fallback in zip(strategies, fallbacks):
        try:
            cards = await strategy.generate(notes, quota)
        except Exception as e:
            if fallback is None:
                raise
            logger.warning(
                "%s generation failed (%s), falling back to %s",
                strategy.name,
                e,
                fallback.name,
            )
            continue
        logger.info("%s generation produced %d/%d cards", strategy.name, len(cards), quota)
        return cards
    return []


async def generate_flashcards(
    db: aiosqlite.Connection,
    notes: Any,
    user_id: str,
    session_id: str | None = None,
    strategies: list[GenerationStrategy] | None = None,
) -> GenerationResult:
    """
    Generate, persist and return flashcards for one block of notes.

    Raises InvalidInputError before doing any work, PersistenceError if the
    batch write fails. A run that raises after starting leaves its progress
    record marked failed.
    """
    notes = validate_notes(notes)
    target = estimate_question_count(notes)
    session_id = session_id or new_session_id()
    progress = ProgressStore(db)

    await progress.init(session_id, target)
    if strategies is None:
        strategies = default_strategies(progress, session_id)

    try:
        cards = (await run_strategies(strategies, notes, target))[:target]
        stored = await save_generation(db, cards, user_id, notes)
    except Exception:
        await progress.fail(session_id)
        raise

    # The AI path writes its own terminal record; the heuristic path does not.
    if (await progress.get(session_id)).status is not GenerationStatus.COMPLETED:
        await progress.complete(session_id, len(stored))

    logger.info(
        "Session %s: saved %d flashcards for user %s (target %d)",
        session_id,
        len(stored),
        user_id,
        target,
    )
    return GenerationResult(
        flashcards=stored, total_generated=len(stored), session_id=session_id
    )


async def generate_in_background(notes: str, user_id: str, session_id: str) -> None:
    """Run generate_flashcards on its own connection. Logs and swallows failures."""
    try:
        async for db in get_db():
            await generate_flashcards(db, notes, user_id, session_id=session_id)
    except Exception:
        logger.error(
            "Background generation failed for %s:\n%s", session_id, traceback.format_exc()
        )
