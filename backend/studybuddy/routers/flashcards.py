"""
Flashcard generation router.

Endpoints:
  POST /flashcards/generate                  generate, persist and return cards
  POST /flashcards/jobs                      same, in the background; returns the session id
  GET  /flashcards/progress/{session_id}     generation progress for a session
  GET  /flashcards/users/{user_id}           every card saved for a user
  GET  /flashcards/users/{user_id}/notes     every note snapshot saved for a user

A session id belongs to one run at a time; either POST answers 409 while a run
for that session is still going.
"""
from __future__ import annotations

import logging

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException

from studybuddy.db.sqlite import get_db, list_user_flashcards, list_user_notes
from studybuddy.models.flashcard import (
    FlashcardHistory,
    GenerateRequest,
    GenerateResponse,
    JobAccepted,
)
from studybuddy.models.note import NoteHistory
from studybuddy.models.progress import ProgressResponse
from studybuddy.services.flashcard_generator import (
    InvalidInputError,
    generate_flashcards,
    generate_in_background,
    new_session_id,
    validate_notes,
)
from studybuddy.services.progress import ProgressStore
from studybuddy.services.task_registry import is_running, start_task

logger = logging.getLogger(__name__)
router = APIRouter()


def _claim_session(session_id: str | None) -> str:
    session_id = session_id or new_session_id()
    if is_running(session_id):
        raise HTTPException(
            status_code=409, detail=f"Session {session_id} is already generating"
        )
    return session_id


@router.post("/generate", response_model=GenerateResponse)
async def generate(
    body: GenerateRequest,
    db: aiosqlite.Connection = Depends(get_db),
) -> GenerateResponse:
    session_id = _claim_session(body.session_id)
    try:
        # Registered like a background job so /jobs sees this session as busy.
        result = await start_task(
            session_id,
            generate_flashcards(db, body.notes, body.user_id, session_id=session_id),
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Flashcard generation failed for user %s", body.user_id)
        raise HTTPException(status_code=500, detail="Failed to generate flashcards")

    return GenerateResponse(
        flashcards=result.flashcards,
        total_generated=result.total_generated,
        session_id=result.session_id,
    )


@router.post("/jobs", response_model=JobAccepted, status_code=202)
async def start_generation_job(body: GenerateRequest) -> JobAccepted:
    try:
        notes = validate_notes(body.notes)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    session_id = _claim_session(body.session_id)
    start_task(session_id, generate_in_background(notes, body.user_id, session_id))
    return JobAccepted(session_id=session_id)


@router.get("/progress/{session_id}", response_model=ProgressResponse)
async def get_progress(
    session_id: str,
    db: aiosqlite.Connection = Depends(get_db),
) -> ProgressResponse:
    try:
        progress = await ProgressStore(db).get(session_id)
    except Exception:
        logger.exception("Failed to read progress for %s", session_id)
        raise HTTPException(status_code=500, detail="Failed to get progress")
    return ProgressResponse(progress=progress)


@router.get("/users/{user_id}", response_model=FlashcardHistory)
async def list_flashcards(
    user_id: str,
    db: aiosqlite.Connection = Depends(get_db),
) -> FlashcardHistory:
    try:
        cards = await list_user_flashcards(db, user_id)
    except Exception:
        logger.exception("Failed to list flashcards for %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to retrieve flashcards")
    return FlashcardHistory(flashcards=cards)


@router.get("/users/{user_id}/notes", response_model=NoteHistory)
async def list_notes(
    user_id: str,
    db: aiosqlite.Connection = Depends(get_db),
) -> NoteHistory:
    try:
        notes = await list_user_notes(db, user_id)
    except Exception:
        logger.exception("Failed to list notes for %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to retrieve notes")
    return NoteHistory(notes=notes)
