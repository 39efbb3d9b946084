from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Difficulty(str, Enum):
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class CardType(str, Enum):
    AI_GENERATED = "ai_generated"
    FILL_BLANK = "fill_blank"
    DEFINITION = "definition"
    TRUE_FALSE = "true_false"
    MULTIPLE_CHOICE = "multiple_choice"


class Flashcard(BaseModel):
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    id: str
    question: str
    answer: str
    difficulty: Difficulty
    type: CardType


class StoredFlashcard(Flashcard):
    """A generated card once it has been attached to a user and a note."""

    user_id: str
    note_id: str
    created_at: str


class GenerateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    notes: Any = None       # validated by the generator, not here
    user_id: str
    session_id: str | None = None


class GenerateResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    flashcards: list[StoredFlashcard]
    total_generated: int
    session_id: str


class JobAccepted(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: str


class FlashcardHistory(BaseModel):
    flashcards: list[StoredFlashcard]
