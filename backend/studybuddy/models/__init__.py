from studybuddy.models.flashcard import (
    CardType,
    Difficulty,
    Flashcard,
    FlashcardHistory,
    GenerateRequest,
    GenerateResponse,
    JobAccepted,
    StoredFlashcard,
)
from studybuddy.models.note import NoteHistory, NoteRecord
from studybuddy.models.progress import (
    GenerationProgress,
    GenerationStatus,
    ProgressResponse,
)

__all__ = [
    "CardType",
    "Difficulty",
    "Flashcard",
    "FlashcardHistory",
    "GenerateRequest",
    "GenerateResponse",
    "GenerationProgress",
    "GenerationStatus",
    "JobAccepted",
    "NoteHistory",
    "NoteRecord",
    "ProgressResponse",
    "StoredFlashcard",
]
