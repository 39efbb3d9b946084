from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class GenerationStatus(str, Enum):
    NOT_STARTED = "not_started"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class GenerationProgress(BaseModel):
    current: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    status: GenerationStatus = GenerationStatus.NOT_STARTED


class ProgressResponse(BaseModel):
    progress: GenerationProgress
