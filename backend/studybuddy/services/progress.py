from __future__ import annotations

import aiosqlite

from studybuddy.db.sqlite import kv_get, kv_set
from studybuddy.models.progress import GenerationProgress, GenerationStatus


def progress_key(session_id: str) -> str:
    return f"progress:{session_id}"


class ProgressStore:
    """
    Generation progress for one or more sessions, stored at progress:{session_id}.

    Only the run that owns a session writes to it. `current` never goes down
    while a run is generating.
    """

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def get(self, session_id: str) -> GenerationProgress:
        data = await kv_get(self._db, progress_key(session_id))
        if data is None:
            return GenerationProgress()
        return GenerationProgress.model_validate(data)

    async def init(self, session_id: str, total: int) -> None:
        await self._write(
            session_id,
            GenerationProgress(current=0, total=total, status=GenerationStatus.GENERATING),
        )

    async def advance(self, session_id: str, current: int) -> None:
        progress = await self.get(session_id)
        await self._write(
            session_id,
            GenerationProgress(
                current=max(progress.current, current),
                total=progress.total,
                status=GenerationStatus.GENERATING,
            ),
        )

    async def complete(self, session_id: str, current: int) -> None:
        progress = await self.get(session_id)
        await self._write(
            session_id,
            GenerationProgress(
                current=current,
                total=progress.total,
                status=GenerationStatus.COMPLETED,
            ),
        )

    async def fail(self, session_id: str) -> None:
        """Mark the run failed, keeping whatever count it last reported."""
        progress = await self.get(session_id)
        await self._write(
            session_id,
            GenerationProgress(
                current=progress.current,
                total=progress.total,
                status=GenerationStatus.FAILED,
            ),
        )

    async def _write(self, session_id: str, progress: GenerationProgress) -> None:
        await kv_set(self._db, progress_key(session_id), progress.model_dump(mode="json"))
