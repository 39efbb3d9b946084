import asyncio

import aiosqlite
import pytest

from studybuddy.config import settings
from studybuddy.db.sqlite import init_sqlite

# 81 words, 6 sentences longer than 10 characters
SAMPLE_NOTES = (
    "Photosynthesis is the process plants use for converting light energy into chemical energy. "
    "The Chloroplast contains chlorophyll, which absorbs mostly blue and red wavelengths of light. "
    "During the light reactions, water molecules are split and oxygen is released as a byproduct. "
    "The Calvin cycle uses carbon dioxide from the air to build glucose molecules. "
    "Plants store the glucose as starch or use it to power cellular respiration. "
    "Without photosynthesis, most ecosystems on Earth would lack the energy needed to sustain life."
)

MITOCHONDRIA_NOTES = "The Mitochondria is the powerhouse. The Mitochondria produces ATP."

HEURISTIC_TYPES = {"fill_blank", "definition", "true_false", "multiple_choice"}


@pytest.fixture(autouse=True)
def no_ai_key(monkeypatch):
    monkeypatch.setattr(settings, "huggingface_api_key", "")


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "data_dir", tmp_path)
    asyncio.run(init_sqlite(tmp_path))
    return tmp_path


@pytest.fixture
def run_db(data_dir):
    """Run `fn(db)` against a fresh SQLite file and return its result."""

    def run(fn):
        async def _run():
            async with aiosqlite.connect(data_dir / settings.sqlite_filename) as db:
                return await fn(db)

        return asyncio.run(_run())

    return run


class RecordingProgress:
    """In-memory stand-in for ProgressStore that keeps every write."""

    def __init__(self):
        self.events = []
        self.total = 0

    async def init(self, session_id, total):
        self.total = total
        self.events.append(("generating", 0))

    async def advance(self, session_id, current):
        self.events.append(("generating", current))

    async def complete(self, session_id, current):
        self.events.append(("completed", current))


@pytest.fixture
def recording_progress():
    return RecordingProgress()
