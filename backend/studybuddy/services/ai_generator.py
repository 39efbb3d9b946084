"""
AI-assisted flashcard generation in three difficulty tiers.

Tiers run strictly in order, one request each:

  basic         ceil(40%)   temperature 0.7   recall of facts and definitions
  intermediate  ceil(40%)   temperature 0.7   application and analysis
  advanced      floor(20%)  temperature 0.8   synthesis and evaluation

Each response is scanned for "Q: ... A: ..." pairs. A tier that fails is logged
and skipped; it never aborts the tiers after it. Progress is written after every
tier, and any shortfall against the target is topped up by the heuristic
generator before the terminal progress record is written.
"""
from __future__ import annotations

import logging
import math
import re
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from studybuddy.models.flashcard import CardType, Difficulty, Flashcard
from studybuddy.services.heuristic_generator import generate_heuristic_flashcards
from studybuddy.services.llm_service import AIServiceError, generate_text
from studybuddy.services.progress import ProgressStore

logger = logging.getLogger(__name__)

TextGenerator = Callable[..., Awaitable[str]]
Backfill = Callable[[str, int], list[Flashcard]]

_QA_PAIR = re.compile(r"Q:\s*(.+?)\s*A:\s*(.+?)(?=Q:|\Z)", re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True)
class Tier:
    difficulty: Difficulty
    share: float
    round_down: bool
    temperature: float
    focus: str

    def quota(self, target_count: int) -> int:
        raw = target_count * self.share
        return math.floor(raw) if self.round_down else math.ceil(raw)


TIERS: tuple[Tier, ...] = (
    Tier(
        Difficulty.BASIC,
        0.4,
        False,
        0.7,
        "Focus on basic facts, definitions, and simple recall questions.",
    ),
    Tier(
        Difficulty.INTERMEDIATE,
        0.4,
        False,
        0.7,
        "Focus on understanding, application, and analysis questions "
        "that require deeper thinking.",
    ),
    Tier(
        Difficulty.ADVANCED,
        0.2,
        True,
        0.8,
        "Focus on synthesis, evaluation, and critical thinking questions "
        "that require connecting multiple concepts.",
    ),
)


def build_prompt(notes: str, count: int, tier: Tier) -> str:
    return (
        f"Based on these study notes, generate {count} question and answer pairs "
        f"for flashcards. {tier.focus} "
        'Format each as "Q: [question] A: [answer]". '
        f"Notes: {notes}"
    )


def parse_flashcards(generated_text: str, difficulty: Difficulty) -> list[Flashcard]:
    """Extract every Q:/A: pair from free text. Pairs with an empty side are dropped."""
    cards: list[Flashcard] = []
    for match in _QA_PAIR.finditer(generated_text):
        question = match.group(1).strip()
        answer = match.group(2).strip()
        if not question or not answer:
            continue
        cards.append(
            Flashcard(
                id=str(uuid.uuid4()),
                question=question,
                answer=answer,
                difficulty=difficulty,
                type=CardType.AI_GENERATED,
            )
        )
    return cards


async def generate_tiered_flashcards(
    notes: str,
    target_count: int,
    progress: ProgressStore,
    session_id: str,
    *,
    api_key: str | None = None,
    complete: TextGenerator = generate_text,
    backfill: Backfill = generate_heuristic_flashcards,
) -> list[Flashcard]:
    """Run all three tiers, backfill any shortfall, return at most `target_count` cards."""
    cards: list[Flashcard] = []
    await progress.init(session_id, target_count)

    for tier in TIERS:
        count = tier.quota(target_count)
        if count > 0:
            try:
                text = await complete(
                    build_prompt(notes, count, tier),
                    temperature=tier.temperature,
                    api_key=api_key,
                )
                tier_cards = parse_flashcards(text, tier.difficulty)
                cards.extend(tier_cards)
                logger.info(
                    "Session %s: %s tier produced %d/%d cards",
                    session_id,
                    tier.difficulty.value,
                    len(tier_cards),
                    count,
                )
            except AIServiceError as e:
                logger.warning(
                    "Session %s: %s tier failed, skipping: %s",
                    session_id,
                    tier.difficulty.value,
                    e,
                )
            except Exception as e:
                logger.warning(
                    "Session %s: unexpected error in %s tier, skipping: %s",
                    session_id,
                    tier.difficulty.value,
                    e,
                    exc_info=True,
                )
        # Over-production is reported as the target so current never drops later.
        await progress.advance(session_id, min(len(cards), target_count))

    if len(cards) < target_count:
        shortfall = target_count - len(cards)
        extra = backfill(notes, shortfall)
        logger.info(
            "Session %s: backfilled %d/%d cards heuristically",
            session_id,
            len(extra),
            shortfall,
        )
        cards.extend(extra)

    cards = cards[:target_count]
    await progress.complete(session_id, len(cards))
    return cards


class AITierStrategy:
    name = "ai"

    def __init__(
        self,
        progress: ProgressStore,
        session_id: str,
        api_key: str | None = None,
        complete: TextGenerator = generate_text,
        backfill: Backfill = generate_heuristic_flashcards,
    ) -> None:
        self._progress = progress
        self._session_id = session_id
        self._api_key = api_key
        self._complete = complete
        self._backfill = backfill

    async def generate(self, notes: str, quota: int) -> list[Flashcard]:
        return await generate_tiered_flashcards(
            notes,
            quota,
            self._progress,
            self._session_id,
            api_key=self._api_key,
            complete=self._complete,
            backfill=self._backfill,
        )
