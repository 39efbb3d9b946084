"""
Deterministic flashcard generation without an AI service.

The target is split across four archetypes by fixed weights, each quota being
ceil(target * weight):

  fill_blank 30%   definition 30%   true_false 20%   multiple_choice 20%

Archetypes run in that order. A shared cursor (cards produced so far) feeds
every builder, and the run stops as soon as the target is reached. A builder
that can't produce a card just uses up that attempt, so the result may be
shorter than the target.
"""
from __future__ import annotations

import logging
import math
import random
from functools import partial

from studybuddy.models.flashcard import CardType, Flashcard
from studybuddy.services.card_builders import (
    build_definition_card,
    build_fill_blank_card,
    build_multiple_choice_card,
    build_true_false_card,
)
from studybuddy.services.text_analysis import extract_key_terms, split_sentences

logger = logging.getLogger(__name__)

ARCHETYPE_WEIGHTS: list[tuple[CardType, float]] = [
    (CardType.FILL_BLANK, 0.3),
    (CardType.DEFINITION, 0.3),
    (CardType.TRUE_FALSE, 0.2),
    (CardType.MULTIPLE_CHOICE, 0.2),
]


def generate_heuristic_flashcards(
    notes: str,
    target_count: int,
    rng: random.Random | None = None,
) -> list[Flashcard]:
    """Build up to `target_count` cards from the notes. Never raises on degenerate input."""
    if not notes or target_count <= 0:
        return []

    sentences = split_sentences(notes)
    key_terms = extract_key_terms(notes)
    builders = {
        CardType.FILL_BLANK: build_fill_blank_card,
        CardType.DEFINITION: build_definition_card,
        CardType.TRUE_FALSE: build_true_false_card,
        CardType.MULTIPLE_CHOICE: partial(build_multiple_choice_card, rng=rng),
    }

    cards: list[Flashcard] = []
    for card_type, weight in ARCHETYPE_WEIGHTS:
        build = builders[card_type]
        for _ in range(math.ceil(target_count * weight)):
            if len(cards) >= target_count:
                break
            card = build(sentences, key_terms, len(cards))
            if card is not None:
                cards.append(card)

    logger.info(
        "Heuristic generation: %d/%d cards (%d sentences, %d key terms)",
        len(cards),
        target_count,
        len(sentences),
        len(key_terms),
    )
    return cards[:target_count]


class HeuristicStrategy:
    name = "heuristic"

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng

    async def generate(self, notes: str, quota: int) -> list[Flashcard]:
        return generate_heuristic_flashcards(notes, quota, rng=self._rng)
