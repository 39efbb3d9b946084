"""
Heuristic flashcard builders.

Each builder takes (sentences, key_terms, index) and returns one Flashcard or
None when its inputs can't support a card. `index` is a cursor taken modulo the
pool size, so repeated calls walk the pool cyclically and may reuse a sentence.
"""
from __future__ import annotations

import random
import uuid
from collections.abc import Sequence

from studybuddy.models.flashcard import CardType, Difficulty, Flashcard
from studybuddy.services.text_analysis import strip_non_word

BLANK = "______"
NONE_OF_THE_ABOVE = "None of the above"
OPTION_LETTERS = "ABCD"
MIN_BLANK_WORDS = 6

_rng = random.Random()


def _new_card(question: str, answer: str, difficulty: Difficulty, card_type: CardType) -> Flashcard:
    return Flashcard(
        id=str(uuid.uuid4()),
        question=question,
        answer=answer,
        difficulty=difficulty,
        type=card_type,
    )


def find_sentence(sentences: Sequence[str], term: str) -> str | None:
    """First sentence containing `term`, case-insensitive."""
    needle = term.lower()
    return next((s for s in sentences if needle in s.lower()), None)


def build_fill_blank_card(
    sentences: Sequence[str],
    key_terms: Sequence[str],
    index: int,
) -> Flashcard | None:
    if not sentences:
        return None

    sentence = sentences[index % len(sentences)].strip()
    words = sentence.split(" ")
    if len(words) < MIN_BLANK_WORDS:
        return None

    middle = len(words) // 2
    answer = strip_non_word(words[middle])
    if not answer:
        return None

    blanked = words[:middle] + [BLANK] + words[middle + 1 :]
    question = "Fill in the blank: " + " ".join(blanked)
    # The answer must not show up anywhere in the question, even inside another word.
    if answer in question:
        return None
    return _new_card(question, answer, Difficulty.BASIC, CardType.FILL_BLANK)


def build_definition_card(
    sentences: Sequence[str],
    key_terms: Sequence[str],
    index: int,
) -> Flashcard | None:
    if not key_terms:
        return None

    term = key_terms[index % len(key_terms)]
    sentence = find_sentence(sentences, term)
    if sentence is None:
        return None

    return _new_card(
        f"What is {term}?", sentence.strip(), Difficulty.INTERMEDIATE, CardType.DEFINITION
    )


def build_true_false_card(
    sentences: Sequence[str],
    key_terms: Sequence[str],
    index: int,
) -> Flashcard | None:
    # Statements are taken verbatim from the notes, so the answer is always True.
    if not sentences:
        return None

    sentence = sentences[index % len(sentences)].strip()
    return _new_card(
        f"True or False: {sentence}", "True", Difficulty.BASIC, CardType.TRUE_FALSE
    )


def build_multiple_choice_card(
    sentences: Sequence[str],
    key_terms: Sequence[str],
    index: int,
    rng: random.Random | None = None,
) -> Flashcard | None:
    if not key_terms or not sentences:
        return None

    term = key_terms[index % len(key_terms)]
    sentence = find_sentence(sentences, term)
    if sentence is None:
        return None

    others = [t for t in key_terms if t != term][: len(OPTION_LETTERS) - 1]
    choices = [term, *others]
    (rng or _rng).shuffle(choices)

    # Letter comes from a lookup by value, not from tracking the shuffle.
    letter = OPTION_LETTERS[choices.index(term)]
    options = choices + [NONE_OF_THE_ABOVE] * (len(OPTION_LETTERS) - len(choices))
    lines = [f"{l}) {option}" for l, option in zip(OPTION_LETTERS, options)]

    question = f'Which term is described by: "{sentence.strip()}"?\n' + "\n".join(lines)
    return _new_card(
        question, f"{letter}) {term}", Difficulty.ADVANCED, CardType.MULTIPLE_CHOICE
    )
