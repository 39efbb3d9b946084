"""
Sentence splitting and key-term mining over raw study notes.

Key terms come from two crude signals, merged in discovery order:
  1. Capitalized words ("Photosynthesis", "Newton") longer than 3 characters.
  2. Lower-cased words longer than 4 characters that occur at least twice.

There is no ranking beyond that; the card builders depend on this exact order.
"""
from __future__ import annotations

import re

MIN_SENTENCE_CHARS = 10
MAX_KEY_TERMS = 20

_SENTENCE_END = re.compile(r"[.!?]+")
_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w]", re.ASCII)
_CAPITALIZED = re.compile(r"^[A-Z][a-z]+")


def split_sentences(text: str) -> list[str]:
    """Split on terminal punctuation, dropping fragments of 10 chars or fewer.

    Fragments are returned untrimmed; callers strip when they need to.
    """
    return [
        s for s in _SENTENCE_END.split(text) if len(s.strip()) > MIN_SENTENCE_CHARS
    ]


def split_words(text: str) -> list[str]:
    return _WHITESPACE.split(text)


def count_words(text: str) -> int:
    return len(split_words(text))


def strip_non_word(word: str) -> str:
    return _NON_WORD.sub("", word)


def extract_key_terms(text: str, limit: int = MAX_KEY_TERMS) -> list[str]:
    term_freq: dict[str, int] = {}
    key_terms: list[str] = []

    for word in split_words(text):
        cleaned = strip_non_word(word).lower()
        if len(cleaned) > 3:
            term_freq[cleaned] = term_freq.get(cleaned, 0) + 1

        if _CAPITALIZED.match(word) and len(word) > 3:
            key_terms.append(strip_non_word(word))

    key_terms.extend(
        term for term, freq in term_freq.items() if freq > 1 and len(term) > 4
    )

    # dict.fromkeys keeps first-seen order
    return list(dict.fromkeys(key_terms))[:limit]
