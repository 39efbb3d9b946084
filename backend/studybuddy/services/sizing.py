from __future__ import annotations

import math

from studybuddy.services.text_analysis import count_words, split_sentences


def estimate_question_count(notes: str) -> int:
    """Target number of flashcards for a block of notes.

    Step function on word count, capped by how many usable sentences exist:

      < 100 words   -> min(5, sentences)
      100-299       -> min(10, floor(sentences * 0.7))
      300-599       -> min(20, floor(sentences * 0.5))
      >= 600        -> min(30, floor(sentences * 0.4))
    """
    word_count = count_words(notes)
    sentence_count = len(split_sentences(notes))

    if word_count < 100:
        return min(5, sentence_count)
    if word_count < 300:
        return min(10, math.floor(sentence_count * 0.7))
    if word_count < 600:
        return min(20, math.floor(sentence_count * 0.5))
    return min(30, math.floor(sentence_count * 0.4))
