"""
Vocabulary Normalizer - Deduplicate and classify extracted words.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .models import PartOfSpeech, RawWord, VocabularyEntry

logger = logging.getLogger(__name__)

__all__ = ["normalize_vocabulary"]


def normalize_vocabulary(words: Iterable[RawWord]) -> list[VocabularyEntry]:
    """
    Turn raw words into vocabulary entries.

    Words are compared case-insensitively after stripping; the first
    occurrence wins. Unrecognized part-of-speech labels become Unknown.
    Entries with a blank word are kept and dedup like any other word.

    Args:
        words: Raw words in answer order

    Returns:
        Entries in first-seen order
    """
    seen: set[str] = set()
    entries: list[VocabularyEntry] = []

    for raw in words:
        word = raw.word.strip()
        key = word.lower()
        if key in seen:
            logger.debug("Dropping duplicate vocabulary word: %s", word)
            continue
        seen.add(key)

        entries.append(
            VocabularyEntry(
                word=word,
                part_of_speech=PartOfSpeech.coerce(raw.type),
                meaning=raw.meaning.strip(),
            )
        )

    return entries
