"""
Extraction Models - Data types for extraction domain.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

PENDING_PLACEHOLDER = "pending"


class PartOfSpeech(str, Enum):
    """Soft classification of a vocabulary word."""

    NOUN = "Noun"
    VERB = "Verb"
    ADJECTIVE = "Adjective"
    ADVERB = "Adverb"
    PRONOUN = "Pronoun"
    PREPOSITION = "Preposition"
    CONJUNCTION = "Conjunction"
    INTERJECTION = "Interjection"
    ARTICLE = "Article"
    DETERMINER = "Determiner"
    NUMERAL = "Numeral"
    PHRASE = "Phrase"
    UNKNOWN = "Unknown"

    @classmethod
    def coerce(cls, value: Any) -> PartOfSpeech:
        """Map a free-form label to a member; anything unrecognized is UNKNOWN."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        label = value.strip().lower()
        for member in cls:
            if member.value.lower() == label:
                return member
        return cls.UNKNOWN


class RawWord(BaseModel):
    """Vocabulary item as the backend wrote it, before normalization."""

    word: str = ""
    type: str = PartOfSpeech.UNKNOWN.value
    meaning: str = ""


class ExtractedAnswer(BaseModel):
    """Arrays recovered from a raw answer."""

    en: list[str] = Field(default_factory=list)
    zh: list[str] = Field(default_factory=list)
    words: list[RawWord] = Field(default_factory=list)


class VocabularyEntry(BaseModel):
    """Normalized vocabulary item."""

    word: str
    part_of_speech: PartOfSpeech = PartOfSpeech.UNKNOWN
    meaning: str = ""

    model_config = {"frozen": True}

    def to_payload(self) -> dict[str, str]:
        return {
            "word": self.word,
            "type": self.part_of_speech.value,
            "meaning": self.meaning,
        }


class TranslationResult(BaseModel):
    """Aligned sentence pairs plus vocabulary."""

    sentences_source: list[str] = Field(default_factory=list)
    sentences_target: list[str] = Field(default_factory=list)
    vocabulary: list[VocabularyEntry] = Field(default_factory=list)
    is_pending: bool = False

    @property
    def is_aligned(self) -> bool:
        """Whether every source sentence has exactly one target sentence."""
        return len(self.sentences_source) == len(self.sentences_target)

    @property
    def pair_count(self) -> int:
        return min(len(self.sentences_source), len(self.sentences_target))

    def pairs(self) -> list[tuple[str, str]]:
        """Aligned (source, target) pairs."""
        return list(zip(self.sentences_source, self.sentences_target))

    def to_payload(self) -> dict[str, Any]:
        """Render as the wire contract {en, zh, words}."""
        en, zh = self.sentences_target, self.sentences_source
        if self.is_pending:
            # Degraded contract echoes the input under "en".
            en, zh = zh, en
        return {
            "en": list(en),
            "zh": list(zh),
            "words": [entry.to_payload() for entry in self.vocabulary],
        }

    @classmethod
    def pending(cls, source_text: str) -> TranslationResult:
        """Placeholder returned when a polling backend gave no session ids."""
        return cls(
            sentences_source=[source_text],
            sentences_target=[PENDING_PLACEHOLDER],
            is_pending=True,
        )


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of one extraction stage: a value or a failure reason."""

    stage: str
    value: T | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def success(cls, stage: str, value: T) -> StageResult[T]:
        return cls(stage=stage, value=value)

    @classmethod
    def failure(cls, stage: str, reason: str) -> StageResult[T]:
        return cls(stage=stage, reason=reason)
