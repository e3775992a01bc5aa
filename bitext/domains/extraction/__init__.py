"""
Extraction Domain - Raw answer to structured translation result.

This domain handles:
- Repairing common corruption in model answers
- Staged parsing of {en, zh, words}
- Vocabulary deduplication and part-of-speech classification
"""

from .contracts import AnswerExtractor
from .extractor import StructuredExtractor
from .models import (
    ExtractedAnswer,
    PartOfSpeech,
    RawWord,
    StageResult,
    TranslationResult,
    VocabularyEntry,
)
from .repair import DEFAULT_RULES, RepairRule, sanitize
from .vocabulary import normalize_vocabulary

__all__ = [
    # Contracts
    "AnswerExtractor",
    # Models
    "ExtractedAnswer",
    "PartOfSpeech",
    "RawWord",
    "StageResult",
    "TranslationResult",
    "VocabularyEntry",
    # Implementations
    "StructuredExtractor",
    "RepairRule",
    "DEFAULT_RULES",
    "sanitize",
    "normalize_vocabulary",
]
