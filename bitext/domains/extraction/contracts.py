"""
Extraction Contracts - Interfaces for extraction domain.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import ExtractedAnswer


@runtime_checkable
class AnswerExtractor(Protocol):
    """
    Contract for turning a raw answer into structured arrays.

    Example:
        >>> class MyExtractor:
        ...     def extract(self, raw_text: str) -> ExtractedAnswer:
        ...         ...
        >>> assert isinstance(MyExtractor(), AnswerExtractor)
    """

    def extract(self, raw_text: str) -> ExtractedAnswer:
        """
        Extract {en, zh, words} from a raw answer.

        Args:
            raw_text: Unprocessed backend answer

        Returns:
            Recovered arrays

        Raises:
            ExtractionError: If the answer cannot be recovered
        """
        ...
