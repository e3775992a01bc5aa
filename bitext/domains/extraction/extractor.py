"""
Structured Extractor - Recover {en, zh, words} from a raw model answer.

Stages run in order and the first success wins:

1. sanitize with the repair rules
2. parse the sanitized text as one JSON object
3. locate the three array bodies in the sanitized text and parse each alone
4. parse the untouched text strictly

If every stage fails, ExtractionError carries the raw text and all reasons.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from typing import Any

from bitext.config.errors import ExtractionError

from .models import ExtractedAnswer, PartOfSpeech, RawWord, StageResult
from .repair import DEFAULT_RULES, RepairRule, sanitize, strip_code_fence

logger = logging.getLogger(__name__)

__all__ = [
    "StructuredExtractor",
    "answer_from_object",
    "parse_direct",
    "parse_by_pattern",
    "parse_unsanitized",
]

ARRAY_FIELDS = ("en", "zh", "words")


def _text(value: Any, default: str = "") -> str:
    if value is None or value == "":
        return default
    return value if isinstance(value, str) else str(value)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [_text(item) for item in value if item is not None]


def _word_list(value: Any) -> list[RawWord]:
    if not isinstance(value, list):
        return []
    words = []
    for item in value:
        if not isinstance(item, dict):
            logger.debug("Skipping non-object vocabulary item: %r", item)
            continue
        words.append(
            RawWord(
                word=_text(item.get("word")),
                type=_text(item.get("type"), PartOfSpeech.UNKNOWN.value),
                meaning=_text(item.get("meaning")),
            )
        )
    return words


def answer_from_object(data: dict[str, Any]) -> ExtractedAnswer:
    """
    Coerce a decoded object into an ExtractedAnswer.

    Missing or non-list fields become empty lists; word fields fall back
    to "", "Unknown" and "".
    """
    return ExtractedAnswer(
        en=_string_list(data.get("en")),
        zh=_string_list(data.get("zh")),
        words=_word_list(data.get("words")),
    )


def _load_object(text: str, stage: str) -> StageResult[ExtractedAnswer]:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        return StageResult.failure(stage, f"invalid JSON: {e}")

    if not isinstance(data, dict):
        return StageResult.failure(stage, f"expected a JSON object, got {type(data).__name__}")

    return StageResult.success(stage, answer_from_object(data))


def parse_direct(sanitized: str) -> StageResult[ExtractedAnswer]:
    """Parse the sanitized text as a single JSON object."""
    return _load_object(sanitized, "direct")


def _closing_bracket(text: str, start: int) -> int | None:
    """Index of the bracket closing the one at ``start``, skipping strings."""
    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return index

    return None


def _array_field(text: str, field: str) -> tuple[list[Any] | None, str]:
    """Find and decode the first well-formed array assigned to ``field``."""
    pattern = re.compile(rf"""(?<!\w)["']?{re.escape(field)}["']?\s*:\s*\[""")
    reason = f"no '{field}' array found"

    for match in pattern.finditer(text):
        start = match.end() - 1
        end = _closing_bracket(text, start)
        if end is None:
            reason = f"unterminated '{field}' array"
            continue
        try:
            value = json.loads(text[start : end + 1])
        except json.JSONDecodeError as e:
            reason = f"malformed '{field}' array: {e}"
            continue
        return value, ""

    return None, reason


def parse_by_pattern(sanitized: str) -> StageResult[ExtractedAnswer]:
    """Locate the en, zh and words arrays amid surrounding junk."""
    found: dict[str, list[Any]] = {}
    for field in ARRAY_FIELDS:
        value, reason = _array_field(sanitized, field)
        if value is None:
            return StageResult.failure("pattern", reason)
        found[field] = value

    return StageResult.success("pattern", answer_from_object(found))


def parse_unsanitized(raw_text: str) -> StageResult[ExtractedAnswer]:
    """Strict parse of the original text, with only a code fence removed."""
    return _load_object(strip_code_fence(raw_text).strip(), "unsanitized")


class StructuredExtractor:
    """
    Staged extractor for translation answers.

    Example:
        >>> extractor = StructuredExtractor()
        >>> answer = extractor.extract('{"en": ["Hi."], "zh": ["你好。"], "words": []}')
        >>> answer.en
        ['Hi.']
    """

    def __init__(self, rules: Sequence[RepairRule] = DEFAULT_RULES) -> None:
        """
        Initialize extractor.

        Args:
            rules: Repair rules applied before parsing
        """
        self.rules = tuple(rules)

    def stages(self, raw_text: str) -> list[StageResult[ExtractedAnswer]]:
        """
        Run stages until one succeeds.

        Returns:
            Results of every stage that ran; the last one is the success
            if there was one.
        """
        sanitized = sanitize(raw_text, self.rules)
        results: list[StageResult[ExtractedAnswer]] = []

        for stage in (
            lambda: parse_direct(sanitized),
            lambda: parse_by_pattern(sanitized),
            lambda: parse_unsanitized(raw_text),
        ):
            result = stage()
            results.append(result)
            if result.ok:
                break

        return results

    def extract(self, raw_text: str) -> ExtractedAnswer:
        """
        Extract the structured answer.

        Args:
            raw_text: Raw answer from a backend

        Returns:
            Recovered arrays

        Raises:
            ExtractionError: If no stage succeeds
        """
        results = self.stages(raw_text)
        last = results[-1]

        if last.ok and last.value is not None:
            if last.stage != "direct":
                logger.info("Answer recovered by %s stage", last.stage)
            return last.value

        reasons = {result.stage: result.reason or "" for result in results}
        logger.warning(
            "Extraction failed: %s",
            "; ".join(f"{stage}: {reason}" for stage, reason in reasons.items()),
        )
        logger.debug("Unparseable answer: %s", raw_text)
        raise ExtractionError(raw_text, reasons=reasons)
