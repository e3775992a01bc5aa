"""
Repair Rules - Pure text fixes applied before parsing a raw answer.

Each rule is independent and named; ``sanitize`` applies them in order.
New rules are appended to ``DEFAULT_RULES`` without touching the parser.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

__all__ = [
    "RepairRule",
    "DEFAULT_RULES",
    "sanitize",
    "strip_code_fence",
    "strip_escaped_newline_runs",
    "strip_newline_runs",
    "collapse_double_backslashes",
    "normalize_escaped_quotes",
]

_CODE_FENCE_OPEN = re.compile(r"^\s*```[A-Za-z0-9_-]*[ \t]*\r?\n?")
_CODE_FENCE_CLOSE = re.compile(r"\r?\n?[ \t]*```\s*$")
_ESCAPED_NEWLINE_RUN = re.compile(r"\\n\s+")
_NEWLINE_RUN = re.compile(r"\n\s+")


@dataclass(frozen=True)
class RepairRule:
    """A named, pure text transformation."""

    name: str
    apply: Callable[[str], str]

    def __call__(self, text: str) -> str:
        return self.apply(text)


def strip_code_fence(text: str) -> str:
    """Remove a Markdown code fence wrapped around the whole answer."""
    if not _CODE_FENCE_OPEN.match(text):
        return text
    return _CODE_FENCE_CLOSE.sub("", _CODE_FENCE_OPEN.sub("", text, count=1), count=1)


def strip_escaped_newline_runs(text: str) -> str:
    """Drop a literal backslash-n followed by whitespace."""
    return _ESCAPED_NEWLINE_RUN.sub("", text)


def strip_newline_runs(text: str) -> str:
    """Drop a real newline followed by whitespace."""
    return _NEWLINE_RUN.sub("", text)


def collapse_double_backslashes(text: str) -> str:
    return text.replace("\\\\", "\\")


def normalize_escaped_quotes(text: str) -> str:
    return text.replace('\\"', '"')


DEFAULT_RULES: tuple[RepairRule, ...] = (
    RepairRule("strip_code_fence", strip_code_fence),
    RepairRule("strip_escaped_newline_runs", strip_escaped_newline_runs),
    RepairRule("strip_newline_runs", strip_newline_runs),
    RepairRule("collapse_double_backslashes", collapse_double_backslashes),
    RepairRule("normalize_escaped_quotes", normalize_escaped_quotes),
)


def sanitize(text: str, rules: Sequence[RepairRule] = DEFAULT_RULES) -> str:
    """
    Apply repair rules in order.

    Args:
        text: Raw answer text
        rules: Rules to apply, first to last

    Returns:
        Repaired text
    """
    for rule in rules:
        text = rule(text)
    return text
