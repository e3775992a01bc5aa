"""
Tests for answer repair rules.
"""

from __future__ import annotations

from .repair import (
    DEFAULT_RULES,
    RepairRule,
    collapse_double_backslashes,
    normalize_escaped_quotes,
    sanitize,
    strip_code_fence,
    strip_escaped_newline_runs,
    strip_newline_runs,
)


def test_default_rule_order() -> None:
    """Test rules run fence first, then newline and escape fixes."""
    assert [rule.name for rule in DEFAULT_RULES] == [
        "strip_code_fence",
        "strip_escaped_newline_runs",
        "strip_newline_runs",
        "collapse_double_backslashes",
        "normalize_escaped_quotes",
    ]


def test_strip_code_fence() -> None:
    assert strip_code_fence('```json\n{"en": []}\n```') == '{"en": []}'
    assert strip_code_fence('```\n{"en": []}```') == '{"en": []}'


def test_strip_code_fence_leaves_plain_text() -> None:
    assert strip_code_fence('{"en": ["```"]}') == '{"en": ["```"]}'


def test_strip_escaped_newline_runs() -> None:
    """Test only backslash-n followed by whitespace is removed."""
    assert strip_escaped_newline_runs(r"a\n   b") == "ab"
    assert strip_escaped_newline_runs(r"a\nb") == r"a\nb"


def test_strip_newline_runs() -> None:
    assert strip_newline_runs("a\n   b\nc") == "ab\nc"


def test_collapse_double_backslashes() -> None:
    assert collapse_double_backslashes(r"a\\b") == r"a\b"


def test_normalize_escaped_quotes() -> None:
    assert normalize_escaped_quotes(r"\"en\"") == '"en"'


def test_sanitize_removes_escaped_newline_inside_string() -> None:
    """Test escaped newlines followed by indentation vanish even inside strings."""
    assert sanitize(r'"a\n   b"') == '"ab"'


def test_sanitize_with_appended_rule() -> None:
    """Test new rules compose without touching the defaults."""
    rules = [*DEFAULT_RULES, RepairRule("lower", str.lower)]
    assert sanitize('```\n{"EN": []}\n```', rules) == '{"en": []}'


def test_sanitize_without_rules() -> None:
    assert sanitize("  raw  ", []) == "  raw  "
