"""Tests for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from typer.testing import CliRunner

from bitext import __version__
from bitext.config.errors import UnsupportedModelError
from bitext.domains.extraction import PartOfSpeech, TranslationResult, VocabularyEntry

from .main import app

runner = CliRunner()

RESULT = TranslationResult(
    sentences_source=["时近半夜，硬卧车厢熄灯。"],
    sentences_target=["It was nearing midnight; the lights were out in the sleeper car."],
    vocabulary=[VocabularyEntry(word="sleeper", part_of_speech=PartOfSpeech.NOUN, meaning="卧铺")],
)


def mock_orchestrator(**kwargs) -> MagicMock:
    orchestrator = MagicMock()
    orchestrator.translate_text = AsyncMock(**kwargs)
    return orchestrator


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_translate_requires_text() -> None:
    result = runner.invoke(app, ["translate"])
    assert result.exit_code == 1


def test_translate_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["translate", "--file", str(tmp_path / "missing.txt")])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_translate_writes_output(tmp_path: Path) -> None:
    """Test the JSON payload is written to --output."""
    source = tmp_path / "chapter.txt"
    source.write_text("时近半夜，硬卧车厢熄灯。", encoding="utf-8")
    output = tmp_path / "chapter.json"
    orchestrator = mock_orchestrator(return_value=RESULT)

    with patch(
        "bitext.domains.orchestration.TranslationOrchestrator.from_settings",
        return_value=orchestrator,
    ):
        result = runner.invoke(
            app,
            ["translate", "--file", str(source), "--model", "gpt-4o", "--output", str(output)],
        )

    assert result.exit_code == 0
    assert json.loads(output.read_text(encoding="utf-8")) == RESULT.to_payload()
    assert orchestrator.translate_text.call_args.args == ("时近半夜，硬卧车厢熄灯。", "gpt-4o")


def test_translate_reports_errors() -> None:
    orchestrator = mock_orchestrator(side_effect=UnsupportedModelError("gpt-9"))

    with patch(
        "bitext.domains.orchestration.TranslationOrchestrator.from_settings",
        return_value=orchestrator,
    ):
        result = runner.invoke(app, ["translate", "你好。", "--model", "gpt-9"])

    assert result.exit_code == 1
    assert "UNSUPPORTED_MODEL" in result.output
