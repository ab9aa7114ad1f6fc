"""Tests for core data models."""

import dataclasses

import pytest

from subcast.core.models import (
    AcquisitionStrategy,
    Cue,
    PipelineResult,
    TranslationOutcome,
    WordToken,
)


def test_word_token_seconds():
    token = WordToken(text="bonjour", start_ms=1500, end_ms=2250)
    assert token.start == 1.5
    assert token.end == 2.25


def test_cue_with_text_keeps_timing():
    cue = Cue(index=3, start=1.0, end=2.0, text="Bonjour")
    translated = cue.with_text("Hello")
    assert (translated.index, translated.start, translated.end) == (3, 1.0, 2.0)
    assert translated.text == "Hello"
    assert cue.text == "Bonjour"


def test_cue_is_immutable():
    cue = Cue(index=1, start=0.0, end=1.0, text="a")
    with pytest.raises(dataclasses.FrozenInstanceError):
        cue.text = "b"


def test_strategy_values():
    assert [s.value for s in AcquisitionStrategy] == [
        "direct-fetch",
        "stream-upload",
        "download-then-upload",
        "local-upload",
    ]


def test_translation_outcome_defaults():
    assert TranslationOutcome(cues=(), source_lang_used="auto").skipped is False


def test_pipeline_result_defaults():
    result = PipelineResult(ok=False)
    assert result.written == []
    assert result.subtitle_path is None
