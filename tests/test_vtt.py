"""Tests for WebVTT rendering and saving."""

from pathlib import Path

from subcast.core.models import Cue
from subcast.subtitles.vtt import render, write_vtt
from subcast.transcriber.job import normalize_payload


def test_render_single_cue():
    """One cue renders as a numbered block after the header."""
    cues = [Cue(index=1, start=0.0, end=0.9, text="hi there")]
    assert render(cues) == "WEBVTT\n\n1\n00:00:00.000 --> 00:00:00.900\nhi there\n\n"


def test_render_from_provider_words():
    """Timed words flow through segmentation into the exact WebVTT bytes."""
    payload = {
        "status": "completed",
        "text": "hi there",
        "words": [
            {"text": "hi", "start": 0, "end": 300},
            {"text": "there", "start": 350, "end": 900},
        ],
    }
    result = normalize_payload(payload, "fake")
    assert render(result.cues) == "WEBVTT\n\n1\n00:00:00.000 --> 00:00:00.900\nhi there\n\n"


def test_render_numbers_blocks_from_one():
    """Blocks are numbered by position, not by the incoming cue index."""
    cues = [Cue(index=5, start=0, end=1, text="a"), Cue(index=9, start=1, end=2, text="b")]
    text = render(cues)
    assert "\n1\n00:00:00.000 --> 00:00:01.000\na\n" in text
    assert "\n2\n00:00:01.000 --> 00:00:02.000\nb\n" in text


def test_render_is_deterministic():
    """Rendering the same cues twice gives identical text."""
    cues = [Cue(index=1, start=1.2345, end=2.5, text="Bonjour")]
    assert render(cues).encode("utf-8") == render(list(cues)).encode("utf-8")


def test_render_empty_is_header_only():
    assert render([]) == "WEBVTT\n\n"


def test_render_fallback_text():
    """With no cues, the fallback text is written as a single block."""
    text = render([], fallback_text="whole transcript")
    assert text == "WEBVTT\n\n1\n00:00:00.000 --> 01:00:00.000\nwhole transcript\n\n"


def test_render_normalizes_crlf():
    """Windows line endings inside cue text become plain newlines."""
    cues = [Cue(index=1, start=0, end=1, text="line one\r\nline two")]
    assert "line one\nline two\n\n" in render(cues)
    assert "\r" not in render(cues)


def test_write_vtt(tmp_path: Path):
    """The written file is UTF-8 and named after the stem."""
    cues = [Cue(index=1, start=0.0, end=1.0, text="Hello")]
    path = write_vtt(cues, tmp_path / "out", "My Talk")
    assert path.parent == tmp_path / "out"
    assert path.name.startswith("my-talk-")
    assert path.suffix == ".vtt"
    assert path.read_text(encoding="utf-8") == render(cues)
    # No temp files left behind
    assert list(path.parent.iterdir()) == [path]


def test_write_vtt_unique_names(tmp_path: Path):
    """Repeated writes with the same stem never overwrite each other."""
    cues = [Cue(index=1, start=0.0, end=1.0, text="Hello")]
    first = write_vtt(cues, tmp_path, "talk")
    second = write_vtt(cues, tmp_path, "talk")
    assert first != second
    assert first.read_bytes() == second.read_bytes()


def test_adjacent_words_render_one_block():
    payload = {
        "status": "completed",
        "words": [
            {"text": "hi", "start": 0, "end": 500},
            {"text": "there", "start": 500, "end": 900},
        ],
    }
    cues = normalize_payload(payload).cues
    assert cues == (Cue(index=1, start=0.0, end=0.9, text="hi there"),)
    assert render(cues).endswith("1\n00:00:00.000 --> 00:00:00.900\nhi there\n\n")
