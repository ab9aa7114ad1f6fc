"""WebVTT rendering.

``render`` is a pure function of its input: identical cues give identical
bytes. Randomness only appears in file names chosen by ``write_vtt``.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from subcast.core.models import Cue
from subcast.subtitles.timecode import encode
from subcast.utils.paths import timestamped_name, write_text_atomic

HEADER = "WEBVTT"
# Span of the single caption used when a transcript has no timing at all
FALLBACK_END = 3600.0


def _block(number: int, start: float, end: float, text: str) -> str:
    body = (text or "").replace("\r\n", "\n")
    return f"{number}\n{encode(start)} --> {encode(end)}\n{body}\n\n"


def render(cues: Sequence[Cue], fallback_text: str = "") -> str:
    """Render cues as WebVTT text.

    With no cues and a non-empty ``fallback_text`` the whole text becomes a
    single one-hour caption.
    """
    parts = [f"{HEADER}\n\n"]
    if not cues:
        if fallback_text:
            parts.append(_block(1, 0.0, FALLBACK_END, fallback_text))
        return "".join(parts)
    for number, cue in enumerate(cues, 1):
        parts.append(_block(number, cue.start, cue.end, cue.text))
    return "".join(parts)


def write_vtt(
    cues: Sequence[Cue],
    output_dir: Path,
    stem: str,
    fallback_text: str = "",
) -> Path:
    """Render cues and save them under a timestamp-suffixed file name."""
    path = Path(output_dir) / timestamped_name(stem, ".vtt")
    return write_text_atomic(path, render(cues, fallback_text))
