"""Load existing subtitle files into cues.

Used when translating a subtitle file that was produced elsewhere. pysubs2
handles SRT, VTT, ASS and friends; plain .txt is read one cue per line.
"""

from __future__ import annotations

from pathlib import Path

import pysubs2

from subcast.core.models import Cue
from subcast.subtitles.cues import reindex


def load_subtitles(path: Path) -> list[Cue]:
    """Load a subtitle file into cues indexed from 1.

    Supports SRT, VTT, ASS, and plain TXT (one line per cue, no timestamps).
    """
    path = Path(path)

    if path.suffix == ".txt":
        text = path.read_text(encoding="utf-8")
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        return [Cue(index=i, start=0.0, end=0.0, text=line) for i, line in enumerate(lines, 1)]

    subs = pysubs2.load(str(path), encoding="utf-8")
    cues = [
        Cue(
            index=0,
            start=event.start / 1000.0,
            end=max(event.end, event.start) / 1000.0,
            text=event.plaintext,
        )
        for event in subs.events
        if not event.is_comment
    ]
    return reindex(cues)
