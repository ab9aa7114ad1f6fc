"""Turn word-level timings into subtitle cues.

A cue grows word by word until adding a word would make it span more than
``max_duration`` seconds from its first word; that word then starts the next
cue. A single long word still becomes its own cue, because the span is only
checked when a word is added to an already open cue.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from subcast.core.models import Cue, WordToken

MAX_CUE_DURATION = 5.0
FALLBACK_MIN_DURATION = 1.0


def build_cues(
    tokens: Iterable[WordToken],
    full_text: str = "",
    total_duration: float | None = None,
    max_duration: float = MAX_CUE_DURATION,
) -> list[Cue]:
    """Segment timed words into cues, or wrap untimed text in a single cue.

    Args:
        tokens: Words in temporal order (may be empty).
        full_text: Transcript used when there are no timed words.
        total_duration: Audio duration in seconds for the untimed fallback.
        max_duration: Maximum span of a cue, in seconds (strict ``>`` closes).

    Returns:
        Cues indexed contiguously from 1.
    """
    limit_ms = max_duration * 1000
    groups: list[list[WordToken]] = []
    current: list[WordToken] = []

    for token in tokens:
        if not token.text or not token.text.strip():
            continue
        if current and token.end_ms - current[0].start_ms > limit_ms:
            groups.append(current)
            current = []
        current.append(token)
    if current:
        groups.append(current)

    if groups:
        return [_group_to_cue(i, group) for i, group in enumerate(groups, 1)]

    text = (full_text or "").strip()
    if text:
        end = max(total_duration or 0.0, FALLBACK_MIN_DURATION)
        return [Cue(index=1, start=0.0, end=float(end), text=text)]
    return []


def _group_to_cue(index: int, group: list[WordToken]) -> Cue:
    start = max(group[0].start, 0.0)
    end = max(group[-1].end, start)
    text = " ".join(token.text.strip() for token in group)
    return Cue(index=index, start=start, end=end, text=text)


def reindex(cues: Sequence[Cue]) -> list[Cue]:
    """Renumber cues contiguously from 1, keeping order."""
    return [
        cue if cue.index == i else Cue(index=i, start=cue.start, end=cue.end, text=cue.text)
        for i, cue in enumerate(cues, 1)
    ]
