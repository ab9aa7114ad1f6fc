"""Guess a source language from the Unicode script of cue text.

This is a heuristic: it only recognizes scripts that map to one dominant
language and ignores Latin text entirely.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable

# Checked in order; the first script present in a text wins
_SCRIPTS: list[tuple[str, re.Pattern[str]]] = [
    ("hi", re.compile("[\u0900-\u097F]")),  # Devanagari
    ("ru", re.compile("[\u0400-\u04FF]")),  # Cyrillic
    ("ar", re.compile("[\u0600-\u06FF]")),  # Arabic
    ("zh-CN", re.compile("[\u4E00-\u9FFF\u3400-\u4DBF]")),  # CJK
    ("th", re.compile("[\u0E00-\u0E7F]")),  # Thai
    ("he", re.compile("[\u0590-\u05FF]")),  # Hebrew
]

SAMPLE_SIZE = 8


def detect_script(text: str) -> str | None:
    """Return the language code for the first recognized script in text."""
    if not text:
        return None
    for code, pattern in _SCRIPTS:
        if pattern.search(text):
            return code
    return None


def infer_language(texts: Iterable[str], sample_size: int = SAMPLE_SIZE) -> str | None:
    """Majority vote over the first ``sample_size`` texts.

    Ties go to the language seen first. Returns None when no text has a
    recognized script.
    """
    votes: Counter[str] = Counter()
    for i, text in enumerate(texts):
        if i >= sample_size:
            break
        guess = detect_script(text)
        if guess:
            votes[guess] += 1
    if not votes:
        return None
    # Counter preserves insertion order, and most_common is stable for ties
    return votes.most_common(1)[0][0]
