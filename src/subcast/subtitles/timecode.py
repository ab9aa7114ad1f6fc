"""Conversion between seconds and WebVTT timestamps (HH:MM:SS.mmm).

Times are rounded half-up to the nearest millisecond and every field is
derived from a single integer millisecond total, so carries propagate
(3599.9996 -> 01:00:00.000). Hours are not clamped to 24.
"""

from __future__ import annotations

import math
import re

_TIMESTAMP_RE = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{1,2})(?:[.,](\d{1,3}))?$")


def _to_millis(seconds: object) -> int:
    try:
        value = float(seconds)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(value) or value < 0:
        return 0
    return int(math.floor(value * 1000 + 0.5))


def encode(seconds: object) -> str:
    """Format seconds as HH:MM:SS.mmm; bad or negative input encodes as zero."""
    total_ms = _to_millis(seconds)
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"


def decode(timestamp: str) -> float:
    """Parse HH:MM:SS.mmm (or MM:SS.mmm, comma separator allowed) to seconds.

    Raises:
        ValueError: If the timestamp is malformed.
    """
    match = _TIMESTAMP_RE.match(timestamp.strip())
    if not match:
        raise ValueError(f"Invalid timestamp: {timestamp!r}")
    hours, minutes, secs, frac = match.groups()
    if int(minutes) >= 60 or int(secs) >= 60:
        raise ValueError(f"Invalid timestamp: {timestamp!r}")
    millis = int((frac or "0").ljust(3, "0"))
    total_ms = ((int(hours or 0) * 60 + int(minutes)) * 60 + int(secs)) * 1000 + millis
    return total_ms / 1000.0
