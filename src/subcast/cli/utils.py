"""Shared CLI helpers."""

from __future__ import annotations

from pathlib import Path


def expand_inputs(inputs: list[str]) -> list[str]:
    """Expand glob patterns and source list files into individual sources.

    URLs pass through untouched so that validation can reject them later
    with a proper message. A ``.list`` file holds one source per line;
    blank lines and ``#`` comments are skipped.
    """
    expanded: list[str] = []
    for inp in inputs:
        if "://" in inp:
            expanded.append(inp)
            continue

        path = Path(inp)
        if path.suffix == ".list" and path.is_file():
            for line in path.read_text(encoding="utf-8").splitlines():
                line = line.strip()
                if line and not line.startswith("#"):
                    expanded.append(line)
            continue

        if any(c in inp for c in "*?["):
            matches = sorted(Path(".").glob(inp))
            if matches:
                expanded.extend(str(m) for m in matches)
                continue

        expanded.append(inp)

    return expanded
