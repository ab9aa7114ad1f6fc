"""File naming and scoped temporary files."""

from __future__ import annotations

import os
import re
import secrets
import shutil
import tempfile
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from urllib.parse import urlparse

MEDIA_EXTENSIONS = (".mp4", ".webm", ".mpeg", ".wav", ".m4a", ".mov", ".flv", ".mp3")


def slugify(text: str) -> str:
    """Convert text to a filesystem-safe slug."""
    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_]+", "-", text)
    text = re.sub(r"-+", "-", text)
    return text[:80].strip("-")


def timestamped_name(stem: str, suffix: str = ".vtt") -> str:
    """Build a unique file name: <slug>-<epoch ms>-<random><suffix>."""
    slug = slugify(stem) or "subtitles"
    return f"{slug}-{int(time.time() * 1000)}-{secrets.token_hex(3)}{suffix}"


def media_extension(url: str, default: str = ".mp4") -> str:
    """Guess a media file extension from a URL path."""
    ext = Path(urlparse(url).path).suffix.lower()
    return ext if ext in MEDIA_EXTENSIONS else default


@contextmanager
def scoped_temp_file(suffix: str = "", directory: Path | None = None) -> Iterator[Path]:
    """Yield a fresh temp file path that is removed on every exit path."""
    if directory is not None:
        Path(directory).mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(prefix="subcast-", suffix=suffix, dir=directory)
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


@contextmanager
def scoped_temp_dir(directory: Path | None = None) -> Iterator[Path]:
    """Yield a fresh temp directory that is removed with its contents."""
    if directory is not None:
        Path(directory).mkdir(parents=True, exist_ok=True)
    path = Path(tempfile.mkdtemp(prefix="subcast-", dir=directory))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


def write_text_atomic(path: Path, content: str) -> Path:
    """Write UTF-8 text through a sibling temp file and rename it into place.

    Readers never see a partially written file; the temp file is removed if
    anything fails before the rename.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f".{path.name}.tmp.{secrets.token_hex(4)}")
    try:
        temp_path.write_text(content, encoding="utf-8")
        os.replace(temp_path, path)
    finally:
        temp_path.unlink(missing_ok=True)
    return path
