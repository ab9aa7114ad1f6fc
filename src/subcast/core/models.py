"""Shared data models for subcast."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path


@dataclass(frozen=True)
class WordToken:
    """A single word from the transcription provider, timed in milliseconds."""

    text: str
    start_ms: float
    end_ms: float

    @property
    def start(self) -> float:
        return self.start_ms / 1000.0

    @property
    def end(self) -> float:
        return self.end_ms / 1000.0


@dataclass(frozen=True)
class Cue:
    """One timed subtitle entry."""

    index: int
    start: float  # seconds
    end: float  # seconds
    text: str

    def with_text(self, text: str) -> Cue:
        """Return a copy with new text and the same index and timing."""
        return replace(self, text=text)


@dataclass(frozen=True)
class TranscriptionResult:
    """Output of a completed transcription job."""

    full_text: str
    cues: tuple[Cue, ...]
    detected_language: str | None
    provider_id: str


class AcquisitionStrategy(str, Enum):
    DIRECT_FETCH = "direct-fetch"
    STREAM_UPLOAD = "stream-upload"
    DOWNLOAD_THEN_UPLOAD = "download-then-upload"
    LOCAL_UPLOAD = "local-upload"


@dataclass(frozen=True)
class StoredAsset:
    """An asset held by the object store."""

    secure_url: str
    public_id: str | None = None


@dataclass(frozen=True)
class AcquisitionOutcome:
    remote_url: str
    strategy_used: AcquisitionStrategy
    attempts: int
    public_id: str | None = None


@dataclass(frozen=True)
class TranslationRequest:
    cues: tuple[Cue, ...]
    target_lang: str
    source_lang_hint: str = "auto"


@dataclass(frozen=True)
class TranslationOutcome:
    """Translated cues, same length and order as the input."""

    cues: tuple[Cue, ...]
    source_lang_used: str
    skipped: bool = False


@dataclass
class PipelineResult:
    """Structured result of an end-to-end run.

    On failure ``ok`` is False, ``error`` holds one readable message and no
    subtitle file from the run is left on disk.
    """

    ok: bool
    error: str | None = None
    remote_url: str | None = None
    subtitle_path: Path | None = None
    translated_path: Path | None = None
    transcript: TranscriptionResult | None = None
    translation: TranslationOutcome | None = None
    acquisition: AcquisitionOutcome | None = None
    written: list[Path] = field(default_factory=list)
