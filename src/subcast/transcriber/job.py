"""Transcription job state machine.

A job moves ``pending -> submitted -> polling -> completed | failed``.
``poll()`` performs one status check and returns a tagged result, so callers
own the cadence and any deadline; ``wait()`` is the plain polling loop built
on top of it. There is no automatic resubmission of a failed job.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from subcast.core.errors import TranscriptionError
from subcast.core.models import TranscriptionResult, WordToken
from subcast.subtitles.cues import build_cues
from subcast.utils.console import console

POLL_INTERVAL = 2.5


class TranscriptionProvider(Protocol):
    provider_id: str

    def submit(self, audio_url: str, language: str = "auto") -> str: ...

    def poll(self, job_id: str) -> dict: ...


class JobState(str, Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class JobPending:
    status: str


@dataclass(frozen=True)
class JobCompleted:
    result: TranscriptionResult


@dataclass(frozen=True)
class JobFailed:
    message: str


JobStatus = JobPending | JobCompleted | JobFailed


def normalize_payload(payload: dict, provider_id: str = "") -> TranscriptionResult:
    """Convert a completed provider payload into a TranscriptionResult."""
    tokens = [
        WordToken(
            text=str(w.get("text") or w.get("word") or ""),
            start_ms=float(w.get("start") or 0),
            end_ms=float(w.get("end") or 0),
        )
        for w in payload.get("words") or []
    ]
    full_text = payload.get("text") or ""
    duration = payload.get("audio_duration")
    cues = build_cues(tokens, full_text=full_text, total_duration=duration)
    return TranscriptionResult(
        full_text=full_text,
        cues=tuple(cues),
        detected_language=payload.get("language_code"),
        provider_id=provider_id,
    )


class TranscriptionJob:
    """One asynchronous transcription request tracked by an opaque id."""

    def __init__(self, provider: TranscriptionProvider):
        self.provider = provider
        self.state = JobState.PENDING
        self.job_id: str | None = None
        self.outcome: JobStatus | None = None

    def submit(self, audio_url: str, language: str = "auto") -> str:
        if self.state is not JobState.PENDING:
            raise TranscriptionError(f"Job already submitted ({self.job_id})")
        self.job_id = self.provider.submit(audio_url, language)
        self.state = JobState.SUBMITTED
        console.print(f"[dim]Transcription job submitted:[/dim] {self.job_id}")
        return self.job_id

    def poll(self) -> JobStatus:
        """Check the provider once and advance the state machine."""
        if self.job_id is None:
            raise TranscriptionError("Job has not been submitted")
        if self.outcome is not None:
            return self.outcome

        payload = self.provider.poll(self.job_id)
        status = payload.get("status", "")

        if status == "completed":
            result = normalize_payload(payload, self.provider.provider_id)
            self.state = JobState.COMPLETED
            self.outcome = JobCompleted(result)
            return self.outcome
        if status == "error":
            self.state = JobState.FAILED
            self.outcome = JobFailed(str(payload.get("error") or "unknown error"))
            return self.outcome

        self.state = JobState.POLLING
        return JobPending(status or "unknown")

    def wait(
        self,
        interval: float = POLL_INTERVAL,
        timeout: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> TranscriptionResult:
        """Poll until the job is terminal.

        Args:
            interval: Seconds between status checks.
            timeout: Optional overall deadline in seconds; None never expires.
            sleep: Sleep function (injectable for tests).
            clock: Monotonic clock (injectable for tests).

        Raises:
            TranscriptionError: The provider reported failure (its message is
                kept verbatim) or the deadline passed.
        """
        deadline = None if timeout is None else clock() + timeout
        while True:
            sleep(interval)
            status = self.poll()
            if isinstance(status, JobCompleted):
                console.print(
                    f"[green]Transcription complete:[/green] {len(status.result.cues)} cues"
                    + (
                        f", language {status.result.detected_language}"
                        if status.result.detected_language
                        else ""
                    )
                )
                return status.result
            if isinstance(status, JobFailed):
                raise TranscriptionError(status.message)
            if deadline is not None and clock() >= deadline:
                raise TranscriptionError(
                    f"Transcription job {self.job_id} did not finish within {timeout:g}s"
                )
