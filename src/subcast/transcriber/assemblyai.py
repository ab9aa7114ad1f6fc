"""AssemblyAI REST client.

Implements the provider side of a transcription job: submit an audio URL,
poll the job by id. Word timestamps come back in milliseconds and
``audio_duration`` in seconds.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import requests

from subcast.core.config import AssemblyAIConfig
from subcast.core.errors import ConfigError, TranscriptionError


class AssemblyAIClient:
    """Thin wrapper over the AssemblyAI v2 transcript API."""

    def __init__(self, config: AssemblyAIConfig, session: requests.Session | None = None):
        if not config.api_key:
            raise ConfigError("SUBCAST_ASSEMBLYAI__API_KEY is not set")
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": config.api_key})

    @property
    def provider_id(self) -> str:
        return "assemblyai"

    def _request(self, method: str, path: str, action: str, **kwargs: Any) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method, url, timeout=self.config.request_timeout, **kwargs
            )
        except requests.RequestException as e:
            raise TranscriptionError(f"AssemblyAI {action} failed: {e}") from e
        if not response.ok:
            raise TranscriptionError(f"AssemblyAI {action} failed: {response.text}")
        try:
            data = response.json()
        except ValueError as e:
            raise TranscriptionError(f"AssemblyAI {action} returned invalid JSON") from e
        if not isinstance(data, dict):
            raise TranscriptionError(f"AssemblyAI {action} returned an unexpected response")
        return data

    def upload(self, path: Path) -> str:
        """Upload raw local bytes; returns a private URL usable by submit()."""
        path = Path(path)
        if not path.is_file():
            raise TranscriptionError(f"File not found: {path}")
        if path.stat().st_size == 0:
            raise TranscriptionError(f"File is empty: {path}")
        with open(path, "rb") as f:
            data = self._request(
                "POST",
                "/v2/upload",
                "upload",
                data=f,
                headers={"Content-Type": "application/octet-stream"},
            )
        return data["upload_url"]

    def submit(self, audio_url: str, language: str = "auto") -> str:
        """Create a transcript job and return its id."""
        body: dict[str, Any] = {"audio_url": audio_url}
        if language and language != "auto":
            body["language_code"] = language
        else:
            body["language_detection"] = True
        data = self._request("POST", "/v2/transcript", "transcript submit", json=body)
        job_id = data.get("id")
        if not job_id:
            raise TranscriptionError("AssemblyAI transcript submit returned no job id")
        return job_id

    def poll(self, job_id: str) -> dict:
        """Fetch the current job payload.

        Returns a dict with ``status`` (queued, processing, completed, error)
        and, once completed, ``words``, ``text``, ``audio_duration`` and
        ``language_code``; failures carry ``error``.
        """
        return self._request("GET", f"/v2/transcript/{job_id}", "status poll")
