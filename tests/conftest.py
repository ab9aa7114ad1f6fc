"""Shared test fixtures and in-memory collaborators."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from subcast.core.config import AcquisitionConfig, TranslationConfig
from subcast.core.errors import StoreError
from subcast.core.models import StoredAsset


class FakeResponse:
    """Stand-in for requests.Response with streaming support."""

    def __init__(
        self,
        status_code: int = 200,
        chunks: list[bytes] | None = None,
        headers: dict | None = None,
        json_data: object = None,
        reason: str = "",
    ):
        self.status_code = status_code
        self.chunks = chunks if chunks is not None else [b"data"]
        self.headers = headers or {}
        self.json_data = json_data
        self.reason = reason
        self.raw = io.BytesIO(b"".join(self.chunks))
        self.closed = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    @property
    def text(self) -> str:
        return str(self.json_data)

    def json(self):
        if isinstance(self.json_data, Exception):
            raise self.json_data
        return self.json_data

    def raise_for_status(self) -> None:
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def iter_content(self, chunk_size: int = 1):
        yield from self.chunks

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Replays queued responses (or raises queued exceptions) in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[tuple[str, str, dict]] = []
        self.headers: dict = {}

    def _next(self, method: str, url: str, kwargs: dict):
        self.calls.append((method, url, kwargs))
        if not self.responses:
            raise AssertionError(f"Unexpected {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url, **kwargs):
        return self._next("GET", url, kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, kwargs)

    def request(self, method, url, **kwargs):
        return self._next(method, url, kwargs)


class FakeStore:
    """In-memory ObjectStore.

    Each ``*_results`` list is consumed in order; an Exception entry is
    raised, anything else is returned. When a list runs dry the call
    succeeds with a generated asset.
    """

    def __init__(self, fetch_results=None, stream_results=None, local_results=None):
        self.fetch_results = list(fetch_results or [])
        self.stream_results = list(stream_results or [])
        self.local_results = list(local_results or [])
        self.calls: list[tuple[str, object]] = []
        self.deleted: list[str] = []

    def _answer(self, results: list, kind: str) -> StoredAsset:
        n = len(self.calls)
        if results:
            item = results.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        return StoredAsset(secure_url=f"https://cdn.test/{kind}/{n}.mp4", public_id=f"{kind}-{n}")

    def upload_local_file(self, path, **options):
        self.calls.append(("local", Path(path)))
        if not Path(path).is_file():
            raise StoreError(f"Local file does not exist: {path}")
        return self._answer(self.local_results, "local")

    def fetch_remote_url(self, url, **options):
        self.calls.append(("fetch", url))
        return self._answer(self.fetch_results, "fetch")

    def upload_stream(self, stream, **options):
        self.calls.append(("stream", stream.read()))
        return self._answer(self.stream_results, "stream")

    def delete_asset(self, public_id):
        self.deleted.append(public_id)


class FakeTranscriptionProvider:
    """Returns queued poll payloads for a single job."""

    provider_id = "fake"

    def __init__(self, *payloads: dict, job_id: str = "job-1"):
        self.payloads = list(payloads)
        self.job_id = job_id
        self.submitted: list[tuple[str, str]] = []
        self.polls = 0

    def submit(self, audio_url: str, language: str = "auto") -> str:
        self.submitted.append((audio_url, language))
        return self.job_id

    def poll(self, job_id: str) -> dict:
        self.polls += 1
        if len(self.payloads) > 1:
            return self.payloads.pop(0)
        return self.payloads[0]


class FakeTranslator:
    """Translation provider that records calls and can be told to fail."""

    def __init__(self, name: str = "fake", fail: bool = False, prefix: str = ""):
        self.name = name
        self.fail = fail
        self.prefix = prefix or f"[{name}] "
        self.calls: list[tuple[str, str, str]] = []

    def translate(self, text: str, source: str, target: str) -> str:
        from subcast.core.errors import ProviderError

        self.calls.append((text, source, target))
        if self.fail:
            raise ProviderError(f"{self.name}: unavailable")
        return f"{self.prefix}{text}"


@pytest.fixture
def no_sleep():
    """A recording replacement for time.sleep."""
    slept: list[float] = []

    def _sleep(seconds: float) -> None:
        slept.append(seconds)

    _sleep.calls = slept
    return _sleep


@pytest.fixture
def acquisition_config(tmp_path: Path) -> AcquisitionConfig:
    return AcquisitionConfig(temp_dir=tmp_path / "tmp", max_bytes=1024)


@pytest.fixture
def translation_config() -> TranslationConfig:
    return TranslationConfig(delay=0.0)


@pytest.fixture
def media_file(tmp_path: Path) -> Path:
    path = tmp_path / "talk.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42")
    return path
