"""Acquisition strategies.

Every strategy exposes ``attempt(source) -> StrategyResult`` and never raises
for ordinary failures: the result carries either the stored asset or the last
error message, plus how many network attempts were spent.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import requests
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from subcast.core.config import AcquisitionConfig
from subcast.core.errors import StoreError, TransferError
from subcast.core.models import AcquisitionStrategy, StoredAsset
from subcast.downloader.http import download_to_file, open_stream
from subcast.downloader.store import ObjectStore
from subcast.utils.console import console
from subcast.utils.paths import media_extension, scoped_temp_dir, scoped_temp_file

# Network, status, stream and store errors are all worth another try
RETRYABLE = (requests.RequestException, TransferError, StoreError, OSError)


def _describe(error: BaseException) -> str:
    return str(error) or error.__class__.__name__


@dataclass(frozen=True)
class StrategyResult:
    strategy: AcquisitionStrategy
    asset: StoredAsset | None = None
    attempts: int = 1
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.asset is not None


class LocalUploadStrategy:
    """Upload a local file straight to the object store."""

    name = AcquisitionStrategy.LOCAL_UPLOAD

    def __init__(self, store: ObjectStore):
        self.store = store

    def attempt(self, source: Path) -> StrategyResult:
        try:
            asset = self.store.upload_local_file(Path(source))
        except StoreError as e:
            return StrategyResult(self.name, error=_describe(e))
        return StrategyResult(self.name, asset=asset)


class ExtractorStrategy:
    """Download from a video-hosting site with yt-dlp, then upload the file."""

    name = AcquisitionStrategy.DOWNLOAD_THEN_UPLOAD

    def __init__(
        self,
        store: ObjectStore,
        config: AcquisitionConfig,
        extract: Callable[[str, Path, str], Path] | None = None,
    ):
        self.store = store
        self.config = config
        if extract is None:
            from subcast.downloader.ytdlp import download as extract
        self.extract = extract

    def attempt(self, source: str) -> StrategyResult:
        try:
            with scoped_temp_dir(self.config.temp_dir) as workdir:
                local_file = self.extract(source, workdir, self.config.download_format)
                console.print("[bold]Uploading extracted file to object store...[/bold]")
                asset = self.store.upload_local_file(local_file)
        except (RuntimeError, StoreError, OSError) as e:
            return StrategyResult(self.name, error=_describe(e))
        return StrategyResult(self.name, asset=asset)


class RemoteFetchStrategy:
    """Ask the object store to pull the URL itself; no local bandwidth used."""

    name = AcquisitionStrategy.DIRECT_FETCH

    def __init__(self, store: ObjectStore):
        self.store = store

    def attempt(self, source: str) -> StrategyResult:
        try:
            asset = self.store.fetch_remote_url(source)
        except StoreError as e:
            return StrategyResult(self.name, error=_describe(e))
        return StrategyResult(self.name, asset=asset)


class StreamUploadStrategy:
    """Pipe a streaming GET straight into the store's streaming upload.

    Retried with exponential backoff (2^attempt seconds plus up to 500 ms of
    jitter). One session is shared by all attempts so TCP/TLS connections
    are reused.
    """

    name = AcquisitionStrategy.STREAM_UPLOAD

    def __init__(
        self,
        store: ObjectStore,
        session: requests.Session,
        config: AcquisitionConfig,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.store = store
        self.session = session
        self.config = config
        self.sleep = sleep
        self.backoffs: list[float] = []

    def _once(self, url: str) -> StoredAsset:
        response = open_stream(self.session, url, timeout=self.config.stream_timeout)
        try:
            return self.store.upload_stream(response.raw)
        finally:
            response.close()

    def _log_retry(self, retry_state: RetryCallState) -> None:
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        self.backoffs.append(delay)
        error = retry_state.outcome.exception() if retry_state.outcome else None
        console.print(
            f"[yellow]Stream attempt {retry_state.attempt_number} failed:[/yellow] "
            f"{_describe(error) if error else 'unknown error'} "
            f"[dim](retrying in {delay:.1f}s)[/dim]"
        )

    def attempt(self, source: str) -> StrategyResult:
        self.backoffs = []
        retrying = Retrying(
            stop=stop_after_attempt(self.config.stream_attempts),
            wait=wait_exponential(multiplier=2, exp_base=2) + wait_random(0, 0.5),
            retry=retry_if_exception_type(RETRYABLE),
            before_sleep=self._log_retry,
            sleep=self.sleep,
            reraise=True,
        )
        attempts = 0
        try:
            for attempt in retrying:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    asset = self._once(source)
        except RETRYABLE as e:
            return StrategyResult(self.name, attempts=attempts, error=_describe(e))
        return StrategyResult(self.name, asset=asset, attempts=attempts)


class DownloadThenUploadStrategy:
    """Download the whole payload to a temp file under a byte cap, then upload."""

    name = AcquisitionStrategy.DOWNLOAD_THEN_UPLOAD

    def __init__(self, store: ObjectStore, session: requests.Session, config: AcquisitionConfig):
        self.store = store
        self.session = session
        self.config = config

    def attempt(self, source: str) -> StrategyResult:
        try:
            with scoped_temp_file(media_extension(source), self.config.temp_dir) as path:
                console.print("[bold]Downloading to local disk...[/bold]")
                download_to_file(
                    self.session,
                    source,
                    path,
                    max_bytes=self.config.max_bytes,
                    timeout=self.config.download_timeout,
                    connect_timeout=self.config.connect_timeout,
                )
                console.print("[bold]Uploading downloaded file to object store...[/bold]")
                asset = self.store.upload_local_file(path)
        except RETRYABLE as e:
            return StrategyResult(self.name, error=_describe(e))
        return StrategyResult(self.name, asset=asset)
