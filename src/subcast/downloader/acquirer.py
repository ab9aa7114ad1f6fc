"""Resolve a URL or local file into a durable remote media URL.

Strategy chains, tried in order until one succeeds:

- local file: upload to the object store
- video-hosting URL: yt-dlp download, then upload
- any other URL: store-side remote fetch, then streaming upload with
  retries, then full download to disk and upload
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Protocol

import requests

from subcast.core.config import AcquisitionConfig
from subcast.core.errors import AcquisitionError
from subcast.core.models import AcquisitionOutcome
from subcast.downloader.http import make_session
from subcast.downloader.resolver import is_video_host, validate_source
from subcast.downloader.store import ObjectStore
from subcast.downloader.strategies import (
    DownloadThenUploadStrategy,
    ExtractorStrategy,
    LocalUploadStrategy,
    RemoteFetchStrategy,
    StrategyResult,
    StreamUploadStrategy,
)
from subcast.utils.console import console


class Strategy(Protocol):
    name: object

    def attempt(self, source) -> StrategyResult: ...


class MediaAcquirer:
    """Try an ordered list of acquisition strategies for a source."""

    def __init__(
        self,
        store: ObjectStore,
        config: AcquisitionConfig,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
        extract: Callable[[str, Path, str], Path] | None = None,
    ):
        self.store = store
        self.config = config
        self.session = session or make_session(config.user_agent)
        self.local = LocalUploadStrategy(store)
        self.extractor = ExtractorStrategy(store, config, extract=extract)
        self.remote_fetch = RemoteFetchStrategy(store)
        self.stream_upload = StreamUploadStrategy(store, self.session, config, sleep=sleep)
        self.download_upload = DownloadThenUploadStrategy(store, self.session, config)

    def strategies_for(self, source: str | Path) -> list[Strategy]:
        if isinstance(source, Path):
            return [self.local]
        if is_video_host(source, self.config.video_hosts):
            return [self.extractor]
        return [self.remote_fetch, self.stream_upload, self.download_upload]

    def acquire(self, source: str | Path) -> AcquisitionOutcome:
        """Return a remote URL for the source.

        Raises:
            ValidationError: The source is malformed or disallowed.
            AcquisitionError: Every strategy failed; carries the last error.
        """
        source = validate_source(source)
        attempts = 0
        last: StrategyResult | None = None

        for strategy in self.strategies_for(source):
            console.print(f"[bold]Acquiring via {strategy.name.value}:[/bold] {source}")
            result = strategy.attempt(source)
            attempts += result.attempts
            if result.ok:
                console.print(f"[green]Stored:[/green] {result.asset.secure_url}")
                return AcquisitionOutcome(
                    remote_url=result.asset.secure_url,
                    strategy_used=result.strategy,
                    attempts=attempts,
                    public_id=result.asset.public_id,
                )
            console.print(f"[yellow]{strategy.name.value} failed:[/yellow] {result.error}")
            last = result

        message = last.error if last and last.error else "no strategy available"
        raise AcquisitionError(f"Could not acquire media: {message}")
