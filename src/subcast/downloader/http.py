"""Streaming HTTP transfers with size caps and deadlines.

All functions take a ``requests.Session`` so that callers can reuse one
keep-alive connection pool across retries.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator
from pathlib import Path

import requests
from requests.adapters import HTTPAdapter

from subcast.core.errors import TransferError

CHUNK_SIZE = 1 << 20  # 1 MB


def make_session(user_agent: str, pool_size: int = 4) -> requests.Session:
    """Create a session with a keep-alive connection pool."""
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"User-Agent": user_agent, "Accept": "*/*"})
    return session


def _content_length(response: requests.Response) -> int | None:
    raw = response.headers.get("Content-Length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _check_status(response: requests.Response) -> None:
    if not 200 <= response.status_code < 300:
        reason = f" {response.reason}" if response.reason else ""
        raise TransferError(f"Remote returned status {response.status_code}{reason}")


def open_stream(session: requests.Session, url: str, timeout: float) -> requests.Response:
    """Open a streaming GET and validate it before any body is read.

    The caller owns the returned response and must close it.

    Raises:
        TransferError: Non-2xx status or an explicit zero Content-Length.
        requests.RequestException: Connection-level failures.
    """
    response = session.get(url, stream=True, timeout=timeout, allow_redirects=True)
    try:
        _check_status(response)
        if _content_length(response) == 0:
            raise TransferError("Remote content-length is zero")
    except TransferError:
        response.close()
        raise
    response.raw.decode_content = True
    return response


def download_to_file(
    session: requests.Session,
    url: str,
    dest: Path,
    max_bytes: int,
    timeout: float,
    connect_timeout: float = 30.0,
    clock: Callable[[], float] = time.monotonic,
) -> Path:
    """Download ``url`` to ``dest`` under a byte cap and an overall deadline.

    The declared Content-Length is checked before the file is opened; the
    running byte count and the final file size are checked as well. Any
    failure closes the response and deletes the partial file.

    The deadline is armed as a timer that closes the response, so a server
    trickling bytes cannot hold a read open past it.

    Raises:
        TransferError: Bad status, too large, empty, or deadline exceeded.
        requests.RequestException: Connection-level failures.
    """
    dest = Path(dest)
    deadline = clock() + timeout
    response = session.get(url, stream=True, timeout=connect_timeout, allow_redirects=True)
    try:
        _check_status(response)
        declared = _content_length(response)
        if declared is not None and declared > max_bytes:
            raise TransferError(
                f"Remote file too large ({declared} bytes). Limit is {max_bytes} bytes."
            )

        expired = threading.Event()

        def _expire() -> None:
            expired.set()
            response.close()

        timer = threading.Timer(timeout, _expire)
        timer.daemon = True
        aborted = f"Download aborted (timeout after {timeout:g}s)"

        written = 0
        try:
            timer.start()
            try:
                with open(dest, "wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if expired.is_set() or clock() > deadline:
                            raise TransferError(aborted)
                        if not chunk:
                            continue
                        written += len(chunk)
                        if written > max_bytes:
                            raise TransferError(
                                f"Download exceeds allowed size ({max_bytes} bytes)"
                            )
                        f.write(chunk)
            except TransferError:
                raise
            except Exception as e:
                # A read cut off by _expire fails with whatever the closed socket raises
                if expired.is_set():
                    raise TransferError(aborted) from e
                raise
            finally:
                timer.cancel()
            if expired.is_set():
                raise TransferError(aborted)

            size = dest.stat().st_size
            if size == 0:
                raise TransferError("Downloaded file is empty")
            if size > max_bytes:
                raise TransferError("Downloaded file exceeds allowed size after download")
        except BaseException:
            dest.unlink(missing_ok=True)
            raise
    finally:
        response.close()
    return dest


def iter_proxy(
    session: requests.Session,
    url: str,
    range_header: str | None = None,
    timeout: float = 60.0,
) -> Iterator[bytes]:
    """Relay a remote body chunk by chunk, honouring an optional Range header.

    Closing the generator (a client abort) closes the upstream response at
    once instead of letting it drain in the background.
    """
    headers = {"Range": range_header} if range_header else {}
    response = session.get(url, stream=True, timeout=timeout, headers=headers)
    try:
        _check_status(response)
        yield from response.iter_content(chunk_size=CHUNK_SIZE)
    finally:
        response.close()
