"""Classify and validate a user-supplied media source."""

from __future__ import annotations

import ipaddress
from pathlib import Path
from urllib.parse import urlparse

from subcast.core.errors import ValidationError

_BLOCKED_HOSTS = {"localhost", "localhost.localdomain", "ip6-localhost", "ip6-loopback"}


def is_video_host(url: str, hosts: list[str]) -> bool:
    """True if the URL's host is (a subdomain of) a known video-hosting site."""
    host = (urlparse(url).hostname or "").lower()
    return any(host == h or host.endswith("." + h) for h in hosts)


def _is_internal_host(host: str) -> bool:
    if host in _BLOCKED_HOSTS or host.endswith(".local") or host.endswith(".localhost"):
        return True
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    return (
        address.is_loopback
        or address.is_private
        or address.is_link_local
        or address.is_unspecified
        or address.is_reserved
        or address.is_multicast
    )


def validate_url(url: str) -> str:
    """Return the URL if it is an external http(s) URL.

    Raises:
        ValidationError: Missing URL, disallowed scheme, or a loopback,
            private or otherwise internal host.
    """
    if not url or not url.strip():
        raise ValidationError("Missing URL")
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ValidationError(f"Disallowed URL scheme: {parsed.scheme or '(none)'}")
    host = (parsed.hostname or "").lower()
    if not host:
        raise ValidationError(f"URL has no host: {url}")
    if _is_internal_host(host):
        raise ValidationError(f"Disallowed host: {host}")
    return url


def validate_source(source: str | Path) -> str | Path:
    """Validate a URL or local file path and return it in canonical form.

    URLs come back as stripped strings, local files as Path objects.
    """
    if isinstance(source, Path):
        path = source
    else:
        if not source or not str(source).strip():
            raise ValidationError("Missing source: provide a URL or a file path")
        text = str(source).strip()
        if "://" in text:
            return validate_url(text)
        path = Path(text)
    if not path.is_file():
        raise ValidationError(f"File not found: {path}")
    if path.stat().st_size == 0:
        raise ValidationError(f"File is empty: {path}")
    return path
