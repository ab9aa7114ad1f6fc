"""Tests for source classification and validation."""

from pathlib import Path

import pytest

from subcast.core.errors import ValidationError
from subcast.downloader.resolver import is_video_host, validate_source, validate_url

HOSTS = ["youtube.com", "youtu.be"]


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.youtube.com/watch?v=abc", True),
        ("https://youtu.be/abc", True),
        ("https://m.youtube.com/watch?v=abc", True),
        ("https://notyoutube.com/watch?v=abc", False),
        ("https://cdn.example.com/clip.mp4", False),
    ],
)
def test_is_video_host(url, expected):
    assert is_video_host(url, HOSTS) is expected


@pytest.mark.parametrize(
    "url",
    [
        "https://cdn.example.com/clip.mp4",
        "http://93.184.216.34/clip.mp4",
        "  https://cdn.example.com/clip.mp4  ",
    ],
)
def test_validate_url_accepts_external(url):
    assert validate_url(url) == url.strip()


@pytest.mark.parametrize(
    "url",
    [
        "ftp://example.com/file.mp4",
        "file:///etc/passwd",
        "javascript:alert(1)",
        "http://localhost:8080/x.mp4",
        "http://127.0.0.1/x.mp4",
        "http://10.0.0.5/x.mp4",
        "http://192.168.1.20/x.mp4",
        "http://169.254.169.254/latest/meta-data",
        "http://[::1]/x.mp4",
        "http://0.0.0.0/x.mp4",
        "http://printer.local/x.mp4",
        "https:///nohost",
        "",
    ],
)
def test_validate_url_rejects(url):
    with pytest.raises(ValidationError):
        validate_url(url)


def test_validate_source_url():
    assert validate_source("https://cdn.example.com/a.mp4") == "https://cdn.example.com/a.mp4"


def test_validate_source_local_file(media_file: Path):
    assert validate_source(str(media_file)) == media_file
    assert validate_source(media_file) == media_file


def test_validate_source_missing_file(tmp_path: Path):
    with pytest.raises(ValidationError, match="not found"):
        validate_source(str(tmp_path / "nope.mp4"))


def test_validate_source_empty_file(tmp_path: Path):
    empty = tmp_path / "empty.mp4"
    empty.touch()
    with pytest.raises(ValidationError, match="empty"):
        validate_source(empty)


@pytest.mark.parametrize("blank", ["", "   ", None])
def test_validate_source_blank(blank):
    with pytest.raises(ValidationError, match="Missing source"):
        validate_source(blank)


def test_validate_source_disallowed_scheme():
    with pytest.raises(ValidationError, match="scheme"):
        validate_source("ftp://example.com/file.mp4")
