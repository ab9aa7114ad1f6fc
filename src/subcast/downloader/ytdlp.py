"""yt-dlp wrapper for pulling media from video-hosting sites."""

from __future__ import annotations

from pathlib import Path

from rich.progress import BarColumn, Progress, TaskID, TextColumn, TimeRemainingColumn

from subcast.utils.console import console

_DEFAULT_FORMAT = "bestvideo[ext=mp4]+bestaudio[ext=m4a]/mp4"


def _make_progress() -> Progress:
    return Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        TimeRemainingColumn(),
        console=console,
    )


def download(url: str, output_dir: Path, fmt: str = _DEFAULT_FORMAT) -> Path:
    """Download a video from a hosting site into ``output_dir``.

    Uses single-pass extract_info(download=True) and yt-dlp's
    prepare_filename for exact output path resolution.

    Args:
        url: Video page URL.
        output_dir: Existing directory to save the file into.
        fmt: yt-dlp format string.

    Returns:
        Path of the downloaded media file.

    Raises:
        RuntimeError: yt-dlp failed or produced no file.
    """
    try:
        import yt_dlp
    except ImportError:
        raise ImportError("yt-dlp is not installed. Install with: pip install yt-dlp")

    output_dir = Path(output_dir)
    progress = _make_progress()
    task_id: TaskID | None = None

    def _progress_hook(d: dict) -> None:
        nonlocal task_id
        if d["status"] == "downloading":
            total = d.get("total_bytes") or d.get("total_bytes_estimate") or 0
            downloaded = d.get("downloaded_bytes", 0)
            if task_id is None and total > 0:
                task_id = progress.add_task("Downloading", total=total)
            if task_id is not None:
                progress.update(task_id, completed=downloaded)
        elif d["status"] == "finished":
            if task_id is not None:
                progress.update(task_id, completed=progress.tasks[task_id].total)

    opts = {
        "format": fmt,
        "outtmpl": str(output_dir / "%(id)s.%(ext)s"),
        "merge_output_format": "mp4",
        "progress_hooks": [_progress_hook],
        "quiet": True,
        "no_warnings": True,
        "noplaylist": True,
    }

    console.print(f"[bold]Extracting:[/bold] {url}")

    try:
        with yt_dlp.YoutubeDL(opts) as ydl:
            with progress:
                info = ydl.extract_info(url, download=True)
            video_path = Path(ydl.prepare_filename(info))
    except yt_dlp.utils.DownloadError as e:
        raise RuntimeError(f"yt-dlp download failed: {e}") from e

    # Format merging can change the extension
    if not video_path.is_file():
        candidates = sorted(
            (p for p in output_dir.iterdir() if p.is_file() and not p.name.startswith(".")),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        if not candidates:
            raise RuntimeError(f"Download completed but no file found in {output_dir}")
        video_path = candidates[0]

    console.print(f"[green]Downloaded:[/green] {video_path.name} ({info.get('title', 'video')})")
    return video_path
