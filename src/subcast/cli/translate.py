"""subcast translate command: translate an existing subtitle file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer

from subcast.core.config import load_config
from subcast.utils.console import console


def translate(
    subtitle_file: Annotated[
        Path,
        typer.Argument(help="Path to subtitle file (VTT, SRT, ASS, TXT)."),
    ],
    to: Annotated[
        str,
        typer.Option("--to", "-t", help="Target language code or name."),
    ],
    source: Annotated[
        str,
        typer.Option("--from", "-s", help="Source language, or 'auto' to infer it."),
    ] = "auto",
    llm_model: Annotated[
        Optional[str],
        typer.Option("--llm-model", help="Add an LLM fallback (e.g. ollama_chat/qwen3:8b)."),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output .vtt path."),
    ] = None,
) -> None:
    """Translate a subtitle file cue by cue and save it as WebVTT."""
    from subcast.core.errors import TranslationError
    from subcast.subtitles.converter import load_subtitles
    from subcast.subtitles.vtt import render, write_vtt
    from subcast.translate.engine import TranslationEngine
    from subcast.translate.providers import build_providers
    from subcast.utils.paths import write_text_atomic

    if not subtitle_file.is_file():
        console.print(f"[red]File not found:[/red] {subtitle_file}")
        raise typer.Exit(1)

    config = load_config(**{"translation.llm_model": llm_model})

    console.print(f"[bold]Loading subtitles:[/bold] {subtitle_file}")
    cues = load_subtitles(subtitle_file)
    console.print(f"[bold]Cues:[/bold] {len(cues)}")

    primary, mirrors = build_providers(config.translation)
    engine = TranslationEngine(primary, mirrors, config.translation)
    try:
        outcome = engine.translate(cues, source_lang_hint=source, target_lang=to)
    except TranslationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if output is not None:
        write_text_atomic(output, render(outcome.cues))
        out_path = output
    else:
        out_path = write_vtt(outcome.cues, subtitle_file.parent, f"{subtitle_file.stem}-{to}")
    console.print(f"[green]Saved:[/green] {out_path}")
