"""subcast run command: full pipeline from URL or file to WebVTT."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.table import Table

from subcast.cli.utils import expand_inputs
from subcast.core.config import load_config


def run(
    inputs: Annotated[
        list[str],
        typer.Argument(help="URLs, file paths, glob patterns, or .list files of sources."),
    ],
    language: Annotated[
        str,
        typer.Option("--language", "-l", help="Spoken language (code or name), or 'auto'."),
    ] = "auto",
    translate: Annotated[
        Optional[str],
        typer.Option("--translate", "-t", help="Target language for translation."),
    ] = None,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Directory for generated .vtt files."),
    ] = None,
    keep_remote: Annotated[
        Optional[bool],
        typer.Option(
            "--keep-remote/--delete-remote",
            help="Keep or delete the uploaded media after transcription.",
        ),
    ] = None,
) -> None:
    """Acquire media, transcribe it, and write WebVTT subtitles.

    Accepts multiple inputs. Each is processed independently and a summary
    table is printed at the end of a batch.
    """
    from subcast.core.languages import AUTO, normalize_language
    from subcast.core.pipeline import run_pipeline
    from subcast.utils.console import console

    if translate is not None and normalize_language(translate) == AUTO:
        console.print(f"[red]Unrecognized target language:[/red] {translate}")
        raise typer.Exit(1)

    overrides: dict[str, object] = {"output_dir": output_dir}
    if keep_remote is not None:
        overrides["acquisition.delete_remote_after"] = not keep_remote

    config = load_config(**overrides)

    expanded = expand_inputs(inputs)
    if not expanded:
        console.print("[red]No inputs resolved. Check your paths or patterns.[/red]")
        raise typer.Exit(1)

    if len(expanded) == 1:
        result = run_pipeline(expanded[0], config, translate=translate, language=language)
        if not result.ok:
            raise typer.Exit(1)
        return

    rows: list[tuple[str, str, str]] = []
    console.print(f"[bold]Batch processing {len(expanded)} inputs...[/bold]\n")

    for i, source in enumerate(expanded, 1):
        console.rule(f"[bold][{i}/{len(expanded)}] {source}[/bold]")
        result = run_pipeline(source, config, translate=translate, language=language)
        if result.ok:
            rows.append((source, "success", str(result.translated_path or result.subtitle_path)))
        else:
            rows.append((source, "failed", result.error or ""))

    console.print()
    table = Table(title=f"Batch Results ({len(expanded)} inputs)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Input", max_width=50, no_wrap=True)
    table.add_column("Status")
    table.add_column("Output", max_width=50, no_wrap=True)

    succeeded = 0
    for i, (source, status, output) in enumerate(rows, 1):
        style = "green" if status == "success" else "red"
        table.add_row(str(i), source, f"[{style}]{status}[/{style}]", output)
        if status == "success":
            succeeded += 1

    console.print(table)
    console.print(f"\n[bold]{succeeded}/{len(expanded)} succeeded[/bold]")
    if succeeded < len(expanded):
        raise typer.Exit(1)
