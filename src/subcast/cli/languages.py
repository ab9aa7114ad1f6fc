"""subcast languages command: list recognized language names."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.table import Table

from subcast.core.languages import LANGUAGE_NAMES
from subcast.utils.console import console


def languages(
    search: Annotated[
        Optional[str],
        typer.Option("--search", "-s", help="Only show names or codes containing this text."),
    ] = None,
) -> None:
    """List language names accepted by --language and --translate.

    Any ISO 639-1 code (``fr``) or region-tagged code (``pt-BR``) is also accepted.
    """
    rows = sorted(LANGUAGE_NAMES.items(), key=lambda item: (item[1], item[0]))
    if search:
        needle = search.lower()
        rows = [(name, code) for name, code in rows if needle in name or needle in code.lower()]

    table = Table(title=f"Recognized Languages ({len(rows)})")
    table.add_column("Code", style="bold cyan", width=6)
    table.add_column("Name", width=24)

    for name, code in rows:
        table.add_row(code, name.replace("_", " ").title())

    console.print(table)
    console.print("\n[dim]Unrecognized values fall back to automatic detection.[/dim]")
