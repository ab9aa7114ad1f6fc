"""subcast CLI entry point."""

from typing import Annotated, Optional

import typer
from dotenv import load_dotenv

from subcast import __version__
from subcast.cli.languages import languages
from subcast.cli.run import run
from subcast.cli.translate import translate

app = typer.Typer(
    name="subcast",
    help="subcast: media to WebVTT subtitles, with optional translation.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"subcast {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """subcast: media to WebVTT subtitles, with optional translation."""
    # Credentials (SUBCAST_ASSEMBLYAI__API_KEY, SUBCAST_CLOUDINARY__*) may live in .env.
    # Shell exports take precedence.
    load_dotenv(override=False)


app.command("run")(run)
app.command("translate")(translate)
app.command("languages")(languages)
