"""Command-line interface for timed-lyrics.

Uses Typer for a modern, type-hinted CLI experience.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

# Load environment variables from .env files
# Priority: local .env > ~/.timed-lyrics/.env
_user_env = Path.home() / ".timed-lyrics" / ".env"
if _user_env.exists():
    load_dotenv(_user_env)
load_dotenv()  # Load local .env (overrides user-level)
from rich.markup import escape
from rich.table import Table

from timed_lyrics import __version__
from timed_lyrics.catalog import LyricsRequest, decode_lyrics_response
from timed_lyrics.config import LyricsConfig, load_config_or_default
from timed_lyrics.errors import TimedLyricsError, format_error_for_display
from timed_lyrics.logging import LogLevel, enable_file_logging, set_verbosity
from timed_lyrics.lyrics.parser import LyricsParser
from timed_lyrics.models.lyrics import LyricParagraph

TOKEN_ENV_VAR = "TIMED_LYRICS_DEVELOPER_TOKEN"

app = typer.Typer(
    name="timed-lyrics",
    help="Parse timed TTML lyrics into paragraphs, lines and karaoke segments.",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"timed-lyrics version {__version__}")
        raise typer.Exit()


def _format_time(seconds: float | None) -> str:
    if seconds is None:
        return "-"
    minutes, secs = divmod(seconds, 60)
    return f"{int(minutes):02d}:{secs:06.3f}"


def _load_config(config_path: Path | None) -> LyricsConfig:
    try:
        return load_config_or_default(config_path)
    except TimedLyricsError as e:
        console.print(f"[red]Error:[/red] {escape(format_error_for_display(e))}")
        raise typer.Exit(1)


def _print_paragraphs(
    paragraphs: list[LyricParagraph],
    as_json: bool,
    show_segments: bool,
) -> None:
    if as_json:
        data = [paragraph.model_dump() for paragraph in paragraphs]
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    if not paragraphs:
        console.print("[yellow]No lyrics found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Part", style="cyan")
    table.add_column("Start", style="dim", justify="right")
    table.add_column("End", style="dim", justify="right")
    table.add_column("Line")

    for paragraph in paragraphs:
        part = escape(paragraph.song_part or "")
        for line in paragraph.lines:
            table.add_row(
                part,
                _format_time(line.start_time),
                _format_time(line.end_time),
                escape(line.text),
            )
            part = ""
            if show_segments:
                for segment in line.segments:
                    table.add_row(
                        "",
                        _format_time(segment.start_time),
                        _format_time(segment.end_time),
                        f"[dim]  {escape(segment.text)}[/dim]",
                    )
        table.add_section()

    console.print(table)
    line_count = sum(len(p.lines) for p in paragraphs)
    console.print(f"[dim]{len(paragraphs)} paragraphs, {line_count} lines[/dim]")


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show informational and debug logs"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only show errors"),
    ] = False,
    log_file: Annotated[
        Optional[Path],
        typer.Option("--log-file", help="Also write full debug logs to this file"),
    ] = None,
) -> None:
    """Timed Lyrics - TTML lyrics parsing for karaoke-style display.

    [bold]parse[/bold]: Parse a local TTML document or catalog JSON response.

    [bold]fetch[/bold]: Fetch a song's lyrics from the catalog and parse them.
    """
    if verbose:
        set_verbosity(LogLevel.DEBUG)
    elif quiet:
        set_verbosity(LogLevel.QUIET)

    if log_file:
        enable_file_logging(log_file)


@app.command()
def parse(
    lyrics_file: Annotated[Path, typer.Argument(help="TTML file or catalog JSON response")],
    as_json: Annotated[
        bool,
        typer.Option("--json", "-j", help="Print the parsed lyrics as JSON"),
    ] = False,
    show_segments: Annotated[
        bool,
        typer.Option("--segments", "-s", help="Show the timed segments of each line"),
    ] = False,
    syllables: Annotated[
        bool,
        typer.Option("--syllables", help="Join spans that have no whitespace between them"),
    ] = False,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a config.json"),
    ] = None,
):
    """Parse a lyrics document and print its paragraphs and lines."""
    if not lyrics_file.exists():
        console.print(f"[red]Error:[/red] Lyrics file not found: {lyrics_file}")
        raise typer.Exit(1)

    config = _load_config(config_path)
    parser_settings = config.parser
    if syllables:
        parser_settings = parser_settings.model_copy(update={"respect_source_spacing": True})

    content = lyrics_file.read_bytes()

    # Catalog responses carry the markup inside a JSON envelope
    if content.lstrip().startswith((b"{", b"[")):
        try:
            content = decode_lyrics_response(content).ttml.encode("utf-8")
        except TimedLyricsError as e:
            console.print(f"[red]Error:[/red] {escape(format_error_for_display(e))}")
            raise typer.Exit(1)

    paragraphs = LyricsParser(parser_settings).parse(content)
    _print_paragraphs(paragraphs, as_json, show_segments)


@app.command()
def fetch(
    song_id: Annotated[str, typer.Argument(help="Catalog identifier of the song")],
    token: Annotated[
        Optional[str],
        typer.Option("--token", "-t", help=f"Developer token (default: ${TOKEN_ENV_VAR})"),
    ] = None,
    storefront: Annotated[
        Optional[str],
        typer.Option("--storefront", help="Storefront country code (default from config)"),
    ] = None,
    raw: Annotated[
        bool,
        typer.Option("--raw", help="Print the TTML markup instead of parsing it"),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", "-j", help="Print the parsed lyrics as JSON"),
    ] = False,
    show_segments: Annotated[
        bool,
        typer.Option("--segments", "-s", help="Show the timed segments of each line"),
    ] = False,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a config.json"),
    ] = None,
):
    """Fetch a song's lyrics from the catalog and print them."""
    config = _load_config(config_path)
    developer_token = token or os.environ.get(TOKEN_ENV_VAR)

    request = LyricsRequest(song_id, developer_token, config.catalog)
    try:
        markup = request.response(storefront).ttml
    except TimedLyricsError as e:
        console.print(f"[red]Error:[/red] {escape(format_error_for_display(e))}")
        raise typer.Exit(1)

    if raw:
        typer.echo(markup)
        return

    paragraphs = LyricsParser(config.parser).parse(markup)
    _print_paragraphs(paragraphs, as_json, show_segments)


if __name__ == "__main__":
    app()
