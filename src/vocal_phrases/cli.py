"""Command-line interface for vocal-phrases.

Uses Typer for a modern, type-hinted CLI experience.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from vocal_phrases import __version__
from vocal_phrases.config import AppConfig, SegmentationConfig, load_config, load_config_from_env
from vocal_phrases.errors import ResourceError, ValidationError, VocalPhrasesError, format_error_for_display
from vocal_phrases.logging import LogContext, LogLevel, configure_logging, set_verbosity
from vocal_phrases.models.document import Document
from vocal_phrases.segmentation.assembler import DocumentAssembler
from vocal_phrases.segmentation.rules import COMBINE_RULES
from vocal_phrases.tokenizer.mecab import MecabTokenizer
from vocal_phrases.views import (
    group_phrases_by_line,
    markers_after_line,
    markers_before_first_line,
)

# Load environment variables from .env files
# Priority: local .env > ~/.vocal-phrases/.env
_user_env = Path.home() / ".vocal-phrases" / ".env"
if _user_env.exists():
    load_dotenv(_user_env)
load_dotenv()

app = typer.Typer(
    name="vocal-phrases",
    help="Split song lyrics into singable phrases for vocal take review.",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"vocal-phrases version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Vocal Phrases - lyric segmentation for recording sessions.

    [bold]segment[/bold]: cut a lyrics file into phrases, one row per line.

    [bold]rules[/bold]: show the grouping rules in priority order.
    """
    pass


def _load_app_config(config_path: Path | None) -> AppConfig:
    try:
        if config_path is not None:
            return load_config(config_path)
        return load_config_from_env()
    except VocalPhrasesError as e:
        console.print(f"[red]Error:[/red] {escape(format_error_for_display(e))}")
        raise typer.Exit(1)


def _read_lyrics(lyrics_file: Path) -> str:
    if not lyrics_file.is_file():
        raise ResourceError("Lyrics file not found", context={"path": str(lyrics_file)})
    try:
        return lyrics_file.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValidationError(
            "Lyrics file is not valid UTF-8 text",
            context={"path": str(lyrics_file)},
        ) from e


def _print_document(document: Document, title: str, segmentation: SegmentationConfig) -> None:
    table = Table(title=title)
    table.add_column("Line", style="cyan", justify="right")
    table.add_column("Phrases", style="white")

    def add_markers(markers) -> None:
        for marker in markers:
            label = f"{segmentation.marker_open}{marker.text}{segmentation.marker_close}"
            table.add_row("", f"[magenta]{escape(label)}[/magenta]")

    add_markers(markers_before_first_line(document))
    for group in group_phrases_by_line(document):
        if group.is_blank:
            table.add_row(str(group.line_index), "[dim](blank)[/dim]")
        else:
            table.add_row(
                str(group.line_index),
                " [dim]|[/dim] ".join(escape(p.text) for p in group.phrases),
            )
        add_markers(markers_after_line(document, group.line_index))

    console.print(table)
    console.print(
        f"[green]{len(document.lyric_phrases)}[/green] phrases, "
        f"[green]{len(document.markers)}[/green] markers"
    )


@app.command()
def segment(
    lyrics_file: Annotated[Path, typer.Argument(help="Lyrics text file, one sung line per line")],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print the document as JSON"),
    ] = False,
    whitespace: Annotated[
        bool,
        typer.Option("--whitespace", "-w", help="Split on spaces instead of running MeCab"),
    ] = False,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a JSON config file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show progress logging"),
    ] = False,
) -> None:
    """Segment a lyrics file into phrases.

    Blank lines are kept as empty rows and lines like 【サビ】 become
    rehearsal markers. If MeCab is unavailable the lyrics are split on
    whitespace instead.
    """
    app_config = _load_app_config(config_path)

    configure_logging(app_config.to_log_config())
    if verbose:
        set_verbosity(LogLevel.VERBOSE)

    try:
        raw_text = _read_lyrics(lyrics_file)
    except VocalPhrasesError as e:
        console.print(f"[red]Error:[/red] {escape(format_error_for_display(e))}")
        raise typer.Exit(1)

    segmentation = app_config.segmentation
    if whitespace:
        segmentation = segmentation.model_copy(update={"tokenizer": "whitespace"})

    tokenizer = None
    if segmentation.tokenizer == "mecab":
        tokenizer = MecabTokenizer()
        if not tokenizer.is_available():
            console.print(
                "[yellow]Warning:[/yellow] fugashi/ipadic not installed, "
                "falling back to whitespace segmentation."
            )
            console.print("[dim]Install with: pip install 'vocal-phrases[mecab]'[/dim]")
            tokenizer = None

    assembler = DocumentAssembler(tokenizer, segmentation)
    with LogContext(lyrics_file=lyrics_file.name):
        document = asyncio.run(assembler.assemble(raw_text))

    if json_output:
        typer.echo(document.model_dump_json(indent=2))
        return

    _print_document(document, title=lyrics_file.name, segmentation=segmentation)


@app.command()
def rules() -> None:
    """List the phrase grouping rules in priority order."""
    table = Table(title="Combine Rules")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Current", style="white")
    table.add_column("Next", style="white")
    table.add_column("Example", style="green")

    for i, rule in enumerate(COMBINE_RULES, start=1):
        table.add_row(
            str(i),
            rule.name,
            escape(rule.current.describe()),
            escape(rule.next.describe()),
            rule.example,
        )

    console.print(table)


if __name__ == "__main__":
    app()
