"""export command: write words, the mistake book, notes or a full backup to disk."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from benkyo_cli.commands.common import get_store
from benkyo_core import codecs
from benkyo_core.session import utc_now
from benkyo_store.repository import MistakeBook, RecordRepository

console = Console()

_output_option = click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Destination file. Defaults to jp_<what>_<date>.<ext> in the current directory.",
)


@click.group("export")
def export_group():
    """Export data as CSV (UTF-8 with BOM) or pretty-printed JSON."""


@export_group.command("words")
@_output_option
@click.pass_context
def export_words(ctx, output: Path | None):
    """Export the word list as CSV."""
    words = RecordRepository(get_store(ctx), "word").all()
    if not words:
        console.print("[yellow]The word list is empty.[/yellow]")
        return
    _write(output, "words", "csv", codecs.export_csv(words, "word"))


@export_group.command("mistakes")
@_output_option
@click.pass_context
def export_mistakes(ctx, output: Path | None):
    """Export the word mistake book as CSV."""
    mistakes = list(MistakeBook(get_store(ctx), "words").all().values())
    if not mistakes:
        console.print("[yellow]The mistake book is empty.[/yellow]")
        return
    _write(output, "wrongbook", "csv", codecs.export_csv(mistakes, "word"))


@export_group.command("notes")
@click.option("--format", "fmt", type=click.Choice(["json", "csv"]), default="json", show_default=True)
@_output_option
@click.pass_context
def export_notes(ctx, fmt: str, output: Path | None):
    """Export grammar notes as a JSON array or CSV."""
    notes = RecordRepository(get_store(ctx), "note").all()
    if not notes:
        console.print("[yellow]There are no grammar notes.[/yellow]")
        return
    if fmt == "csv":
        _write(output, "grammar", "csv", codecs.export_csv(notes, "note"))
    else:
        _write(output, "grammar", "json", codecs.export_notes_json(notes).encode("utf-8"))


@export_group.command("backup")
@_output_option
@click.pass_context
def export_backup(ctx, output: Path | None):
    """Export words, the mistake book and daily stats as one JSON file."""
    payload = codecs.export_backup(get_store(ctx), utc_now())
    _write(output, "backup", "json", payload.encode("utf-8"))


def _write(output: Path | None, prefix: str, ext: str, data: bytes) -> None:
    path = output or Path(codecs.default_filename(prefix, utc_now(), ext))
    path.write_bytes(data)
    console.print(f"[green]Wrote {path}[/green]")
