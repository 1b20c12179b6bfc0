"""words / notes commands: manage the stored word list and grammar notes."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from benkyo_cli.commands.common import format_timestamp, get_store
from benkyo_core import library
from benkyo_core.session import utc_now
from benkyo_store.models import NoteRecord, Record, WordRecord, attribute_names
from benkyo_store.repository import MistakeBook, RecordRepository

console = Console()


def _confirm_update(existing: Record, updated: Record) -> bool:
    table = Table(title=f"{existing.key_field.capitalize()} “{existing.key}” already exists", show_header=True)
    table.add_column("Field", style="bold")
    table.add_column("Current")
    table.add_column("New")
    for name in attribute_names(existing.kind):
        old, new = getattr(existing, name), getattr(updated, name)
        style = "yellow" if old != new else "dim"
        table.add_row(name, old, f"[{style}]{new}[/{style}]")
    console.print(table)
    return click.confirm("Update it?", default=True)


def _resolve(repository: RecordRepository, ref: str) -> Record:
    record = library.find_by_key_or_id(repository, ref)
    if record is None:
        raise click.ClickException(f"No {repository.kind} matching {ref!r}.")
    return record


def _add(ctx, record: Record) -> None:
    repository = RecordRepository(get_store(ctx), record.kind)
    try:
        outcome = library.add_or_update(repository, record, confirm=_confirm_update, now=utc_now())
    except ValueError as e:
        raise click.UsageError(str(e))

    if outcome is library.AddOutcome.ADDED:
        console.print(f"[green]Added “{record.key}”.[/green]")
    elif outcome is library.AddOutcome.UPDATED:
        console.print(f"[green]Updated “{record.key}”.[/green]")
    else:
        console.print("[dim]Nothing changed.[/dim]")


# ---------------------------------------------------------------------------
# words
# ---------------------------------------------------------------------------


@click.group("words")
def words_group():
    """Manage the vocabulary list."""


@words_group.command("add")
@click.argument("word")
@click.argument("reading")
@click.argument("meaning", required=False, default="")
@click.pass_context
def words_add(ctx, word: str, reading: str, meaning: str):
    """Add a word, or update it if it already exists."""
    _add(ctx, WordRecord(word=word.strip(), reading=reading.strip(), meaning=meaning.strip()))


@words_group.command("list")
@click.option("--mistakes", "mistakes_only", is_flag=True, help="Only show words in the mistake book.")
@click.pass_context
def words_list(ctx, mistakes_only: bool):
    """Show the word list, newest first."""
    store = get_store(ctx)
    words = RecordRepository(store, "word").all()
    mistakes = MistakeBook(store, "words").all()
    shown = list(mistakes.values()) if mistakes_only else words

    if not shown:
        console.print("[yellow]The mistake book is empty.[/yellow]" if mistakes_only else "[yellow]The word list is empty.[/yellow]")
        return

    table = Table(
        title=f"Words ({len(words)} total, {len(mistakes)} in the mistake book)",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Word", style="bold")
    table.add_column("Reading", style="blue")
    table.add_column("Meaning", max_width=40)
    table.add_column("Added", width=19)
    table.add_column("Last Reviewed", width=19)
    for w in shown:
        marker = " [red]✗[/red]" if w.key in mistakes and not mistakes_only else ""
        table.add_row(
            f"{w.word}{marker}",
            w.reading,
            w.meaning,
            format_timestamp(w.added_at),
            format_timestamp(w.last_reviewed_at),
        )
    console.print(table)


@words_group.command("edit")
@click.argument("ref")
@click.option("--word", default=None, help="New word text.")
@click.option("--reading", default=None, help="New reading.")
@click.option("--meaning", default=None, help="New meaning.")
@click.pass_context
def words_edit(ctx, ref: str, word: str | None, reading: str | None, meaning: str | None):
    """Edit the word REF (its text or id)."""
    store = get_store(ctx)
    repository = RecordRepository(store, "word")
    record = _resolve(repository, ref)
    changes = {k: v.strip() for k, v in {"word": word, "reading": reading, "meaning": meaning}.items() if v is not None}
    if not changes:
        raise click.UsageError("Nothing to change. Pass --word, --reading or --meaning.")
    try:
        updated = library.edit(repository, MistakeBook(store, "words"), record.id, **changes)
    except ValueError as e:
        raise click.UsageError(str(e))
    console.print(f"[green]Saved “{updated.key}”.[/green]")


@words_group.command("delete")
@click.argument("ref")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_context
def words_delete(ctx, ref: str, yes: bool):
    """Delete the word REF (its text or id) and its mistake book entry."""
    store = get_store(ctx)
    repository = RecordRepository(store, "word")
    record = _resolve(repository, ref)
    if not yes and not click.confirm(f"Delete “{record.key}”?", default=False):
        return
    library.delete(repository, MistakeBook(store, "words"), record.id)
    console.print(f"[green]Deleted “{record.key}”.[/green]")


# ---------------------------------------------------------------------------
# notes
# ---------------------------------------------------------------------------


@click.group("notes")
def notes_group():
    """Manage grammar notes."""


@notes_group.command("add")
@click.argument("title")
@click.argument("content")
@click.option("--example", default="", help="Example sentence.")
@click.pass_context
def notes_add(ctx, title: str, content: str, example: str):
    """Add a grammar note, or update the note with the same title."""
    _add(ctx, NoteRecord(title=title.strip(), content=content.strip(), example=example.strip()))


@notes_group.command("list")
@click.pass_context
def notes_list(ctx):
    """Show grammar notes, newest first."""
    notes = RecordRepository(get_store(ctx), "note").all()
    if not notes:
        console.print("[yellow]There are no grammar notes.[/yellow]")
        return

    table = Table(title=f"Grammar Notes ({len(notes)})", show_header=True, header_style="bold cyan")
    table.add_column("Title", style="bold")
    table.add_column("Content", max_width=50)
    table.add_column("Example", max_width=40)
    table.add_column("Added", width=19)
    for n in notes:
        table.add_row(n.title, n.content, n.example, format_timestamp(n.added_at))
    console.print(table)


@notes_group.command("delete")
@click.argument("ref")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_context
def notes_delete(ctx, ref: str, yes: bool):
    """Delete the note REF (its title or id)."""
    repository = RecordRepository(get_store(ctx), "note")
    record = _resolve(repository, ref)
    if not yes and not click.confirm(f"Delete “{record.key}”?", default=False):
        return
    library.delete(repository, None, record.id)
    console.print(f"[green]Deleted “{record.key}”.[/green]")
