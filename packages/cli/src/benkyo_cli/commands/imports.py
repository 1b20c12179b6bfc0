"""import command: bring CSV / JSON files and backups into the store.

New keys are added straight away. For each key that already exists the
user chooses cover, skip, cover-all or skip-all; --on-duplicate makes that
choice up front for scripted imports.
"""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from benkyo_cli.commands.common import get_store
from benkyo_core import codecs
from benkyo_core.errors import EmptyBatch, MalformedImport
from benkyo_core.importer import ImportReconciler, Resolution
from benkyo_core.session import utc_now
from benkyo_store.models import Record, attribute_names
from benkyo_store.repository import RecordRepository

console = Console()

_KINDS = ("word", "note")
_ON_DUPLICATE = ("ask", Resolution.COVER_ALL.value, Resolution.SKIP_ALL.value)

_file_argument = click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
_on_duplicate_option = click.option(
    "--on-duplicate",
    type=click.Choice(_ON_DUPLICATE),
    default="ask",
    show_default=True,
    help="How to treat records whose key already exists.",
)


@click.group("import")
def import_group():
    """Import words or grammar notes from CSV / JSON, or restore a backup."""


@import_group.command("csv")
@_file_argument
@click.option("--kind", type=click.Choice(_KINDS), default="word", show_default=True, help="What the file holds.")
@_on_duplicate_option
@click.pass_context
def import_csv(ctx, file: Path, kind: str, on_duplicate: str):
    """Import a CSV file with a header row.

    Words need `word` and `reading` columns; notes need `title` and `content`.
    Optional columns: meaning / example, addedAt, lastReviewedAt.
    """
    batch = _parse(lambda: codecs.parse_csv(file.read_bytes(), kind, source=file.name, now=utc_now()))
    _reconcile(get_store(ctx), kind, batch, on_duplicate)


@import_group.command("json")
@_file_argument
@click.option("--kind", type=click.Choice(_KINDS), default="note", show_default=True, help="What the file holds.")
@_on_duplicate_option
@click.pass_context
def import_json(ctx, file: Path, kind: str, on_duplicate: str):
    """Import a JSON array of words or notes."""
    batch = _parse(lambda: codecs.parse_json(file.read_bytes(), kind, source=file.name, now=utc_now()))
    _reconcile(get_store(ctx), kind, batch, on_duplicate)


@import_group.command("backup")
@_file_argument
@click.pass_context
def import_backup(ctx, file: Path):
    """Restore a full backup made with `benkyo export backup`.

    Words from the backup are always added as new entries; the mistake book
    and daily stats are merged into the current ones.
    """
    backup = _parse(lambda: codecs.parse_backup(file.read_bytes(), source=file.name))
    added = codecs.restore_backup(get_store(ctx), backup)
    console.print(
        f"[green]Backup restored:[/green] {added} word(s), "
        f"{len(backup.wrong_book)} mistake(s), {len(backup.daily_stats)} day(s) of stats."
    )


def _parse(parse):
    try:
        return parse()
    except MalformedImport as e:
        raise click.ClickException(f"Could not read {e.source}: {e.reason}. Nothing was imported.")
    except EmptyBatch as e:
        raise click.ClickException(f"{e.source} has no usable rows. Nothing was imported.")


def _reconcile(store, kind: str, batch: list[Record], on_duplicate: str) -> None:
    reconciler = ImportReconciler(RecordRepository(store, kind), batch)
    added = reconciler.begin()
    console.print(f"[green]Added {added} new {kind}(s).[/green]")

    if not reconciler.done:
        console.print(f"[yellow]{len(reconciler.pending)} {kind}(s) already exist.[/yellow]")
        if on_duplicate != "ask":
            reconciler.decide_all(Resolution(on_duplicate))

    while not reconciler.done:
        candidate = reconciler.current
        _show_duplicate(reconciler.existing_for(candidate), candidate, reconciler.cursor + 1, len(reconciler.pending))
        choice = Resolution(
            click.prompt(
                "Resolve",
                type=click.Choice([r.value for r in Resolution]),
                default=Resolution.SKIP.value,
            )
        )
        if choice.bulk:
            reconciler.decide_all(choice)
        else:
            reconciler.decide_one(choice)

    if reconciler.pending:
        console.print(f"Duplicates: {reconciler.covered} covered, {reconciler.skipped} skipped.")


def _show_duplicate(existing: Record | None, candidate: Record, position: int, total: int) -> None:
    table = Table(
        title=f"Duplicate {position}/{total}: {candidate.key_field} “{candidate.key}” already exists",
        show_header=True,
    )
    table.add_column("Field", style="bold")
    table.add_column("Current")
    table.add_column("Imported")
    for name in attribute_names(candidate.kind):
        current = getattr(existing, name) if existing is not None else ""
        imported = getattr(candidate, name)
        style = "yellow" if current != imported else "dim"
        table.add_row(name, current, f"[{style}]{imported}[/{style}]")
    console.print(table)
