"""stats command: daily answer counts against the daily goal."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from benkyo_cli.commands.common import get_store
from benkyo_core.session import utc_now
from benkyo_store.repository import DailyStatsBook, MistakeBook, RecordRepository

console = Console()


@click.command("stats")
@click.option("--days", type=click.IntRange(min=1), default=7, show_default=True, help="Number of recent days to show.")
@click.option(
    "--domain",
    type=click.Choice(["words", "kana"]),
    default="words",
    show_default=True,
    help="Which review history to show.",
)
@click.pass_context
def stats_cmd(ctx, days: int, domain: str):
    """Show today's progress and recent daily accuracy."""
    store = get_store(ctx)
    goal = int(ctx.obj["config"].get("daily_goal", 20))
    stats = DailyStatsBook(store, domain).all()
    today = utc_now().date().isoformat()
    tally = stats.get(today)
    answered = tally.total if tally else 0
    correct = tally.correct if tally else 0

    # --- Summary ---
    console.print(f"\n[bold]Today ({today})[/bold]")
    console.print(f"  Answered: {answered} / {goal}" + ("  [green]goal reached[/green]" if answered >= goal else ""))
    console.print(f"  Correct:  {correct}")
    if domain == "words":
        console.print(f"  Words:    {len(RecordRepository(store, 'word').all())}")
    console.print(f"  Mistakes: {len(MistakeBook(store, domain).all())}")

    if not stats:
        console.print("[yellow]No answers recorded yet.[/yellow]")
        return

    # --- Recent days ---
    table = Table(title=f"Last {days} day(s) with answers", show_header=True, header_style="bold cyan")
    table.add_column("Date", width=10)
    table.add_column("Answered", justify="right")
    table.add_column("Correct", justify="right")
    table.add_column("Accuracy", justify="right")
    for day in sorted(stats, reverse=True)[:days]:
        t = stats[day]
        accuracy = f"{t.correct / t.total * 100:.1f}%" if t.total else "0%"
        table.add_row(day, str(t.total), str(t.correct), accuracy)
    console.print(table)
