"""review command: resumable quiz over words, the mistake book or kana."""

from __future__ import annotations

import click
from rich.console import Console

from benkyo_cli.commands.common import get_store
from benkyo_core.config import KANA_MODES
from benkyo_core.errors import EmptyPool
from benkyo_core.grading import Grade
from benkyo_core.kana import scope_for_mode
from benkyo_core.session import ReviewSession
from benkyo_store.models import Record, Scope, WordRecord

console = Console()

_QUIT = ":q"
_DISCARD = ":d"
_NEXT = ":n"

_RESULT_STYLE = {
    Grade.EXACT: ("green", "✅ Correct"),
    Grade.SIMILAR: ("yellow", "⚠ Close (counted as a mistake)"),
    Grade.WRONG: ("red", "❌ Wrong"),
}


@click.group("review")
def review_group():
    """Quiz yourself. Progress is saved after every item.

    \b
    While answering:
      :n   skip to the next item
      :q   stop now and keep your place for next time
      :d   stop and discard this session
    """


@review_group.command("words")
@click.option("--mistakes", "mistakes_only", is_flag=True, help="Only review words in the mistake book.")
@click.option("--restart", is_flag=True, help="Ignore saved progress and start a fresh pass.")
@click.pass_context
def review_words(ctx, mistakes_only: bool, restart: bool):
    """Type the reading of each word."""
    scope = Scope.WORDS_MISTAKES if mistakes_only else Scope.WORDS
    session = ReviewSession.for_scope(get_store(ctx), scope)
    _open(session, restart=restart)
    _run(session)


@review_group.command("kana")
@click.option("--mode", type=click.Choice(KANA_MODES), default=None, help="Kana set. Defaults to kana_mode in config.")
@click.option("--from", "start_from", default=None, help="Start at this glyph and go in table order.")
@click.option("--restart", is_flag=True, help="Ignore saved progress and start a fresh pass.")
@click.pass_context
def review_kana(ctx, mode: str | None, start_from: str | None, restart: bool):
    """Type the romaji of each kana."""
    mode = mode or ctx.obj["config"].get("kana_mode", "hiragana")
    session = ReviewSession.for_scope(get_store(ctx), scope_for_mode(mode))
    if start_from:
        try:
            session.start_at(session.default_pool(), start_from)
        except KeyError:
            raise click.UsageError(f"{start_from!r} is not in the {mode} table.")
    else:
        _open(session, restart=restart)
    _run(session)


def _open(session: ReviewSession, restart: bool) -> None:
    """Continue saved progress if the user wants to, otherwise start fresh."""
    snapshot = None if restart else session.resume_check()
    if snapshot is not None:
        prompt = f"Continue your last session ({snapshot.index + 1}/{len(snapshot.items)})?"
        if click.confirm(prompt, default=True):
            session.resume(snapshot)
            return

    try:
        session.start(session.default_pool())
    except EmptyPool as e:
        raise click.ClickException(str(e))


def _run(session: ReviewSession) -> None:
    while True:
        item = session.current()
        if item is None:
            break
        state = session.state
        console.print(f"\n[dim]Progress: {state.position} / {len(state.items)}[/dim]")
        _show_question(item)

        answer = click.prompt("Answer", default="", show_default=False)
        command = answer.strip()
        if command == _QUIT:
            console.print("[cyan]Progress saved. Run the same command to continue.[/cyan]")
            return
        if command == _DISCARD:
            session.discard()
            console.print("[yellow]Session discarded.[/yellow]")
            return
        if command == _NEXT:
            session.advance()
            continue

        result = session.grade(answer)
        _show_result(item, result)
        if result is Grade.EXACT:
            session.advance()

    console.print("\n[bold green]🎉 Review complete![/bold green]")


def _show_question(item: Record) -> None:
    console.print(f"[bold]{item.key}[/bold]")
    if isinstance(item, WordRecord) and item.meaning:
        console.print(f"[dim]{item.meaning}[/dim]")


def _show_result(item: Record, result: Grade) -> None:
    style, label = _RESULT_STYLE[result]
    console.print(f"[{style}]{label}[/{style}]")
    if result is not Grade.EXACT:
        console.print(f"  Answer: [bold]{item.answer}[/bold]  [dim](type {_NEXT} to move on)[/dim]")
