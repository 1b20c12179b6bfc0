"""CLI entry point for benkyo.

Commands:
  init     interactive setup wizard writing .benkyo.yml
  words    add, list, edit and delete vocabulary
  notes    add, list and delete grammar notes
  review   resumable quiz over words, the mistake book or kana
  import   CSV / JSON / backup import with duplicate resolution
  export   CSV / JSON / backup export
  stats    daily answer counts against the daily goal
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from benkyo_cli.commands.export import export_group
from benkyo_cli.commands.imports import import_group
from benkyo_cli.commands.init import init_cmd
from benkyo_cli.commands.library import notes_group, words_group
from benkyo_cli.commands.review import review_group
from benkyo_cli.commands.stats import stats_cmd

console = Console()


def _build_store(config: dict):
    """Instantiate the configured store from .benkyo.yml settings.

    Store selection hierarchy:
      store: json   → JsonFileStore (store_path or .benkyo.json) (default)
      store: sqlite → SQLiteStore   (store_path or .benkyo.db)
      store: memory → MemoryStore   (nothing survives the process)

    This factory lives in cli.py so neither benkyo_core nor benkyo_store
    know about the CLI config format.
    """
    from benkyo_core.config import resolve_store_path

    store_type = config.get("store", "json")

    if store_type == "memory":
        from benkyo_store.memory import MemoryStore

        return MemoryStore()

    if store_type == "sqlite":
        from benkyo_store.sqlite import SQLiteStore

        return SQLiteStore(db_path=resolve_store_path(config))

    from benkyo_store.json_file import JsonFileStore

    return JsonFileStore(path=resolve_store_path(config))


@click.group()
@click.version_option(
    version=importlib.metadata.version("benkyo"),
    prog_name="benkyo",
)
@click.option(
    "--config",
    "config_path",
    default=".benkyo.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="BENKYO_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Japanese vocabulary, grammar and kana study tool."""
    from benkyo_core.config import load_config

    ctx.ensure_object(dict)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )

    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.UsageError(str(e))

    store = _build_store(config)
    ctx.obj["store"] = store
    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path
    ctx.call_on_close(store.close)


main.add_command(init_cmd)
main.add_command(words_group)
main.add_command(notes_group)
main.add_command(review_group)
main.add_command(import_group)
main.add_command(export_group)
main.add_command(stats_cmd)
