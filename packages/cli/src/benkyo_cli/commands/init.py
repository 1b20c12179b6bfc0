"""init command: interactive setup wizard.

Asks for the store backend and its file location, the daily goal used by
`stats` and the default kana set used by `review kana`.
"""

from __future__ import annotations

from pathlib import Path

import click
import yaml
from rich.console import Console

from benkyo_core.config import DEFAULT_STORE_PATHS, KANA_MODES

console = Console()


@click.command("init")
@click.pass_context
def init_cmd(ctx):
    """Set up benkyo in the current directory.

    Writes the configuration file (.benkyo.yml unless --config says
    otherwise), keeping any keys it already has.
    """
    config_path = Path(ctx.obj.get("config_path", ".benkyo.yml") if ctx.obj else ".benkyo.yml")
    console.print("\n[bold cyan]benkyo init[/bold cyan] setup wizard\n")

    # --- Choose store backend ---
    console.print("Where should your words and progress be kept?")
    console.print("  [bold]json[/bold]    one readable JSON file (default)")
    console.print("  [bold]sqlite[/bold]  local SQLite database, better for very large lists")
    console.print("  [bold]memory[/bold]  nothing is saved (try-out mode)")
    store_type = click.prompt(
        "Store backend",
        type=click.Choice(["json", "sqlite", "memory"]),
        default="json",
    )

    config: dict = {"store": store_type}

    if store_type in DEFAULT_STORE_PATHS:
        default_path = DEFAULT_STORE_PATHS[store_type]
        store_path = click.prompt("Store file path", default=default_path)
        if store_path != default_path:
            config["store_path"] = store_path
        console.print(f"[green]{store_type} store configured at {store_path}[/green]")
    else:
        console.print("[yellow]Memory store: progress is lost when the command exits.[/yellow]")

    # --- Study preferences ---
    config["daily_goal"] = click.prompt("Daily goal (answers per day)", type=click.IntRange(min=1), default=20)
    config["kana_mode"] = click.prompt("Default kana set", type=click.Choice(KANA_MODES), default="hiragana")

    _write_config(config_path, config)
    console.print(f"[green]Created {config_path}[/green]")

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Add a word with: [bold]benkyo words add 猫 ねこ cat[/bold]")


def _write_config(path: Path, config: dict) -> None:
    """Write or update the config file, preserving any existing keys."""
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False, allow_unicode=True))
