"""Helpers shared by the command modules."""

from __future__ import annotations

from datetime import datetime

import click

from benkyo_store.base import BaseStore


def get_store(ctx: click.Context) -> BaseStore:
    store = ctx.obj.get("store") if ctx.obj else None
    if store is None:
        raise click.UsageError("No store available. Run benkyo through its main command group.")
    return store


def format_timestamp(value: str) -> str:
    """Render an ISO-8601 timestamp as ``YYYY-MM-DD HH:MM:SS`` ("" if unparsable)."""
    if not value:
        return ""
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return ""
    return moment.strftime("%Y-%m-%d %H:%M:%S")
