"""SQLiteStore: local database file for larger collections.

Each put is a single committed upsert, so only the written slot is
rewritten.

Schema:
  slots: one row per slot, the value JSON-encoded as TEXT.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any

from benkyo_store.base import BaseStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS slots (
    name   TEXT PRIMARY KEY,
    value  TEXT NOT NULL
);
"""


class SQLiteStore(BaseStore):
    """Stores slots in a local SQLite database file.

    The database file path defaults to `.benkyo.db` in the current working
    directory. Configure via .benkyo.yml: `store: sqlite` and
    `store_path: /path/to/benkyo.db`.
    """

    def __init__(self, db_path: str = ".benkyo.db"):
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def get(self, slot: str) -> Any | None:
        row = self._conn.execute("SELECT value FROM slots WHERE name=?", (slot,)).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as e:
            logger.warning("SQLiteStore slot %r is not valid JSON: %s", slot, e)
            return None

    def put(self, slot: str, value: Any) -> None:
        self._conn.execute(
            """
            INSERT INTO slots (name, value) VALUES (?, ?)
            ON CONFLICT(name) DO UPDATE SET value=excluded.value
            """,
            (slot, json.dumps(value, ensure_ascii=False)),
        )
        self._conn.commit()

    def delete(self, slot: str) -> None:
        self._conn.execute("DELETE FROM slots WHERE name=?", (slot,))
        self._conn.commit()

    def slots(self) -> list[str]:
        rows = self._conn.execute("SELECT name FROM slots ORDER BY name").fetchall()
        return [r["name"] for r in rows]

    def close(self) -> None:
        self._conn.close()
