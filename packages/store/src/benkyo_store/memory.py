"""In-memory store: the default for tests and `store: memory`.

Values are kept JSON-encoded so callers can never share mutable state with
the store, the same as reading back from disk.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from benkyo_store.base import BaseStore

logger = logging.getLogger(__name__)


class MemoryStore(BaseStore):
    """Keeps every slot in a dict for the life of the process."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, slot: str) -> Any | None:
        raw = self._data.get(slot)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("MemoryStore slot %r is not valid JSON: %s", slot, e)
            return None

    def put(self, slot: str, value: Any) -> None:
        self._data[slot] = json.dumps(value, ensure_ascii=False)

    def put_raw(self, slot: str, raw: str) -> None:
        """Store an undecoded payload as-is (used to simulate a hand-edited slot)."""
        self._data[slot] = raw

    def delete(self, slot: str) -> None:
        self._data.pop(slot, None)

    def slots(self) -> list[str]:
        return sorted(self._data)
