"""JsonFileStore: the default local store, one human-readable JSON file.

The file is created on first write and read in full on every call.

Data format: a JSON object mapping slot name to slot value, e.g.
``{"records:words": [...], "mistakes:words": {...}, "progress:words": {...}}``.
Writes go to a sibling temp file that is then renamed over the original, so
a crash mid-write leaves either the old document or the new one.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from benkyo_store.base import BaseStore

logger = logging.getLogger(__name__)


class JsonFileStore(BaseStore):
    """Stores every slot in one JSON document on disk.

    The path defaults to `.benkyo.json` in the current working directory.
    Configure via .benkyo.yml: `store_path: /path/to/benkyo.json`.
    """

    def __init__(self, path: str = ".benkyo.json"):
        self._path = Path(path)

    def get(self, slot: str) -> Any | None:
        return self._read_document().get(slot)

    def put(self, slot: str, value: Any) -> None:
        document = self._read_document()
        document[slot] = value
        self._write_document(document)

    def delete(self, slot: str) -> None:
        document = self._read_document()
        if slot in document:
            del document[slot]
            self._write_document(document)

    def slots(self) -> list[str]:
        return sorted(self._read_document())

    def _read_document(self) -> dict[str, Any]:
        """Read the current JSON object from disk, or return {}."""
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning("JsonFileStore could not read %s (%s): %s", self._path, type(e).__name__, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("JsonFileStore ignoring %s: root is not an object", self._path)
            return {}
        return data

    def _write_document(self, document: dict[str, Any]) -> None:
        directory = self._path.parent if str(self._path.parent) else Path(".")
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
