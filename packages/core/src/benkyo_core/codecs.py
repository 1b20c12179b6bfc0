"""CSV and JSON import/export formats.

CSV files carry a header row; every exported field is double-quoted and the
file starts with a UTF-8 byte-order mark so spreadsheet tools pick the right
encoding. JSON exports are pretty-printed: a bare array for notes, and an
envelope ``{exportedAt, words, wrongBook, dailyStats}`` for a full backup.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence, Union

from benkyo_core.errors import EmptyBatch, MalformedImport
from benkyo_store.base import BaseStore
from benkyo_store.models import (
    RECORD_TYPES,
    DailyTally,
    Record,
    generate_key,
    record_from_dict,
    record_to_dict,
    with_changes,
)
from benkyo_store.repository import DailyStatsBook, MistakeBook, RecordRepository

logger = logging.getLogger(__name__)

_BOM = "\ufeff"

EXPORT_COLUMNS: dict[str, list[str]] = {
    "word": ["word", "reading", "meaning", "addedAt", "lastReviewedAt"],
    "note": ["title", "content", "example", "addedAt"],
    "kana": ["kana", "roma", "addedAt", "lastReviewedAt"],
}

# Kinds whose imported rows get the import time when they carry no addedAt.
_STAMP_MISSING_ADDED_AT = {"note"}


@dataclass
class Backup:
    """A decoded full-backup envelope."""

    exported_at: str = ""
    words: list[Record] = field(default_factory=list)
    wrong_book: dict[str, Record] = field(default_factory=dict)
    daily_stats: dict[str, DailyTally] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


def parse_csv(
    content: Union[str, bytes],
    kind: str,
    source: str = "CSV file",
    now: Optional[datetime] = None,
) -> list[Record]:
    """Turn a CSV export back into records of ``kind``.

    The header must name the key and answer columns; rows with either blank
    are dropped. Raises MalformedImport for an unreadable file and EmptyBatch
    when no row survives.
    """
    cls = _record_type(kind)
    text = _decode(content, source)

    try:
        reader = csv.DictReader(io.StringIO(text))
        header = [h.strip() for h in (reader.fieldnames or [])]
        if not header:
            raise MalformedImport(source, "missing header row")
        missing = [c for c in (cls.key_field, cls.answer_field) if c not in header]
        if missing:
            raise MalformedImport(source, f"header is missing column(s): {', '.join(missing)}")
        reader.fieldnames = header
        rows = [{k: v for k, v in row.items() if k is not None} for row in reader]
    except csv.Error as e:
        raise MalformedImport(source, f"invalid CSV ({e})") from e

    return _build_batch(rows, kind, source, now)


def parse_json(
    content: Union[str, bytes],
    kind: str,
    source: str = "JSON file",
    now: Optional[datetime] = None,
) -> list[Record]:
    """Turn a JSON array of record objects into records of ``kind``."""
    _record_type(kind)
    data = _load_json(content, source)
    if not isinstance(data, list):
        raise MalformedImport(source, "expected a JSON array at the top level")
    if not all(isinstance(item, dict) for item in data):
        raise MalformedImport(source, "every array element must be an object")
    return _build_batch(data, kind, source, now)


def parse_backup(content: Union[str, bytes], source: str = "backup file") -> Backup:
    data = _load_json(content, source)
    if not isinstance(data, dict):
        raise MalformedImport(source, "expected a backup object with words, wrongBook and dailyStats")

    words_data = data.get("words") or []
    wrong_data = data.get("wrongBook") or {}
    daily_data = data.get("dailyStats") or {}
    if not isinstance(words_data, list) or not isinstance(wrong_data, dict) or not isinstance(daily_data, dict):
        raise MalformedImport(source, "words must be an array; wrongBook and dailyStats must be objects")

    backup = Backup(exported_at=str(data.get("exportedAt") or ""))
    backup.words = [
        record_from_dict("word", _strip_values(w))
        for w in words_data
        if isinstance(w, dict) and _text(w.get("word")) and _text(w.get("reading"))
    ]
    backup.wrong_book = {k: record_from_dict("word", v) for k, v in wrong_data.items() if isinstance(v, dict)}
    try:
        backup.daily_stats = {day: DailyTally.from_dict(v) for day, v in daily_data.items() if isinstance(v, dict)}
    except (TypeError, ValueError) as e:
        raise MalformedImport(source, f"invalid dailyStats entry ({e})") from e

    if not (backup.words or backup.wrong_book or backup.daily_stats):
        raise EmptyBatch(source)
    return backup


def restore_backup(store: BaseStore, backup: Backup) -> int:
    """Apply a backup on top of the current data. Returns the number of words added.

    Words are always added with fresh ids (no duplicate reconciliation);
    the mistake book and daily stats are merged key by key, backup winning.
    """
    words = RecordRepository(store, "word")
    restored = [with_changes(w, id=generate_key()) for w in backup.words]
    if restored:
        words.replace_all([*restored, *words.all()])

    if backup.wrong_book:
        mistakes = MistakeBook(store, "words")
        mistakes.replace_all({**mistakes.all(), **backup.wrong_book})

    if backup.daily_stats:
        stats = DailyStatsBook(store, "words")
        stats.replace_all({**stats.all(), **backup.daily_stats})

    logger.debug(
        "Restored backup: %d word(s), %d mistake(s), %d day(s) of stats",
        len(restored),
        len(backup.wrong_book),
        len(backup.daily_stats),
    )
    return len(restored)


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def export_csv(records: Sequence[Record], kind: str) -> bytes:
    columns = EXPORT_COLUMNS[kind]
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(columns)
    for record in records:
        data = record_to_dict(record)
        writer.writerow([data.get(c) or "" for c in columns])
    return (_BOM + buf.getvalue()).encode("utf-8")


def export_backup(store: BaseStore, now: datetime) -> str:
    payload = {
        "exportedAt": now.isoformat(),
        "words": [record_to_dict(w) for w in RecordRepository(store, "word").all()],
        "wrongBook": {k: record_to_dict(v) for k, v in MistakeBook(store, "words").all().items()},
        "dailyStats": {day: t.to_dict() for day, t in DailyStatsBook(store, "words").all().items()},
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)


def export_notes_json(records: Sequence[Record]) -> str:
    return json.dumps([record_to_dict(r) for r in records], ensure_ascii=False, indent=2)


def default_filename(prefix: str, now: datetime, ext: str) -> str:
    """e.g. ``jp_words_2024-05-01.csv``."""
    return f"jp_{prefix}_{now.date().isoformat()}.{ext}"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _record_type(kind: str) -> type[Record]:
    try:
        return RECORD_TYPES[kind]
    except KeyError:
        raise ValueError(f"Unknown record kind: {kind!r}") from None


def _decode(content: Union[str, bytes], source: str) -> str:
    if isinstance(content, bytes):
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedImport(source, "file is not UTF-8 text") from e
    return content[1:] if content.startswith(_BOM) else content


def _load_json(content: Union[str, bytes], source: str) -> Any:
    text = _decode(content, source)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedImport(source, f"invalid JSON ({e.msg} at line {e.lineno})") from e


def _build_batch(rows: Sequence[dict], kind: str, source: str, now: Optional[datetime]) -> list[Record]:
    cls = RECORD_TYPES[kind]
    batch = []
    for row in rows:
        values = _strip_values(row)
        if not values.get(cls.key_field) or not values.get(cls.answer_field):
            continue
        values.pop("id", None)
        if kind in _STAMP_MISSING_ADDED_AT and not values.get("addedAt") and now is not None:
            values["addedAt"] = now.isoformat()
        batch.append(record_from_dict(kind, values))

    dropped = len(rows) - len(batch)
    if dropped:
        logger.debug("%s: dropped %d row(s) missing %s or %s", source, dropped, cls.key_field, cls.answer_field)
    if not batch:
        raise EmptyBatch(source)
    return batch


def _strip_values(row: dict) -> dict:
    return {k: _text(v) for k, v in row.items()}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
