"""Adding, editing and deleting stored records.

Keys stay unique: adding a record whose key already exists asks for
confirmation and then updates the existing record in place. Edits and
deletes also refresh the mistake book so it never points at stale content.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from benkyo_store.models import Record, attribute_names, with_changes
from benkyo_store.repository import MistakeBook, RecordRepository

logger = logging.getLogger(__name__)

ConfirmUpdate = Callable[[Record, Record], bool]


class AddOutcome(str, Enum):
    ADDED = "added"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


def add_or_update(
    repository: RecordRepository,
    record: Record,
    confirm: ConfirmUpdate,
    now: datetime,
) -> AddOutcome:
    """Add ``record``, or update the record that already has its key.

    ``confirm(existing, updated)`` is only called on a key collision; the
    update keeps the existing id and creation time.
    """
    if not record.key.strip() or not record.answer.strip():
        raise ValueError(f"Both {record.key_field} and {record.answer_field} are required.")

    records = repository.all()
    for i, existing in enumerate(records):
        if existing.key != record.key:
            continue
        changes = {name: getattr(record, name) for name in attribute_names(record.kind)}
        updated = with_changes(existing, **changes)
        if not confirm(existing, updated):
            return AddOutcome.UNCHANGED
        records[i] = updated
        repository.replace_all(records)
        logger.debug("Updated %s %r", record.kind, record.key)
        return AddOutcome.UPDATED

    repository.replace_all([with_changes(record, added_at=now.isoformat()), *records])
    logger.debug("Added %s %r", record.kind, record.key)
    return AddOutcome.ADDED


def find_by_key_or_id(repository: RecordRepository, ref: str) -> Optional[Record]:
    """Look a record up by its key, falling back to its id."""
    records = repository.all()
    for record in records:
        if record.key == ref:
            return record
    for record in records:
        if record.id == ref:
            return record
    return None


def edit(
    repository: RecordRepository,
    mistakes: Optional[MistakeBook],
    record_id: str,
    **changes: Any,
) -> Record:
    """Change attributes of the record with ``record_id``.

    Raises KeyError if there is no such record and ValueError if the new key
    would collide with another record.
    """
    unknown = set(changes) - set(attribute_names(repository.kind))
    if unknown:
        raise ValueError(f"Unknown field(s) for {repository.kind}: {', '.join(sorted(unknown))}")

    records = repository.all()
    index = next((i for i, r in enumerate(records) if r.id == record_id), None)
    if index is None:
        raise KeyError(record_id)
    old = records[index]
    updated = with_changes(old, **changes)
    if not updated.key.strip():
        raise ValueError(f"{updated.key_field} cannot be empty.")
    if not updated.answer.strip():
        raise ValueError(f"{updated.answer_field} cannot be empty.")
    if updated.key != old.key and any(r.key == updated.key for r in records):
        raise ValueError(f"A {repository.kind} with {updated.key_field} {updated.key!r} already exists.")

    records[index] = updated
    repository.replace_all(records)

    if mistakes is not None:
        book = mistakes.all()
        if old.key in book:
            del book[old.key]
            book[updated.key] = updated
            mistakes.replace_all(book)
    return updated


def delete(repository: RecordRepository, mistakes: Optional[MistakeBook], record_id: str) -> Record:
    """Remove the record with ``record_id`` and its mistake book entry."""
    records = repository.all()
    target = next((r for r in records if r.id == record_id), None)
    if target is None:
        raise KeyError(record_id)
    repository.replace_all([r for r in records if r.id != record_id])

    if mistakes is not None:
        book = mistakes.all()
        kept = {k: v for k, v in book.items() if v.id != record_id}
        if len(kept) != len(book):
            mistakes.replace_all(kept)
    logger.debug("Deleted %s %r", target.kind, target.key)
    return target
