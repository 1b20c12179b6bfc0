"""Merging an imported batch into an existing record list.

New keys are merged straight away; only colliding keys need a decision. The
user can decide per record (cover / skip) or settle everything left in one
go (cover all / skip all), so a mostly-new batch needs no interaction and a
batch full of collisions needs at most one.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Sequence

from benkyo_core.errors import ReconcileFinished
from benkyo_store.models import Record
from benkyo_store.repository import RecordRepository

logger = logging.getLogger(__name__)


class Resolution(str, Enum):
    COVER = "cover"
    SKIP = "skip"
    COVER_ALL = "cover-all"
    SKIP_ALL = "skip-all"

    @property
    def bulk(self) -> bool:
        return self in (Resolution.COVER_ALL, Resolution.SKIP_ALL)


def partition(batch: Sequence[Record], existing: Sequence[Record]) -> tuple[list[Record], list[Record]]:
    """Split ``batch`` into (uniques, duplicates), keeping batch order in each.

    A candidate is a duplicate when its key is already in ``existing`` or
    appeared earlier in the batch.
    """
    seen = {r.key for r in existing}
    uniques: list[Record] = []
    duplicates: list[Record] = []
    for candidate in batch:
        if candidate.key in seen:
            duplicates.append(candidate)
        else:
            seen.add(candidate.key)
            uniques.append(candidate)
    return uniques, duplicates


def merge_uniques(existing: Sequence[Record], uniques: Sequence[Record]) -> list[Record]:
    """New list with ``uniques`` in front of ``existing`` (most recent first)."""
    return [*uniques, *existing]


def cover(existing: Sequence[Record], candidates: Sequence[Record]) -> list[Record]:
    """Replace each existing record with the candidate sharing its key."""
    replacements = {c.key: c for c in candidates}
    return [replacements.get(r.key, r) for r in existing]


class ImportReconciler:
    """One import: unconditional merge of new keys, then a duplicate loop.

    Usage::

        reconciler = ImportReconciler(repository, batch)
        reconciler.begin()
        while not reconciler.done:
            reconciler.decide_one(ask_user(reconciler.current))
    """

    def __init__(self, repository: RecordRepository, batch: Sequence[Record]):
        self._repository = repository
        self._batch = list(batch)
        self.pending: list[Record] = []
        self.cursor = 0
        self.added = 0
        self.covered = 0
        self.skipped = 0
        self._ended = False

    def begin(self) -> int:
        """Merge the new records and queue the duplicates. Returns the number merged."""
        existing = self._repository.all()
        uniques, self.pending = partition(self._batch, existing)
        if uniques:
            self._repository.replace_all(merge_uniques(existing, uniques))
        self.added = len(uniques)
        self.cursor = 0
        self._ended = not self.pending
        logger.debug("Import: %d new, %d duplicate(s)", len(uniques), len(self.pending))
        return self.added

    @property
    def done(self) -> bool:
        return self._ended or self.cursor >= len(self.pending)

    @property
    def current(self) -> Optional[Record]:
        """The duplicate awaiting a decision, or None once the loop has ended."""
        if self.done:
            return None
        return self.pending[self.cursor]

    @property
    def remaining(self) -> list[Record]:
        return [] if self.done else self.pending[self.cursor :]

    def existing_for(self, candidate: Record) -> Optional[Record]:
        """The stored record the candidate collides with."""
        return self._repository.find(candidate.key)

    def decide_one(self, resolution: Resolution) -> None:
        if resolution.bulk:
            raise ValueError(f"{resolution.value} applies to every remaining duplicate; use decide_all().")
        candidate = self._require_current()
        if resolution is Resolution.COVER:
            self._repository.replace_all(cover(self._repository.all(), [candidate]))
            self.covered += 1
        else:
            self.skipped += 1
        self.cursor += 1

    def decide_all(self, resolution: Resolution) -> None:
        if not resolution.bulk:
            raise ValueError(f"{resolution.value} applies to one duplicate; use decide_one().")
        self._require_current()
        remaining = self.remaining
        if resolution is Resolution.COVER_ALL:
            self._repository.replace_all(cover(self._repository.all(), remaining))
            self.covered += len(remaining)
        else:
            self.skipped += len(remaining)
        self._ended = True

    def _require_current(self) -> Record:
        candidate = self.current
        if candidate is None:
            raise ReconcileFinished("All duplicates have been resolved.")
        return candidate
