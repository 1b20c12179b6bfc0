"""Typed collections on top of a BaseStore.

Each repository owns exactly one slot and follows the same contract: read
the whole collection, then write the whole collection back. There is no
locking; a single writer is assumed.
"""

from __future__ import annotations

import logging
from typing import Any

from benkyo_store.base import BaseStore
from benkyo_store.models import (
    DailyTally,
    Record,
    Scope,
    SessionSnapshot,
    record_from_dict,
    record_to_dict,
)
from benkyo_store.slots import daily_slot, mistakes_slot, progress_slot, records_slot

logger = logging.getLogger(__name__)

_DOMAIN_KINDS = {"words": "word", "kana": "kana"}


class RecordRepository:
    """The ordered record list for one kind (words or notes)."""

    def __init__(self, store: BaseStore, kind: str):
        self.kind = kind
        self._store = store
        self._slot = records_slot(kind)

    def all(self) -> list[Record]:
        data = self._store.get(self._slot)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Slot %r does not hold a list; treating it as empty.", self._slot)
            return []
        return [record_from_dict(self.kind, d) for d in data if isinstance(d, dict)]

    def replace_all(self, records: list[Record]) -> None:
        self._store.put(self._slot, [record_to_dict(r) for r in records])

    def find(self, key: str) -> Record | None:
        for record in self.all():
            if record.key == key:
                return record
        return None


class MistakeBook:
    """Records currently marked wrong, keyed by record key."""

    def __init__(self, store: BaseStore, domain: str):
        self.kind = _DOMAIN_KINDS[domain]
        self._store = store
        self._slot = mistakes_slot(domain)

    def all(self) -> dict[str, Record]:
        data = self._store.get(self._slot)
        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning("Slot %r does not hold an object; treating it as empty.", self._slot)
            return {}
        return {k: record_from_dict(self.kind, v) for k, v in data.items() if isinstance(v, dict)}

    def replace_all(self, mistakes: dict[str, Record]) -> None:
        self._store.put(self._slot, {k: record_to_dict(v) for k, v in mistakes.items()})

    def add(self, record: Record) -> None:
        mistakes = self.all()
        mistakes[record.key] = record
        self.replace_all(mistakes)

    def remove(self, key: str) -> None:
        mistakes = self.all()
        if key in mistakes:
            del mistakes[key]
            self.replace_all(mistakes)


class DailyStatsBook:
    """Per-day answer counters, keyed by ISO date."""

    def __init__(self, store: BaseStore, domain: str):
        self._store = store
        self._slot = daily_slot(domain)

    def all(self) -> dict[str, DailyTally]:
        data = self._store.get(self._slot)
        if not isinstance(data, dict):
            return {}
        stats = {}
        for day, value in data.items():
            if not isinstance(value, dict):
                continue
            try:
                stats[day] = DailyTally.from_dict(value)
            except (TypeError, ValueError) as e:
                logger.warning("Skipping unreadable daily stats for %s in %r: %s", day, self._slot, e)
        return stats

    def replace_all(self, stats: dict[str, DailyTally]) -> None:
        self._store.put(self._slot, {day: t.to_dict() for day, t in stats.items()})

    def get(self, day: str) -> DailyTally:
        return self.all().get(day, DailyTally())

    def bump(self, day: str, correct: bool) -> DailyTally:
        stats = self.all()
        tally = stats.setdefault(day, DailyTally())
        tally.total += 1
        if correct:
            tally.correct += 1
        self.replace_all(stats)
        return tally


class ProgressRepository:
    """Resumable review progress, one slot per Scope."""

    def __init__(self, store: BaseStore):
        self._store = store

    def load(self, scope: Scope) -> SessionSnapshot | None:
        slot = progress_slot(scope)
        data: Any = self._store.get(slot)
        if data is None:
            return None
        try:
            return SessionSnapshot.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Ignoring unreadable review progress in %r: %s", slot, e)
            return None

    def save(self, snapshot: SessionSnapshot) -> None:
        self._store.put(progress_slot(snapshot.scope), snapshot.to_dict())

    def clear(self, scope: Scope) -> None:
        self._store.delete(progress_slot(scope))
