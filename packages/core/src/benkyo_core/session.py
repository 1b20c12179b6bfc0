"""Resumable review sessions.

A session is one pass over a shuffled snapshot of records taken when the
session starts. Later edits to the record store are not seen until the next
session. The cursor is persisted after every move under a slot owned by the
session's Scope, so leaving mid-way and coming back picks up where the user
stopped, and word review never clobbers a kana session (or vice versa).

Phases::

    IDLE --start--> IN_PROGRESS --advance (not last)--> IN_PROGRESS
    IN_PROGRESS --advance (last)--> COMPLETE
    IN_PROGRESS --discard--> IDLE
    IDLE --resume_check (found)--> PENDING_RESUME --resume--> IN_PROGRESS
                                                  --start---> IN_PROGRESS
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, Sequence

from benkyo_core.errors import EmptyPool, OutOfRange, SessionFinished
from benkyo_core.grading import Grade, grade_answer
from benkyo_core.kana import kana_pool
from benkyo_store.base import BaseStore
from benkyo_store.models import Record, Scope, SessionSnapshot, with_changes
from benkyo_store.repository import DailyStatsBook, MistakeBook, ProgressRepository, RecordRepository

logger = logging.getLogger(__name__)

Shuffle = Callable[[Sequence[Record]], list]
Clock = Callable[[], datetime]

_KANA_MODES = {
    Scope.KANA_HIRAGANA: "hiragana",
    Scope.KANA_KATAKANA: "katakana",
    Scope.KANA_BOTH: "both",
}


def uniform_shuffle(items: Sequence[Record]) -> list:
    """Return a uniformly random permutation of ``items``."""
    return random.sample(list(items), len(items))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Phase(str, Enum):
    IDLE = "idle"
    PENDING_RESUME = "pending_resume"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


@dataclass
class SessionState:
    """Live session: the fixed item order, the cursor and the last grading."""

    items: list[Record]
    index: int
    scope: Scope
    answer: str = ""
    result: Optional[Grade] = None

    @property
    def complete(self) -> bool:
        return self.index >= len(self.items)

    @property
    def position(self) -> int:
        """1-based position of the current item, for progress display."""
        return min(self.index + 1, len(self.items))

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(items=list(self.items), index=self.index, scope=self.scope)


class ReviewSession:
    """Drives one bounded review pass for a single Scope."""

    def __init__(
        self,
        scope: Scope,
        progress: ProgressRepository,
        mistakes: MistakeBook,
        stats: DailyStatsBook,
        records: Optional[RecordRepository] = None,
        shuffle: Optional[Shuffle] = None,
        clock: Optional[Clock] = None,
    ):
        self.scope = scope
        self.progress = progress
        self.mistakes = mistakes
        self.stats = stats
        self.records = records
        self._shuffle = shuffle or uniform_shuffle
        self._clock = clock or utc_now
        self.state: Optional[SessionState] = None
        self.phase = Phase.IDLE

    @classmethod
    def for_scope(
        cls,
        store: BaseStore,
        scope: Scope,
        shuffle: Optional[Shuffle] = None,
        clock: Optional[Clock] = None,
    ) -> ReviewSession:
        """Wire a session to the collections its scope's domain owns.

        Word scopes stamp review times on the stored word list; kana comes
        from the built-in tables, so there is no record list to stamp.
        """
        records = RecordRepository(store, "word") if scope.domain == "words" else None
        return cls(
            scope=scope,
            progress=ProgressRepository(store),
            mistakes=MistakeBook(store, scope.domain),
            stats=DailyStatsBook(store, scope.domain),
            records=records,
            shuffle=shuffle,
            clock=clock,
        )

    def default_pool(self) -> list[Record]:
        """The records a fresh session for this scope reviews."""
        if self.scope.mistakes_only:
            return list(self.mistakes.all().values())
        if self.scope in _KANA_MODES:
            return list(kana_pool(_KANA_MODES[self.scope]))
        return self.records.all() if self.records is not None else []

    # -- lifecycle ---------------------------------------------------------

    def start(self, pool: Sequence[Record]) -> SessionState:
        """Begin a fresh pass over a shuffled copy of ``pool``."""
        if not pool:
            raise EmptyPool(self.scope)
        items = list(self._shuffle(list(pool)))
        return self._begin(items, 0)

    def start_at(self, pool: Sequence[Record], key: str) -> SessionState:
        """Begin an unshuffled pass positioned at the item whose key is ``key``."""
        if not pool:
            raise EmptyPool(self.scope)
        items = list(pool)
        for index, record in enumerate(items):
            if record.key == key:
                return self._begin(items, index)
        raise KeyError(key)

    def resume_check(self) -> Optional[SessionSnapshot]:
        """Return persisted progress for this scope if it can be continued."""
        snapshot = self.progress.load(self.scope)
        if snapshot is None or not 0 <= snapshot.index < len(snapshot.items):
            return None
        if self.phase is Phase.IDLE:
            self.phase = Phase.PENDING_RESUME
        return snapshot

    def resume(self, snapshot: SessionSnapshot) -> SessionState:
        """Adopt persisted progress, rewinding a cursor that points past the end."""
        items = list(snapshot.items)
        index = snapshot.index
        try:
            _check_in_range(index, len(items))
        except OutOfRange as e:
            logger.debug("Resetting resumed %s session to the first item: %s", self.scope.value, e)
            index = 0
        self.state = SessionState(items=items, index=index, scope=self.scope)
        self.phase = Phase.IN_PROGRESS
        logger.debug("Resumed %s session at %d/%d", self.scope.value, index + 1, len(items))
        return self.state

    def discard(self) -> None:
        """Drop any saved progress and go back to idle without completing."""
        self.progress.clear(self.scope)
        self.state = None
        self.phase = Phase.IDLE
        logger.debug("Discarded %s session", self.scope.value)

    # -- answering ---------------------------------------------------------

    def current(self) -> Optional[Record]:
        if self.state is None or self.state.complete:
            return None
        return self.state.items[self.state.index]

    def grade(self, user_answer: str) -> Grade:
        """Grade ``user_answer`` against the current item.

        Updates the mistake book, today's counters and (on an exact answer)
        the record's last-reviewed time. Does not move the cursor.
        """
        item = self.current()
        if item is None:
            raise SessionFinished("There is no item to answer.")

        result = grade_answer(user_answer, item.answer)
        now = self._clock()
        if result is Grade.EXACT:
            self.mistakes.remove(item.key)
            self._stamp_reviewed(item, now)
        else:
            self.mistakes.add(item)
        self.stats.bump(_utc_day(now), correct=result is Grade.EXACT)

        self.state.answer = user_answer
        self.state.result = result
        logger.debug("Graded %r as %s", item.key, result.value)
        return result

    def advance(self) -> SessionState:
        """Move to the next item, or complete the session after the last one."""
        state = self.state
        if state is None:
            raise SessionFinished("No review session is running.")
        state.answer = ""
        state.result = None
        if state.index + 1 < len(state.items):
            state.index += 1
            self.progress.save(state.snapshot())
        else:
            state.index = len(state.items)
            self.progress.clear(self.scope)
            self.phase = Phase.COMPLETE
            logger.debug("Completed %s session (%d items)", self.scope.value, len(state.items))
        return state

    # -- internals ---------------------------------------------------------

    def _begin(self, items: list[Record], index: int) -> SessionState:
        self.state = SessionState(items=items, index=index, scope=self.scope)
        self.progress.save(self.state.snapshot())
        self.phase = Phase.IN_PROGRESS
        logger.debug("Started %s session with %d items", self.scope.value, len(items))
        return self.state

    def _stamp_reviewed(self, item: Record, now: datetime) -> None:
        if self.records is None:
            return
        records = self.records.all()
        match = next((i for i, r in enumerate(records) if r.id == item.id), None)
        if match is None:
            match = next((i for i, r in enumerate(records) if r.key == item.key), None)
        if match is None:
            return
        records[match] = with_changes(records[match], last_reviewed_at=now.isoformat())
        self.records.replace_all(records)


def _check_in_range(index: int, length: int) -> None:
    if length == 0 or not 0 <= index < length:
        raise OutOfRange(index, length)


def _utc_day(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).date().isoformat()
