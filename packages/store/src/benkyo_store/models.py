"""Study record data models.

Three record kinds share a common base (id, added_at, last_reviewed_at) and
each names its own key and expected-answer field. The persisted shape is the
camelCase JSON the collections have always been stored in, so the codecs
here are the only place that knows about ``addedAt``/``lastReviewedAt``.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, ClassVar


def generate_key() -> str:
    """Return a new opaque record id."""
    return uuid.uuid4().hex[:12]


@dataclass
class Record:
    """Base for every studyable item."""

    kind: ClassVar[str] = ""
    key_field: ClassVar[str] = ""
    answer_field: ClassVar[str] = ""

    id: str = field(default_factory=generate_key)
    added_at: str = ""  # ISO-8601, set once
    last_reviewed_at: str = ""  # ISO-8601, stamped on exact answers only

    @property
    def key(self) -> str:
        return getattr(self, self.key_field)

    @property
    def answer(self) -> str:
        return getattr(self, self.answer_field)


@dataclass
class WordRecord(Record):
    kind: ClassVar[str] = "word"
    key_field: ClassVar[str] = "word"
    answer_field: ClassVar[str] = "reading"

    word: str = ""
    reading: str = ""
    meaning: str = ""


@dataclass
class NoteRecord(Record):
    """A grammar note; the title is its key."""

    kind: ClassVar[str] = "note"
    key_field: ClassVar[str] = "title"
    answer_field: ClassVar[str] = "content"

    title: str = ""
    content: str = ""
    example: str = ""


@dataclass
class KanaRecord(Record):
    kind: ClassVar[str] = "kana"
    key_field: ClassVar[str] = "kana"
    answer_field: ClassVar[str] = "roma"

    kana: str = ""
    roma: str = ""


RECORD_TYPES: dict[str, type[Record]] = {
    WordRecord.kind: WordRecord,
    NoteRecord.kind: NoteRecord,
    KanaRecord.kind: KanaRecord,
}

# Persisted name -> dataclass attribute, for the base fields that differ.
_PERSISTED_NAMES = {"addedAt": "added_at", "lastReviewedAt": "last_reviewed_at"}
_ATTRIBUTE_NAMES = {v: k for k, v in _PERSISTED_NAMES.items()}


def attribute_names(kind: str) -> list[str]:
    """Kind-specific attribute names in declaration order (key first)."""
    base = {f.name for f in fields(Record)}
    return [f.name for f in fields(RECORD_TYPES[kind]) if f.name not in base]


def record_to_dict(record: Record) -> dict[str, Any]:
    data: dict[str, Any] = {"id": record.id}
    for name in attribute_names(record.kind):
        data[name] = getattr(record, name)
    data["addedAt"] = record.added_at
    data["lastReviewedAt"] = record.last_reviewed_at
    return data


def record_from_dict(kind: str, data: dict[str, Any]) -> Record:
    """Build a record of ``kind`` from its persisted dict.

    Missing values default to empty strings and unknown keys are ignored, so
    rows written by older versions (no ``lastReviewedAt``, no ``id``) load.
    """
    cls = RECORD_TYPES.get(kind)
    if cls is None:
        raise ValueError(f"Unknown record kind: {kind!r}")

    kwargs: dict[str, Any] = {}
    for name in attribute_names(kind):
        kwargs[name] = _as_text(data.get(name))
    for persisted, attr in _PERSISTED_NAMES.items():
        kwargs[attr] = _as_text(data.get(persisted))
    record_id = data.get("id")
    if record_id:
        kwargs["id"] = str(record_id)
    return cls(**kwargs)


def with_changes(record: Record, **changes: Any) -> Record:
    """Copy of ``record`` with the given attributes replaced."""
    return replace(record, **changes)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class Scope(str, Enum):
    """An independent resumable review domain."""

    WORDS = "words"
    WORDS_MISTAKES = "words-mistakes"
    KANA_HIRAGANA = "kana-hiragana"
    KANA_KATAKANA = "kana-katakana"
    KANA_BOTH = "kana-both"

    @property
    def domain(self) -> str:
        return "kana" if self.value.startswith("kana-") else "words"

    @property
    def mistakes_only(self) -> bool:
        return self is Scope.WORDS_MISTAKES


@dataclass
class DailyTally:
    total: int = 0
    correct: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"total": self.total, "correct": self.correct}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DailyTally:
        return cls(total=int(data.get("total", 0)), correct=int(data.get("correct", 0)))


@dataclass
class SessionSnapshot:
    """Persisted form of a review session: the shuffled items and the cursor.

    Items are stored with their kind so a restored session rebuilds the same
    record classes it started with.
    """

    items: list[Record]
    index: int
    scope: Scope

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [{"kind": r.kind, **record_to_dict(r)} for r in self.items],
            "index": self.index,
            "scope": self.scope.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionSnapshot:
        """Decode a snapshot; raises ValueError/TypeError/KeyError on bad shapes."""
        items_data = data["items"]
        index = data["index"]
        if not isinstance(items_data, list) or not isinstance(index, int) or isinstance(index, bool):
            raise TypeError("snapshot items must be a list and index an int")
        items = [record_from_dict(d["kind"], d) for d in items_data]
        return cls(items=items, index=index, scope=Scope(data["scope"]))
