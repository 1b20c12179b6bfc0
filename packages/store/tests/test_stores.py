"""Tests for benkyo-store backends."""

from __future__ import annotations

import json

import pytest

from benkyo_store.json_file import JsonFileStore
from benkyo_store.memory import MemoryStore
from benkyo_store.sqlite import SQLiteStore


def _make_words():
    return [
        {"id": "w1", "word": "猫", "reading": "ねこ", "meaning": "cat", "addedAt": "", "lastReviewedAt": ""},
        {"id": "w2", "word": "犬", "reading": "いぬ", "meaning": "dog", "addedAt": "", "lastReviewedAt": ""},
    ]


@pytest.fixture(params=["memory", "json", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        s = MemoryStore()
    elif request.param == "json":
        s = JsonFileStore(path=str(tmp_path / "benkyo.json"))
    else:
        s = SQLiteStore(db_path=str(tmp_path / "benkyo.db"))
    yield s
    s.close()


# ---------------------------------------------------------------------------
# Contract shared by every backend
# ---------------------------------------------------------------------------


class TestStoreContract:
    def test_missing_slot_returns_none(self, store):
        assert store.get("records:words") is None

    def test_put_then_get(self, store):
        store.put("records:words", _make_words())
        assert store.get("records:words") == _make_words()

    def test_put_replaces_whole_value(self, store):
        store.put("records:words", _make_words())
        store.put("records:words", [])
        assert store.get("records:words") == []

    def test_slots_are_independent(self, store):
        store.put("mistakes:words", {"猫": _make_words()[0]})
        store.put("daily:words", {"2024-05-01": {"total": 3, "correct": 2}})
        store.delete("mistakes:words")

        assert store.get("mistakes:words") is None
        assert store.get("daily:words") == {"2024-05-01": {"total": 3, "correct": 2}}

    def test_delete_missing_slot_does_not_raise(self, store):
        store.delete("progress:words")  # must not raise

    def test_slots_lists_names(self, store):
        store.put("b", 1)
        store.put("a", 2)
        assert store.slots() == ["a", "b"]

    def test_returned_values_are_copies(self, store):
        store.put("records:words", _make_words())
        value = store.get("records:words")
        value.append({"word": "鳥"})
        assert len(store.get("records:words")) == 2

    def test_unicode_roundtrip(self, store):
        store.put("records:notes", [{"title": "〜てもいい", "content": "permission"}])
        assert store.get("records:notes")[0]["title"] == "〜てもいい"


# ---------------------------------------------------------------------------
# MemoryStore
# ---------------------------------------------------------------------------


class TestMemoryStore:
    def test_corrupted_slot_reads_as_absent(self):
        store = MemoryStore()
        store.put_raw("progress:words", "{not json")
        assert store.get("progress:words") is None


# ---------------------------------------------------------------------------
# JsonFileStore
# ---------------------------------------------------------------------------


class TestJsonFileStore:
    def test_file_not_created_until_first_write(self, tmp_path):
        path = tmp_path / "benkyo.json"
        store = JsonFileStore(path=str(path))
        assert store.get("records:words") is None
        assert not path.exists()

    def test_document_layout_uses_slot_names(self, tmp_path):
        path = tmp_path / "benkyo.json"
        store = JsonFileStore(path=str(path))
        store.put("records:words", _make_words())

        document = json.loads(path.read_text(encoding="utf-8"))
        assert list(document) == ["records:words"]
        assert document["records:words"][0]["word"] == "猫"

    def test_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "benkyo.json")
        JsonFileStore(path=path).put("daily:words", {"2024-05-01": {"total": 1, "correct": 1}})
        assert JsonFileStore(path=path).get("daily:words") == {"2024-05-01": {"total": 1, "correct": 1}}

    def test_corrupted_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "benkyo.json"
        path.write_text("{broken", encoding="utf-8")
        store = JsonFileStore(path=str(path))
        assert store.get("records:words") is None
        assert store.slots() == []

    def test_non_object_root_reads_as_empty(self, tmp_path):
        path = tmp_path / "benkyo.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert JsonFileStore(path=str(path)).get("records:words") is None

    def test_write_leaves_no_temp_files(self, tmp_path):
        store = JsonFileStore(path=str(tmp_path / "benkyo.json"))
        store.put("a", 1)
        store.put("b", 2)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["benkyo.json"]

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "benkyo.json"
        JsonFileStore(path=str(path)).put("a", 1)
        assert path.exists()


# ---------------------------------------------------------------------------
# SQLiteStore
# ---------------------------------------------------------------------------


class TestSQLiteStore:
    def test_persists_across_connections(self, tmp_path):
        """Data written by one SQLiteStore instance must be readable by another."""
        db_path = str(tmp_path / "benkyo.db")
        store_a = SQLiteStore(db_path=db_path)
        store_a.put("records:words", _make_words())
        store_a.close()

        store_b = SQLiteStore(db_path=db_path)
        assert len(store_b.get("records:words")) == 2
        store_b.close()

    def test_upsert_keeps_one_row_per_slot(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "benkyo.db"))
        store.put("records:words", [])
        store.put("records:words", _make_words())

        count = store._conn.execute("SELECT COUNT(*) FROM slots").fetchone()[0]
        assert count == 1
        store.close()

    def test_corrupted_slot_reads_as_absent(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "benkyo.db"))
        store._conn.execute("INSERT INTO slots (name, value) VALUES (?, ?)", ("progress:words", "{oops"))
        store._conn.commit()

        assert store.get("progress:words") is None
        store.close()
