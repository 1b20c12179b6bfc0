"""Tests for CSV/JSON import and export."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from benkyo_core.codecs import (
    default_filename,
    export_backup,
    export_csv,
    export_notes_json,
    parse_backup,
    parse_csv,
    parse_json,
    restore_backup,
)
from benkyo_core.errors import EmptyBatch, MalformedImport
from benkyo_store.memory import MemoryStore
from benkyo_store.models import DailyTally, NoteRecord, WordRecord
from benkyo_store.repository import DailyStatsBook, MistakeBook, RecordRepository

NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# parse_csv
# ---------------------------------------------------------------------------


class TestParseCsv:
    def test_reads_rows_by_header(self):
        content = "word,reading,meaning\n猫,ねこ,cat\n犬,いぬ,dog\n"
        batch = parse_csv(content, "word")

        assert [(r.word, r.reading, r.meaning) for r in batch] == [("猫", "ねこ", "cat"), ("犬", "いぬ", "dog")]
        assert all(isinstance(r, WordRecord) for r in batch)

    def test_column_order_does_not_matter(self):
        batch = parse_csv("meaning,reading,word\ncat,ねこ,猫\n", "word")
        assert (batch[0].word, batch[0].reading) == ("猫", "ねこ")

    def test_strips_bom_from_bytes_and_text(self):
        raw = "\ufeffword,reading\n猫,ねこ\n"
        assert parse_csv(raw, "word")[0].word == "猫"
        assert parse_csv(raw.encode("utf-8"), "word")[0].word == "猫"

    def test_quoted_fields_and_embedded_quotes(self):
        content = 'title,content,example\n"〜たい","want to ""do""","食べたい, 行きたい"\n'
        note = parse_csv(content, "note")[0]
        assert note.content == 'want to "do"'
        assert note.example == "食べたい, 行きたい"

    def test_rows_missing_key_or_answer_are_dropped(self):
        content = "word,reading\n猫,ねこ\n,いぬ\n鳥,\n  ,  \n"
        assert [r.word for r in parse_csv(content, "word")] == ["猫"]

    def test_values_are_trimmed(self):
        assert parse_csv("word,reading\n  猫 , ねこ \n", "word")[0].reading == "ねこ"

    def test_imported_rows_get_fresh_ids(self):
        batch = parse_csv("id,word,reading\nabc,猫,ねこ\n", "word")
        assert batch[0].id != "abc"

    def test_notes_without_added_at_get_import_time(self):
        batch = parse_csv("title,content\n〜たい,want to\n", "note", now=NOW)
        assert batch[0].added_at == NOW.isoformat()

    def test_notes_keep_existing_added_at(self):
        batch = parse_csv("title,content,addedAt\n〜たい,want to,2023-01-01\n", "note", now=NOW)
        assert batch[0].added_at == "2023-01-01"

    def test_missing_answer_column_is_malformed(self):
        with pytest.raises(MalformedImport) as exc:
            parse_csv("word,meaning\n猫,cat\n", "word", source="words.csv")
        assert exc.value.source == "words.csv"
        assert "reading" in exc.value.reason

    def test_empty_file_is_malformed(self):
        with pytest.raises(MalformedImport):
            parse_csv("", "word")

    def test_header_only_is_empty_batch(self):
        with pytest.raises(EmptyBatch):
            parse_csv("word,reading\n", "word")

    def test_non_utf8_bytes_are_malformed(self):
        with pytest.raises(MalformedImport):
            parse_csv("word,reading\n猫,ねこ\n".encode("shift_jis"), "word")

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError):
            parse_csv("a,b\n1,2\n", "sentence")


# ---------------------------------------------------------------------------
# parse_json
# ---------------------------------------------------------------------------


class TestParseJson:
    def test_reads_array_of_objects(self):
        content = json.dumps([{"title": "〜たい", "content": "want to", "example": "食べたい"}], ensure_ascii=False)
        batch = parse_json(content, "note", now=NOW)
        assert isinstance(batch[0], NoteRecord)
        assert batch[0].example == "食べたい"

    def test_top_level_object_is_malformed(self):
        with pytest.raises(MalformedImport, match="array"):
            parse_json('{"title": "x"}', "note")

    def test_non_object_elements_are_malformed(self):
        with pytest.raises(MalformedImport):
            parse_json('[{"title": "x", "content": "y"}, 3]', "note")

    def test_invalid_json_is_malformed(self):
        with pytest.raises(MalformedImport, match="invalid JSON"):
            parse_json("[{", "note")

    def test_empty_array_is_empty_batch(self):
        with pytest.raises(EmptyBatch):
            parse_json("[]", "note")

    def test_objects_without_required_fields_are_dropped(self):
        batch = parse_json('[{"title": "x"}, {"title": "y", "content": "z"}]', "note")
        assert [r.title for r in batch] == ["y"]


# ---------------------------------------------------------------------------
# Backups
# ---------------------------------------------------------------------------


def _make_backup_store():
    store = MemoryStore()
    words = [WordRecord(id="w1", word="猫", reading="ねこ", meaning="cat")]
    RecordRepository(store, "word").replace_all(words)
    MistakeBook(store, "words").add(words[0])
    DailyStatsBook(store, "words").bump("2024-04-30", correct=True)
    return store


class TestBackup:
    def test_export_envelope(self):
        payload = json.loads(export_backup(_make_backup_store(), NOW))

        assert payload["exportedAt"] == NOW.isoformat()
        assert payload["words"][0]["word"] == "猫"
        assert payload["wrongBook"]["猫"]["reading"] == "ねこ"
        assert payload["dailyStats"] == {"2024-04-30": {"total": 1, "correct": 1}}

    def test_export_is_indented_and_keeps_unicode(self):
        text = export_backup(_make_backup_store(), NOW)
        assert "\n  " in text
        assert "猫" in text

    def test_parse_backup_decodes_every_part(self):
        backup = parse_backup(export_backup(_make_backup_store(), NOW))

        assert [w.word for w in backup.words] == ["猫"]
        assert backup.wrong_book["猫"].meaning == "cat"
        assert backup.daily_stats["2024-04-30"] == DailyTally(total=1, correct=1)

    def test_parse_backup_drops_words_without_reading(self):
        content = json.dumps({"words": [{"word": "猫", "reading": "ねこ"}, {"word": "犬", "reading": " "}]})
        assert [w.word for w in parse_backup(content).words] == ["猫"]

    def test_parse_backup_rejects_arrays(self):
        with pytest.raises(MalformedImport):
            parse_backup("[]")

    def test_parse_backup_rejects_wrong_part_types(self):
        with pytest.raises(MalformedImport):
            parse_backup('{"words": {"猫": {}}, "wrongBook": {}, "dailyStats": {}}')

    def test_parse_backup_with_nothing_in_it_is_empty(self):
        with pytest.raises(EmptyBatch):
            parse_backup('{"exportedAt": "2024-05-01", "words": [], "wrongBook": {}, "dailyStats": {}}')

    def test_restore_adds_words_with_fresh_ids(self):
        store = MemoryStore()
        RecordRepository(store, "word").replace_all([WordRecord(id="mine", word="犬", reading="いぬ")])
        backup = parse_backup(export_backup(_make_backup_store(), NOW))

        assert restore_backup(store, backup) == 1

        words = RecordRepository(store, "word").all()
        assert [w.word for w in words] == ["猫", "犬"]
        assert words[0].id != "w1"

    def test_restore_merges_mistakes_and_stats(self):
        store = MemoryStore()
        MistakeBook(store, "words").add(WordRecord(word="犬", reading="いぬ"))
        DailyStatsBook(store, "words").bump("2024-05-01", correct=False)
        backup = parse_backup(export_backup(_make_backup_store(), NOW))

        restore_backup(store, backup)

        assert set(MistakeBook(store, "words").all()) == {"犬", "猫"}
        assert set(DailyStatsBook(store, "words").all()) == {"2024-04-30", "2024-05-01"}


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


class TestExport:
    def test_csv_has_bom_header_and_quotes(self):
        data = export_csv([WordRecord(word="猫", reading="ねこ", meaning='say "meow"')], "word")

        assert data.startswith("\ufeff".encode("utf-8"))
        lines = data.decode("utf-8-sig").split("\n")
        assert lines[0] == '"word","reading","meaning","addedAt","lastReviewedAt"'
        assert lines[1] == '"猫","ねこ","say ""meow""","",""'

    def test_csv_export_reimports(self):
        notes = [NoteRecord(title="〜たい", content="want to", example="食べたい, 行きたい")]
        batch = parse_csv(export_csv(notes, "note"), "note")
        assert (batch[0].title, batch[0].content, batch[0].example) == ("〜たい", "want to", "食べたい, 行きたい")

    def test_notes_json_is_a_bare_array(self):
        data = json.loads(export_notes_json([NoteRecord(id="n1", title="〜たい", content="want to")]))
        assert isinstance(data, list)
        assert data[0]["id"] == "n1"

    def test_default_filename(self):
        assert default_filename("words", NOW, "csv") == "jp_words_2024-05-01.csv"
