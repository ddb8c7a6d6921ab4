"""Tests for seeding a store from JSON / JSONL files."""

import json
import logging
from datetime import datetime, timedelta, timezone

import pytest

from document_store import DocumentStore, SearchRequest
from document_store.loader import document_from_record, load_documents, parse_timestamp, seed_store


SAMPLE_RECORDS = [
    {
        "id": "doc-1",
        "title": "Java Programming",
        "content": "Learn Java step by step",
        "author": {"id": "author1", "name": "Alice"},
        "created": "2026-02-10T09:00:00Z",
    },
    {
        "title": "Python Programming",
        "content": "Master Python easily",
        "author": {"id": "author2", "name": "Bob"},
        "created": "2026-02-10T08:00:00+00:00",
    },
    {
        "id": "doc-3",
        "title": "Java and Spring Boot",
        "content": "Learn Java and Spring Boot for web development",
        "author": {"id": "author1", "name": "Alice"},
        "created": "2026-02-10T07:00:00",
    },
]


class TestParseTimestamp:
    def test_z_suffix_is_utc(self):
        assert parse_timestamp("2026-02-10T09:00:00Z") == datetime(2026, 2, 10, 9, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert parse_timestamp("2026-02-10T09:00:00").tzinfo == timezone.utc

    def test_keeps_offset(self):
        parsed = parse_timestamp("2026-02-10T11:00:00+02:00")
        assert parsed.utcoffset() == timedelta(hours=2)
        assert parsed == datetime(2026, 2, 10, 9, tzinfo=timezone.utc)

    def test_invalid_raises(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")


class TestDocumentFromRecord:
    def test_builds_document(self):
        doc = document_from_record(SAMPLE_RECORDS[0])
        assert doc.id == "doc-1"
        assert doc.title == "Java Programming"
        assert doc.author.id == "author1"
        assert doc.author.name == "Alice"
        assert doc.created == datetime(2026, 2, 10, 9, tzinfo=timezone.utc)

    def test_missing_id_is_none(self):
        assert document_from_record(SAMPLE_RECORDS[1]).id is None

    def test_missing_text_fields_default_to_empty(self):
        doc = document_from_record({"author": {"id": "a"}, "created": "2026-02-10T09:00:00Z"})
        assert doc.title == ""
        assert doc.content == ""
        assert doc.author.name == ""

    def test_missing_author_raises(self):
        with pytest.raises(ValueError, match="author"):
            document_from_record({"title": "x", "created": "2026-02-10T09:00:00Z"})

    def test_missing_created_raises(self):
        with pytest.raises(ValueError, match="created"):
            document_from_record({"title": "x", "author": {"id": "a"}})

    @pytest.mark.parametrize("key", ["id", "title", "content"])
    def test_non_string_field_raises(self, key):
        record = dict(SAMPLE_RECORDS[0], **{key: 5})
        with pytest.raises(ValueError, match=key):
            document_from_record(record)

    def test_non_string_author_name_raises(self):
        record = dict(SAMPLE_RECORDS[0], author={"id": "author1", "name": ["Alice"]})
        with pytest.raises(ValueError, match="author.name"):
            document_from_record(record)

    def test_null_fields_are_allowed(self):
        record = dict(SAMPLE_RECORDS[0], id=None, title=None, content=None)
        doc = document_from_record(record)
        assert doc.id is None
        assert doc.title == ""
        assert doc.content == ""


class TestLoadDocuments:
    def test_json_list(self, tmp_path):
        path = tmp_path / "docs.json"
        path.write_text(json.dumps(SAMPLE_RECORDS))
        docs = load_documents(path)
        assert [d.title for d in docs] == [r["title"] for r in SAMPLE_RECORDS]

    def test_json_object_with_documents(self, tmp_path):
        path = tmp_path / "docs.json"
        path.write_text(json.dumps({"documents": SAMPLE_RECORDS}, indent=2))
        assert len(load_documents(path)) == 3

    def test_jsonl(self, tmp_path):
        path = tmp_path / "docs.jsonl"
        path.write_text("\n".join(json.dumps(r) for r in SAMPLE_RECORDS) + "\n")
        assert len(load_documents(path)) == 3

    def test_skips_malformed_lines(self, tmp_path, caplog):
        path = tmp_path / "docs.jsonl"
        lines = [json.dumps(SAMPLE_RECORDS[0]), "{not json", "", json.dumps(SAMPLE_RECORDS[1])]
        path.write_text("\n".join(lines))

        with caplog.at_level(logging.WARNING, logger="document_store.loader"):
            docs = load_documents(path)

        assert len(docs) == 2
        assert "malformed line 2" in caplog.text

    def test_skips_invalid_records(self, tmp_path, caplog):
        path = tmp_path / "docs.json"
        path.write_text(json.dumps([SAMPLE_RECORDS[0], {"title": "no author"}, "not a record"]))

        with caplog.at_level(logging.WARNING, logger="document_store.loader"):
            docs = load_documents(path)

        assert [d.id for d in docs] == ["doc-1"]
        assert "author" in caplog.text

    def test_empty_file(self, tmp_path):
        path = tmp_path / "docs.jsonl"
        path.write_text("")
        assert load_documents(path) == []

    def test_missing_file(self, tmp_path):
        assert load_documents(tmp_path / "missing.json") == []

    def test_undecodable_file(self, tmp_path, caplog):
        path = tmp_path / "docs.jsonl"
        path.write_bytes(b"\xff\xfe{\"bad\"\n")

        with caplog.at_level(logging.WARNING, logger="document_store.loader"):
            assert load_documents(path) == []

        assert "Failed to read seed file" in caplog.text

    def test_directory(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="document_store.loader"):
            assert load_documents(tmp_path) == []

        assert "Failed to read seed file" in caplog.text


class TestSeedStore:
    def test_wrongly_typed_records_never_reach_the_store(self, tmp_path):
        path = tmp_path / "docs.json"
        bad = dict(SAMPLE_RECORDS[1], id=7, title=5)
        path.write_text(json.dumps([SAMPLE_RECORDS[0], bad]))
        store = DocumentStore()

        assert seed_store(store, path) == 1
        results = store.search(SearchRequest(title_prefixes=["Java"]))
        assert [d.id for d in results] == ["doc-1"]

    def test_seeds_and_searches(self, tmp_path):
        path = tmp_path / "docs.json"
        path.write_text(json.dumps(SAMPLE_RECORDS))
        store = DocumentStore()

        assert seed_store(store, path) == 3
        assert len(store) == 3
        assert store.find_by_id("doc-1").title == "Java Programming"
        assert len(store.search(SearchRequest(author_ids=["author1"]))) == 2

    def test_generates_missing_ids(self, tmp_path):
        path = tmp_path / "docs.json"
        path.write_text(json.dumps(SAMPLE_RECORDS))
        store = DocumentStore()
        seed_store(store, path)
        assert all(d.id for d in store)

    def test_duplicate_ids_collapse(self, tmp_path):
        path = tmp_path / "docs.jsonl"
        newer = dict(SAMPLE_RECORDS[0], title="Java Programming, 2nd edition")
        path.write_text("\n".join(json.dumps(r) for r in [SAMPLE_RECORDS[0], newer]))
        store = DocumentStore()

        assert seed_store(store, path) == 2
        assert len(store) == 1
        assert store.find_by_id("doc-1").title == "Java Programming, 2nd edition"
