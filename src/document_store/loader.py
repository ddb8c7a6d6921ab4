"""Seed a store from a JSON or JSONL file of document records."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from . import Author, Document
from .store import DocumentStore

_LOGGER = logging.getLogger(__name__)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp. ``Z`` and naive values are read as UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def document_from_record(record: dict) -> Document:
    """Build a Document from a decoded JSON record."""
    author = record.get("author") or {}
    if not isinstance(author, dict) or not author.get("id"):
        raise ValueError("record has no author id")

    created = record.get("created")
    if not isinstance(created, str):
        raise ValueError("record has no created timestamp")

    for key in ("id", "title", "content"):
        if record.get(key) is not None and not isinstance(record[key], str):
            raise ValueError(f"record field {key!r} is not a string")
    if author.get("name") is not None and not isinstance(author["name"], str):
        raise ValueError("record field 'author.name' is not a string")

    return Document(
        id=record.get("id") or None,
        title=record.get("title") or "",
        content=record.get("content") or "",
        author=Author(id=str(author["id"]), name=author.get("name") or ""),
        created=parse_timestamp(created),
    )


def _coerce_records(value: Any) -> list[dict]:
    if isinstance(value, dict):
        items = value.get("documents")
        if isinstance(items, list):
            return [record for record in items if isinstance(record, dict)]
        return [value]
    if isinstance(value, list):
        return [record for record in value if isinstance(record, dict)]
    return []


def _extract_records(raw: str, source_path: Path) -> list[dict]:
    # A whole JSON document first, then JSON Lines.
    try:
        return _coerce_records(json.loads(raw))
    except json.JSONDecodeError:
        pass

    records: list[dict] = []
    for lineno, line in enumerate(raw.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            entry = json.loads(line)
        except json.JSONDecodeError as exc:
            _LOGGER.warning("Skipping malformed line %d in %s: %s", lineno, source_path, exc)
            continue
        records.extend(_coerce_records(entry))
    return records


def load_documents(path: Path) -> list[Document]:
    """Read documents from a seed file. Invalid records are skipped."""
    if not path.exists():
        return []

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _LOGGER.warning("Failed to read seed file %s: %s", path, exc)
        return []

    documents = []
    for index, record in enumerate(_extract_records(raw, path)):
        try:
            documents.append(document_from_record(record))
        except ValueError as exc:
            _LOGGER.warning("Skipping record %d in %s: %s", index, path, exc)
    return documents


def seed_store(store: DocumentStore, path: Path) -> int:
    """Save every document from the seed file into the store.

    Returns:
        Number of documents saved (records sharing an id count once each).
    """
    documents = load_documents(path)
    for document in documents:
        store.save(document)
    _LOGGER.info("Seeded %d document(s) from %s", len(documents), path)
    return len(documents)
