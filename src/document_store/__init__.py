"""In-memory document storage with upsert, lookup by id, and filtered search."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Author:
    """Author embedded by value in a Document."""

    id: str
    name: str = ""


@dataclass
class Document:
    """A stored record. ``id`` is assigned by the store when left unset."""

    title: str
    content: str
    author: Author
    created: datetime  # set by the caller, never touched by the store
    id: str | None = None


@dataclass
class SearchRequest:
    """Search filters. A field left as None (or empty) places no constraint.

    Criteria are combined with AND; values inside one collection with OR.
    Both date bounds are exclusive.
    """

    title_prefixes: list[str] | None = None
    contains_contents: list[str] | None = None
    author_ids: list[str] | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None


from .store import DocumentStore  # noqa: E402

__all__ = ["Author", "Document", "DocumentStore", "SearchRequest"]
