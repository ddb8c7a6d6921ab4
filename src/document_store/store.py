"""The in-memory document store."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Iterator
from datetime import datetime

from . import Document, SearchRequest

_LOGGER = logging.getLogger(__name__)


# --- Search predicates (one per criterion) ---


def matches_title_prefixes(document: Document, prefixes: Iterable[str] | None) -> bool:
    if not prefixes:
        return True
    return any(document.title.startswith(prefix) for prefix in prefixes)


def matches_contents(document: Document, substrings: Iterable[str] | None) -> bool:
    if not substrings:
        return True
    return any(substring in document.content for substring in substrings)


def matches_author_ids(document: Document, author_ids: Iterable[str] | None) -> bool:
    if not author_ids:
        return True
    return document.author.id in author_ids


def matches_created_from(document: Document, created_from: datetime | None) -> bool:
    """Exclusive lower bound."""
    if created_from is None:
        return True
    return document.created > created_from


def matches_created_to(document: Document, created_to: datetime | None) -> bool:
    """Exclusive upper bound."""
    if created_to is None:
        return True
    return document.created < created_to


def matches(document: Document, request: SearchRequest) -> bool:
    """Return True if the document satisfies every criterion of the request."""
    return (
        matches_title_prefixes(document, request.title_prefixes)
        and matches_contents(document, request.contains_contents)
        and matches_author_ids(document, request.author_ids)
        and matches_created_from(document, request.created_from)
        and matches_created_to(document, request.created_to)
    )


class DocumentStore:
    """Ordered in-memory collection of documents, unique by id.

    Not thread-safe. Every operation is a linear scan over the documents.
    """

    def __init__(self) -> None:
        self._documents: list[Document] = []

    def save(self, document: Document) -> Document:
        """Insert the document, or replace the stored one with the same id.

        A document without an id gets a fresh UUID. The id is written onto the
        passed object, which is also what gets stored and returned, so later
        changes to it are visible through the store.

        Replacement is total: the new value is stored as given (``created``
        included) and moves to the end of the insertion order.
        """
        if document is None:
            raise ValueError("Document cannot be None")

        if not document.id:
            document.id = str(uuid.uuid4())

        before = len(self._documents)
        self._documents = [d for d in self._documents if d.id != document.id]
        self._documents.append(document)

        if len(self._documents) <= before:
            _LOGGER.debug("Replaced document %s", document.id)
        else:
            _LOGGER.debug("Inserted document %s", document.id)
        return document

    def find_by_id(self, id: str | None) -> Document | None:
        """Return the document with this id, or None."""
        if id is None:
            return None
        return next((d for d in self._documents if d.id == id), None)

    def search(self, request: SearchRequest | None) -> list[Document]:
        """Return matching documents in insertion order.

        ``search(None)`` returns nothing, whereas an empty ``SearchRequest()``
        matches every document.
        """
        if request is None:
            return []
        return [d for d in self._documents if matches(d, request)]

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(list(self._documents))

    def __contains__(self, id: object) -> bool:
        return any(d.id == id for d in self._documents)
