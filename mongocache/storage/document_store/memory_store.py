"""In-process document store.

Keeps collections in plain dicts for local development and tests. Supports
the subset of MongoDB query syntax the cache issues: field equality and the
comparison operators $lt, $lte, $gt, $gte and $eq.
"""

import copy
import logging
import operator
from collections.abc import Callable
from typing import Any

from bson import ObjectId

from mongocache.storage.document_store.base import (
    Document,
    DocumentCollection,
    DocumentStore,
    Filter,
)

logger = logging.getLogger(__name__)

_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "$eq": operator.eq,
    "$lt": operator.lt,
    "$lte": operator.le,
    "$gt": operator.gt,
    "$gte": operator.ge,
}


def _matches(document: Document, filter: Filter) -> bool:
    """Check whether a document satisfies every clause of a filter."""
    for field, condition in filter.items():
        if field not in document:
            return False
        value = document[field]
        if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
            for op, operand in condition.items():
                if op not in _OPERATORS:
                    raise ValueError(f"Unsupported query operator: {op}")
                try:
                    if not _OPERATORS[op](value, operand):
                        return False
                except TypeError:
                    return False
        elif value != condition:
            return False
    return True


class MemoryCollection(DocumentCollection):
    """Dict-backed collection. Documents are deep-copied on the way in and out."""

    def __init__(self, name: str):
        self.name = name
        self._documents: dict[ObjectId, Document] = {}

    def _first_match(self, filter: Filter) -> Document | None:
        for document in self._documents.values():
            if _matches(document, filter):
                return document
        return None

    async def upsert_by_filter(self, filter: Filter, replacement: Document) -> Document | None:
        existing = self._first_match(filter)
        doc_id = existing["_id"] if existing is not None else ObjectId()
        stored = copy.deepcopy(replacement)
        stored["_id"] = doc_id
        self._documents[doc_id] = stored
        return copy.deepcopy(stored)

    async def find_one(self, filter: Filter) -> Document | None:
        document = self._first_match(filter)
        return copy.deepcopy(document) if document is not None else None

    async def delete_one(self, filter: Filter) -> dict[str, Any] | None:
        document = self._first_match(filter)
        if document is None:
            return {"acknowledged": True, "deleted_count": 0}
        del self._documents[document["_id"]]
        return {"acknowledged": True, "deleted_count": 1}

    async def delete_many(self, filter: Filter) -> dict[str, Any] | None:
        doomed = [doc_id for doc_id, doc in self._documents.items() if _matches(doc, filter)]
        for doc_id in doomed:
            del self._documents[doc_id]
        return {"acknowledged": True, "deleted_count": len(doomed)}

    def documents(self) -> list[Document]:
        """Snapshot of every stored document, expired or not."""
        return [copy.deepcopy(doc) for doc in self._documents.values()]

    def __len__(self) -> int:
        return len(self._documents)


class MemoryDocumentStore(DocumentStore):
    """DocumentStore keeping every collection in process memory."""

    def __init__(self) -> None:
        self._collections: dict[str, MemoryCollection] = {}

    def collection(self, name: str) -> MemoryCollection:
        if name not in self._collections:
            logger.debug(f"Creating in-memory collection '{name}'")
            self._collections[name] = MemoryCollection(name)
        return self._collections[name]
