"""
In-memory document store for local development and tests.

Evaluates the same tagged filter clauses the PostgreSQL adapter compiles,
and enforces the configured unique fields among live records so duplicate
writes fail here exactly as they would against the partial unique indexes.
"""

import asyncio
import copy
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import structlog

from jobportal.core.system_constants import UNIQUE_FIELDS
from jobportal.database.error_handling import IntegrityViolationError
from jobportal.domain.interfaces import IDocumentStore
from jobportal.domain.query import (
    FilterClause,
    FilterOperator,
    SortField,
    TextPattern,
    resolve_path,
)
from jobportal.domain.value_objects import new_record_id, utc_timestamp

logger = structlog.get_logger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _comparable(left: Any, right: Any) -> bool:
    if _is_number(left) and _is_number(right):
        return True
    return isinstance(left, str) and isinstance(right, str)


def _matches_pattern(value: Any, pattern: TextPattern) -> bool:
    if not isinstance(value, str):
        return False
    text = pattern.text
    if pattern.case_insensitive:
        value, text = value.casefold(), text.casefold()
    if pattern.anchored:
        return value.startswith(text)
    return text in value


def matches_clause(document: Dict[str, Any], clause: FilterClause) -> bool:
    """Evaluate one clause against a document; missing fields read as None."""
    _, value = resolve_path(document, clause.path)
    op = clause.operator
    target = clause.value

    if op is FilterOperator.EQ:
        return value == target
    if op is FilterOperator.NE:
        return value != target
    if op is FilterOperator.IN:
        return any(value == candidate for candidate in target)
    if op is FilterOperator.REGEX:
        return _matches_pattern(value, target)

    if value is None or not _comparable(value, target):
        return False
    if op is FilterOperator.GT:
        return value > target
    if op is FilterOperator.GTE:
        return value >= target
    if op is FilterOperator.LT:
        return value < target
    if op is FilterOperator.LTE:
        return value <= target
    raise ValueError(f"Unsupported operator: {op}")


def _sort_key(document: Dict[str, Any], field_name: str) -> Tuple[int, Any]:
    # Missing and null values sort first; numbers before strings
    found, value = resolve_path(document, tuple(field_name.split(".")))
    if not found or value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (1, int(value))
    if _is_number(value):
        return (2, value)
    if isinstance(value, str):
        return (3, value)
    return (4, str(value))


class InMemoryDocumentStore(IDocumentStore):
    """Dict-backed document store; every read returns deep copies."""

    def __init__(self, unique_fields: Optional[Dict[str, Tuple[str, ...]]] = None):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._unique_fields = UNIQUE_FIELDS if unique_fields is None else unique_fields
        self._lock = asyncio.Lock()

    async def check_health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "service": "InMemoryDocumentStore",
            "collections": {name: len(docs) for name, docs in self._collections.items()},
        }

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(name, {})

    def _check_unique(self, collection: str, document: Dict[str, Any]) -> None:
        if document.get("isDeleted") is True:
            return
        for field_name in self._unique_fields.get(collection, ()):
            value = document.get(field_name)
            if value is None:
                continue
            for other in self._collection(collection).values():
                if other["id"] == document["id"] or other.get("isDeleted") is True:
                    continue
                if other.get(field_name) == value:
                    raise IntegrityViolationError(
                        f"Duplicate value for {collection}.{field_name}",
                        context={"collection": collection, "field": field_name},
                        field=field_name,
                    )

    def _insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        stored = copy.deepcopy(document)
        stored.setdefault("id", new_record_id())
        now = utc_timestamp()
        stored.setdefault("createdAt", now)
        stored.setdefault("updatedAt", now)
        self._check_unique(collection, stored)
        self._collection(collection)[stored["id"]] = stored
        return copy.deepcopy(stored)

    async def insert_one(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        async with self._lock:
            stored = self._insert(collection, document)
        logger.debug("Document inserted", collection=collection, id=stored["id"])
        return stored

    async def insert_many(self, collection: str, documents: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        async with self._lock:
            stored = [self._insert(collection, document) for document in documents]
        logger.debug("Documents inserted", collection=collection, count=len(stored))
        return stored

    def _matching(self, collection: str, clauses: Sequence[FilterClause]) -> List[Dict[str, Any]]:
        return [
            document
            for document in self._collection(collection).values()
            if all(matches_clause(document, clause) for clause in clauses)
        ]

    async def find(
        self,
        collection: str,
        clauses: Sequence[FilterClause] = (),
        *,
        sort: Optional[Sequence[SortField]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        async with self._lock:
            documents = self._matching(collection, clauses)
            # Stable sorts applied from the least significant field
            for sort_field in reversed(list(sort or [])):
                documents.sort(
                    key=lambda doc, name=sort_field.field: _sort_key(doc, name),
                    reverse=sort_field.descending,
                )
            end = None if limit is None else skip + limit
            return copy.deepcopy(documents[skip:end])

    async def count(self, collection: str, clauses: Sequence[FilterClause] = ()) -> int:
        async with self._lock:
            return len(self._matching(collection, clauses))

    async def find_by_ids(self, collection: str, ids: Sequence[str]) -> List[Dict[str, Any]]:
        async with self._lock:
            documents = self._collection(collection)
            return [copy.deepcopy(documents[i]) for i in dict.fromkeys(ids) if i in documents]

    async def update_one(self, collection: str, record_id: str, changes: Dict[str, Any]) -> int:
        async with self._lock:
            documents = self._collection(collection)
            current = documents.get(record_id)
            if current is None:
                return 0
            updated = {**current, **copy.deepcopy(changes), "id": current["id"]}
            updated["updatedAt"] = utc_timestamp()
            self._check_unique(collection, updated)
            documents[record_id] = updated
        logger.debug("Document updated", collection=collection, id=record_id, fields=sorted(changes))
        return 1

    async def clear(self) -> None:
        async with self._lock:
            self._collections.clear()


__all__ = ["InMemoryDocumentStore", "matches_clause"]
