"""
Soft-delete policy shared by every collection.

Reads compose a "not deleted" predicate with the caller's clauses; deletes
mark records in place instead of removing them.
"""

from typing import Any, Dict, List, Optional, Sequence, Type

import structlog

from jobportal.application.audit import AuditEnvelope
from jobportal.domain.exceptions import NotFoundError
from jobportal.domain.interfaces import IDocumentStore
from jobportal.domain.query import FilterClause, FilterOperator, SortField
from jobportal.domain.value_objects import Actor, parse_record_id, utc_timestamp

logger = structlog.get_logger(__name__)

NOT_DELETED = FilterClause("isDeleted", FilterOperator.NE, True)


def is_deleted(document: Dict[str, Any]) -> bool:
    return document.get("isDeleted") is True


class SoftDeletePolicy:
    """Collection view that hides soft-deleted records."""

    def __init__(
        self,
        store: IDocumentStore,
        collection: str,
        *,
        kind: str,
        not_found: Type[NotFoundError] = NotFoundError,
    ):
        self.store = store
        self.collection = collection
        self.kind = kind
        self.not_found = not_found

    @staticmethod
    def scope(clauses: Sequence[FilterClause] = ()) -> List[FilterClause]:
        return [*clauses, NOT_DELETED]

    async def find(
        self,
        clauses: Sequence[FilterClause] = (),
        *,
        sort: Optional[Sequence[SortField]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        return await self.store.find(
            self.collection, self.scope(clauses), sort=sort, skip=skip, limit=limit
        )

    async def count(self, clauses: Sequence[FilterClause] = ()) -> int:
        return await self.store.count(self.collection, self.scope(clauses))

    async def find_one(self, record_id: Any) -> Optional[Dict[str, Any]]:
        """Return the live record, or None when it is missing or deleted."""
        normalized = parse_record_id(record_id, kind=self.kind)
        documents = await self.find([FilterClause("id", FilterOperator.EQ, normalized)], limit=1)
        return documents[0] if documents else None

    async def get(self, record_id: Any) -> Dict[str, Any]:
        document = await self.find_one(record_id)
        if document is None:
            raise self.not_found(f"Not found {self.kind} with id: {record_id}")
        return document

    async def get_including_deleted(self, record_id: Any) -> Dict[str, Any]:
        normalized = parse_record_id(record_id, kind=self.kind)
        documents = await self.store.find_by_ids(self.collection, [normalized])
        if not documents:
            raise self.not_found(f"Not found {self.kind} with id: {record_id}")
        return documents[0]

    async def soft_delete(self, record_id: str) -> int:
        """
        Mark a record deleted.

        Returns 1 when the marker was set and 0 when the record was already
        deleted or does not exist; an existing marker and timestamp are kept.
        """
        documents = await self.store.find_by_ids(self.collection, [record_id])
        if not documents or is_deleted(documents[0]):
            return 0
        return await self.store.update_one(
            self.collection,
            record_id,
            {"isDeleted": True, "deletedAt": utc_timestamp()},
        )

    async def remove(self, record_id: Any, actor: Optional[Actor]) -> Dict[str, int]:
        """
        Stamp ``deletedBy`` and soft-delete.

        Raises:
            MalformedIdError: If the id is not a record id
            NotFoundError: If no record, deleted or not, has this id
        """
        document = await self.get_including_deleted(record_id)
        if is_deleted(document):
            logger.info("Record already deleted", collection=self.collection, id=document["id"])
            return {"deleted": 0}

        stamp = AuditEnvelope.stamp_delete(actor)
        if stamp:
            await self.store.update_one(self.collection, document["id"], stamp)
        deleted = await self.soft_delete(document["id"])
        logger.info("Record soft-deleted", collection=self.collection, id=document["id"])
        return {"deleted": deleted}


__all__ = ["SoftDeletePolicy", "NOT_DELETED", "is_deleted"]
