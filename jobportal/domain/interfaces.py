"""Domain-layer service interfaces.

These abstractions define the stable contracts that the application layer relies on,
while infrastructure adapters provide concrete implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Sequence

from jobportal.domain.query import FilterClause, SortField


class IHealthCheck:
    """Health check interface mixin."""

    @abstractmethod
    async def check_health(self) -> Dict[str, Any]:
        """Return health check details."""
        pass


class IDocumentStore(IHealthCheck, ABC):
    """
    Collection-oriented document store.

    Stores are deliberately unaware of soft deletion: deletion markers are
    ordinary fields, and the soft-delete policy composes its predicate into
    the clauses it passes down. Every write is atomic per document only.
    """

    @abstractmethod
    async def insert_one(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a document, assigning ``id`` and timestamps; return the stored copy."""
        pass

    @abstractmethod
    async def insert_many(self, collection: str, documents: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Bulk insert documents in order."""
        pass

    @abstractmethod
    async def find(
        self,
        collection: str,
        clauses: Sequence[FilterClause] = (),
        *,
        sort: Optional[Sequence[SortField]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Return documents matching every clause."""
        pass

    @abstractmethod
    async def count(self, collection: str, clauses: Sequence[FilterClause] = ()) -> int:
        """Count documents matching every clause."""
        pass

    @abstractmethod
    async def find_by_ids(self, collection: str, ids: Sequence[str]) -> List[Dict[str, Any]]:
        """Keyed lookup used for population; deletion markers are not applied."""
        pass

    @abstractmethod
    async def update_one(self, collection: str, record_id: str, changes: Dict[str, Any]) -> int:
        """Set fields on one document; returns the number of matched documents."""
        pass


__all__ = ["IHealthCheck", "IDocumentStore"]
