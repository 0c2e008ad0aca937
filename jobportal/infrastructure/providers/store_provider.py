"""Document store provider utilities."""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog

from jobportal.core.config import get_settings
from jobportal.domain.interfaces import IDocumentStore

logger = structlog.get_logger(__name__)

_document_store: Optional[IDocumentStore] = None
_store_lock = asyncio.Lock()


async def get_document_store() -> IDocumentStore:
    """Return the singleton document store selected by ``DOCUMENT_STORE``."""
    global _document_store

    if _document_store is not None:
        return _document_store

    async with _store_lock:
        if _document_store is not None:
            return _document_store

        settings = get_settings()
        if settings.DOCUMENT_STORE == "postgres":
            from jobportal.database.sqlmodel_engine import get_sqlmodel_db_manager
            from jobportal.infrastructure.persistence.postgres_store import PostgresDocumentStore

            db_manager = get_sqlmodel_db_manager(settings)
            await db_manager.initialize()
            _document_store = PostgresDocumentStore(db_manager)
        else:
            from jobportal.infrastructure.persistence.memory_store import InMemoryDocumentStore

            _document_store = InMemoryDocumentStore()

        logger.info("Document store initialized", backend=settings.DOCUMENT_STORE)
        return _document_store


async def set_document_store(store: IDocumentStore) -> None:
    """Install a specific store (tests, embedding)."""
    global _document_store
    async with _store_lock:
        _document_store = store


async def reset_document_store() -> None:
    """Drop the store singleton, closing database connections if any."""
    global _document_store
    async with _store_lock:
        if _document_store is not None and get_settings().DOCUMENT_STORE == "postgres":
            from jobportal.database.sqlmodel_engine import shutdown_sqlmodel_database

            await shutdown_sqlmodel_database()
        _document_store = None


__all__ = ["get_document_store", "set_document_store", "reset_document_store"]
