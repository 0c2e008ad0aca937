"""Document store adapters."""

from jobportal.infrastructure.persistence.memory_store import InMemoryDocumentStore
from jobportal.infrastructure.persistence.postgres_store import PostgresDocumentStore

__all__ = ["InMemoryDocumentStore", "PostgresDocumentStore"]
