"""
SQLModel document table used by the PostgreSQL document store.

Every collection shares one table; the record body is stored as JSONB so the
same tagged filter clauses can address any field, including nested paths.
Partial unique indexes enforce uniqueness among live records only, which is
the real guard behind the application-level duplicate checks.
"""

from typing import Any, Dict

from sqlalchemy import Column, Index, String, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from jobportal.core.system_constants import UNIQUE_FIELDS


class DocumentTable(SQLModel, table=True):
    """One stored document of any collection."""

    __tablename__ = "documents"

    id: str = Field(
        sa_column=Column(String(36), primary_key=True),
        description="Record identifier"
    )
    collection: str = Field(
        sa_column=Column(String(64), nullable=False, index=True),
        description="Logical collection name"
    )
    body: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONB, nullable=False),
        description="Document body (camelCase fields, including stamps and markers)"
    )


def unique_index_name(collection: str, field_name: str) -> str:
    return f"uq_documents_{collection}_{field_name}"


for _collection, _fields in UNIQUE_FIELDS.items():
    for _field in _fields:
        Index(
            unique_index_name(_collection, _field),
            DocumentTable.__table__.c.body[_field].astext,
            unique=True,
            postgresql_where=text(
                f"collection = '{_collection}' AND NOT (body @> '{{\"isDeleted\": true}}'::jsonb)"
            ),
        )


__all__ = ["DocumentTable", "unique_index_name"]
