"""Audit envelope: actor stamps on create, update and delete."""

from typing import Any, Dict, Optional

from jobportal.domain.value_objects import Actor

CREATED_BY = "createdBy"
UPDATED_BY = "updatedBy"
DELETED_BY = "deletedBy"

# Maintained by the store, the audit envelope or the soft-delete policy only
RESERVED_FIELDS = frozenset({
    "id",
    "createdAt",
    "updatedAt",
    "isDeleted",
    "deletedAt",
    CREATED_BY,
    UPDATED_BY,
    DELETED_BY,
})


class AuditEnvelope:
    """
    Attaches actor stamps to documents and change sets.

    Each stamp kind lives in its own field, so a later stamp of one kind
    never touches the others; only the latest stamp of each kind is kept.
    """

    @staticmethod
    def strip_reserved(payload: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in payload.items() if k not in RESERVED_FIELDS}

    @classmethod
    def stamp_create(cls, document: Dict[str, Any], actor: Optional[Actor]) -> Dict[str, Any]:
        stamped = cls.strip_reserved(document)
        if actor is not None:
            stamped[CREATED_BY] = actor.stamp()
        return stamped

    @classmethod
    def stamp_update(cls, changes: Dict[str, Any], actor: Optional[Actor]) -> Dict[str, Any]:
        stamped = cls.strip_reserved(changes)
        if actor is not None:
            stamped[UPDATED_BY] = actor.stamp()
        return stamped

    @staticmethod
    def stamp_delete(actor: Optional[Actor]) -> Dict[str, Any]:
        if actor is None:
            return {}
        return {DELETED_BY: actor.stamp()}


__all__ = ["AuditEnvelope", "RESERVED_FIELDS", "CREATED_BY", "UPDATED_BY", "DELETED_BY"]
