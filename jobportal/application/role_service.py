"""Roles and their permission expansion."""

from typing import Any, Dict, List, Optional

import structlog

from jobportal.application.collection_service import CollectionService, Reference
from jobportal.application.soft_delete import SoftDeletePolicy, is_deleted
from jobportal.core.system_constants import ADMIN_ROLE, PERMISSIONS, ROLES
from jobportal.domain.entities.permission import DISPLAY_FIELDS, Permission
from jobportal.domain.entities.role import Role
from jobportal.domain.exceptions import ProtectedResourceError, RoleNotFoundError, ValidationError
from jobportal.domain.interfaces import IDocumentStore
from jobportal.domain.query import FilterClause, FilterOperator
from jobportal.domain.value_objects import Actor, is_valid_record_id

logger = structlog.get_logger(__name__)


class RoleResolver:
    """Loads a role with its live permissions expanded."""

    def __init__(self, store: IDocumentStore):
        self.store = store
        self.roles = SoftDeletePolicy(store, ROLES, kind="role", not_found=RoleNotFoundError)

    async def expand_permissions(self, permission_ids: List[Any]) -> List[Permission]:
        """Expand ids in role order; deleted or missing permissions are revoked."""
        ids = [i for i in permission_ids if isinstance(i, str) and is_valid_record_id(i)]
        if not ids:
            return []
        found = await self.store.find_by_ids(PERMISSIONS, ids)
        live = {doc["id"]: Permission.from_document(doc) for doc in found if not is_deleted(doc)}
        return [live[i] for i in dict.fromkeys(ids) if i in live]

    async def resolve(self, role_id: Any) -> Role:
        """
        Resolve a role and its permission set.

        Raises:
            MalformedIdError: If ``role_id`` is not a record id
            RoleNotFoundError: If the role does not exist or is deleted
        """
        document = await self.roles.get(role_id)
        permissions = await self.expand_permissions(document.get("permissions") or [])
        return Role(
            id=document["id"],
            name=document.get("name", ""),
            description=document.get("description", ""),
            is_active=bool(document.get("isActive", True)),
            permissions=permissions,
        )

    async def find_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        documents = await self.roles.find([FilterClause("name", FilterOperator.EQ, name)], limit=1)
        return documents[0] if documents else None


class RoleService(CollectionService):
    """Admin CRUD over roles."""

    collection = ROLES
    kind = "role"
    not_found_error = RoleNotFoundError
    references = {"permissions": Reference(PERMISSIONS, DISPLAY_FIELDS)}

    def __init__(self, store: IDocumentStore, default_page_size: int = 10):
        super().__init__(store, default_page_size)
        self.resolver = RoleResolver(store)

    @staticmethod
    def _check_permission_ids(payload: Dict[str, Any]) -> None:
        permissions = payload.get("permissions")
        if permissions is None:
            return
        if not isinstance(permissions, list):
            raise ValidationError("permissions must be a list of permission ids")
        invalid = [p for p in permissions if not is_valid_record_id(p)]
        if invalid:
            raise ValidationError(f"Invalid permission ids: {', '.join(map(str, invalid))}")
        # Stored as an ordered set
        payload["permissions"] = list(dict.fromkeys(str(p) for p in permissions))

    async def prepare_create(self, payload: Dict[str, Any], actor: Optional[Actor]) -> Dict[str, Any]:
        payload.setdefault("isActive", True)
        payload.setdefault("permissions", [])
        self._check_permission_ids(payload)
        return payload

    async def prepare_update(
        self, current: Dict[str, Any], changes: Dict[str, Any], actor: Optional[Actor]
    ) -> Dict[str, Any]:
        if current.get("name") == ADMIN_ROLE and changes.get("name", ADMIN_ROLE) != ADMIN_ROLE:
            raise ProtectedResourceError(f"Cannot rename the {ADMIN_ROLE} role")
        self._check_permission_ids(changes)
        return changes

    async def check_removable(self, document: Dict[str, Any]) -> None:
        if document.get("name") == ADMIN_ROLE:
            raise ProtectedResourceError(f"Cannot delete the {ADMIN_ROLE} role")

    async def find_one(self, record_id: Any) -> Dict[str, Any]:
        """Role with its live permissions in display projection."""
        document = await self.records.get(record_id)
        role = await self.resolver.resolve(document["id"])
        document["permissions"] = [p.to_display() for p in role.permissions]
        return document


__all__ = ["RoleResolver", "RoleService"]
